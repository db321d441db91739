"""Pydantic schemas for authentication endpoints."""

from pydantic import EmailStr, Field

from app.models.user import User
from app.schemas.common import CamelModel
from app.services.jwt import TokenPair


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str = Field(min_length=6)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class VerifyResetOtpRequest(CamelModel):
    email: EmailStr
    otp: str = Field(min_length=6, max_length=6, description="6-digit code received by email")


class ResetPasswordRequest(CamelModel):
    token: str = Field(min_length=4, description="Reset token returned by verify-reset-otp")
    password: str = Field(min_length=8)


class UserResponse(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email, first_name=user.first_name, last_name=user.last_name)


class TokensResponse(CamelModel):
    access_token: str
    refresh_token: str

    @classmethod
    def from_pair(cls, pair: TokenPair) -> "TokensResponse":
        return cls(access_token=pair.access_token, refresh_token=pair.refresh_token)


class RegisterResponse(CamelModel):
    user: UserResponse
    tokens: TokensResponse


class ForgotPasswordResponse(CamelModel):
    sent: bool = True


class ResetTokenResponse(CamelModel):
    reset_token: str
