"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.rate_limit import limiter
from app.schemas.auth import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    ResetTokenResponse,
    TokensResponse,
    UserResponse,
    VerifyResetOtpRequest,
)
from app.schemas.common import ApiResponse
from app.services.auth import get_auth_service

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=ApiResponse[RegisterResponse])
@limiter.limit("5/minute")
def register(request: Request, body: RegisterRequest, db: Session = Depends(get_db)) -> ApiResponse[RegisterResponse]:
    """Create an account and receive a token pair."""
    user, tokens = get_auth_service().register(
        db,
        email=body.email,
        password=body.password,
        confirm_password=body.confirm_password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    data = RegisterResponse(user=UserResponse.from_user(user), tokens=TokensResponse.from_pair(tokens))
    return ApiResponse(message="Registered", data=data)


@router.post("/login", response_model=ApiResponse[TokensResponse])
@limiter.limit("10/minute")
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> ApiResponse[TokensResponse]:
    """Authenticate and receive a token pair."""
    tokens = get_auth_service().login(db, body.email, body.password)
    return ApiResponse(message="Logged in", data=TokensResponse.from_pair(tokens))


@router.post("/logout", response_model=ApiResponse[bool])
def logout(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[bool]:
    """Revoke the refresh token. The access token stays valid until it expires."""
    get_auth_service().logout(db, user.user_id)
    return ApiResponse(message="Logged out", data=True)


@router.get("/me", response_model=ApiResponse[UserResponse])
def me(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[UserResponse]:
    """Get the current user's profile."""
    record = get_auth_service().get_user(db, user.user_id)
    return ApiResponse(data=UserResponse.from_user(record))


@router.post("/refresh", response_model=ApiResponse[TokensResponse])
@limiter.limit("20/minute")
def refresh(request: Request, body: RefreshTokenRequest, db: Session = Depends(get_db)) -> ApiResponse[TokensResponse]:
    """Rotate the refresh token and receive a new pair."""
    tokens = get_auth_service().refresh(db, body.refresh_token)
    return ApiResponse(message="Refreshed", data=TokensResponse.from_pair(tokens))


@router.post("/forgot-password", response_model=ApiResponse[ForgotPasswordResponse])
@limiter.limit("3/minute")
def forgot_password(
    request: Request, body: ForgotPasswordRequest, db: Session = Depends(get_db)
) -> ApiResponse[ForgotPasswordResponse]:
    """Request a password reset code by email."""
    get_auth_service().forgot_password(db, body.email)
    return ApiResponse(message="If the email exists, a reset code was sent.", data=ForgotPasswordResponse())


@router.post("/verify-reset-otp", response_model=ApiResponse[ResetTokenResponse])
@limiter.limit("10/minute")
def verify_reset_otp(
    request: Request, body: VerifyResetOtpRequest, db: Session = Depends(get_db)
) -> ApiResponse[ResetTokenResponse]:
    """Verify the emailed code and receive a one-time reset token."""
    reset_token = get_auth_service().verify_reset_otp(db, body.email, body.otp)
    return ApiResponse(message="OTP verified", data=ResetTokenResponse(reset_token=reset_token))


@router.post("/reset-password", response_model=ApiResponse[bool])
@limiter.limit("5/minute")
def reset_password(request: Request, body: ResetPasswordRequest, db: Session = Depends(get_db)) -> ApiResponse[bool]:
    """Set a new password with a reset token. Signs out every device."""
    get_auth_service().reset_password(db, body.token, body.password)
    return ApiResponse(message="Password reset", data=True)
