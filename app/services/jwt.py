"""JWT Token Service."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import get_settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass
class TokenPair:
    """Freshly minted access and refresh tokens."""

    access_token: str
    refresh_token: str
    refresh_expires_at: datetime


class JWTService:
    """Handles access/refresh token creation and validation.

    Access and refresh tokens are signed with different secrets, so a refresh
    token never passes as an access token and vice versa.
    """

    def __init__(self) -> None:
        settings = get_settings()
        self.access_secret = settings.JWT_ACCESS_SECRET
        self.refresh_secret = settings.JWT_REFRESH_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    def _encode(self, user_id: str, email: str, token_type: str, expire: datetime, secret: str) -> str:
        payload = {
            "sub": user_id,
            "email": email,
            "type": token_type,
            "jti": uuid.uuid4().hex,  # keeps two tokens minted in the same second distinct
            "exp": expire,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def create_access_token(self, user_id: str, email: str) -> str:
        """Create a short-lived access token for the given user."""
        expire = datetime.now(timezone.utc) + self.access_ttl
        return self._encode(user_id, email, ACCESS_TOKEN_TYPE, expire, self.access_secret)

    def create_refresh_token(self, user_id: str, email: str) -> tuple[str, datetime]:
        """Create a long-lived refresh token. Returns (token, naive UTC expiry)."""
        expire = datetime.now(timezone.utc) + self.refresh_ttl
        token = self._encode(user_id, email, REFRESH_TOKEN_TYPE, expire, self.refresh_secret)
        return token, expire.replace(tzinfo=None)

    def create_token_pair(self, user_id: str, email: str) -> TokenPair:
        """Mint a new access/refresh pair."""
        refresh_token, refresh_expires_at = self.create_refresh_token(user_id, email)
        return TokenPair(
            access_token=self.create_access_token(user_id, email),
            refresh_token=refresh_token,
            refresh_expires_at=refresh_expires_at,
        )

    def _decode(self, token: str, secret: str, token_type: str) -> dict[str, Any] | None:
        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except JWTError:
            return None
        if payload.get("type") != token_type or not payload.get("sub"):
            return None
        return payload

    def decode_access_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate an access token. Returns None if invalid."""
        return self._decode(token, self.access_secret, ACCESS_TOKEN_TYPE)

    def decode_refresh_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a refresh token. Returns None if invalid."""
        return self._decode(token, self.refresh_secret, REFRESH_TOKEN_TYPE)


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service
