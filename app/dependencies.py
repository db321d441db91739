"""Authentication dependencies for FastAPI routes."""

from dataclasses import dataclass

from fastapi import Request

from app.errors import AuthenticationError
from app.services.jwt import get_jwt_service

BEARER_PREFIX = "Bearer "


@dataclass
class CurrentUser:
    """Authenticated user context."""

    user_id: str
    email: str


def get_bearer_token(request: Request) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    return auth_header[len(BEARER_PREFIX) :].strip() or None


def get_current_user(request: Request) -> CurrentUser:
    """Extract and validate user from the access token. Raises 401 if invalid."""
    token = get_bearer_token(request)
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = get_jwt_service().decode_access_token(token)
    if not payload:
        raise AuthenticationError("Invalid or expired token")

    return CurrentUser(user_id=payload["sub"], email=payload["email"])
