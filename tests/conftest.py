"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret-0123456789")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.models.password_reset_request import PasswordResetRequest  # noqa: E402, F401
from app.models.user import User  # noqa: E402, F401
from app.services.auth import AuthService  # noqa: E402
from app.services.email import EmailService  # noqa: E402

TEST_EMAIL = "test@example.com"
TEST_PASSWORD = "password123"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="client")
def client_fixture(db_session: Session):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="outbox")
def outbox_fixture(monkeypatch):
    """Capture reset codes instead of sending email. Yields a list of (email, otp)."""
    sent: list[tuple[str, str]] = []

    def capture(self, to_email: str, otp: str) -> None:
        sent.append((to_email, otp))

    monkeypatch.setattr(EmailService, "send_password_reset_otp", capture)
    return sent


@pytest.fixture(name="auth_service")
def auth_service_fixture() -> AuthService:
    return AuthService()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, auth_service: AuthService):
    """Create a test user and return its id, email and tokens."""
    user, tokens = auth_service.register(db_session, TEST_EMAIL, TEST_PASSWORD, TEST_PASSWORD, "Test", "User")
    return {
        "user_id": user.id,
        "email": user.email,
        "access_token": tokens.access_token,
        "refresh_token": tokens.refresh_token,
    }
