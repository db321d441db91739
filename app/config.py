"""Configuration settings for the Laviou API."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

APP_ENVIRONMENTS = ("development", "test", "production")
MIN_SECRET_LENGTH = 16


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./laviou.db")

    # JWT
    JWT_ACCESS_SECRET: str = os.getenv("JWT_ACCESS_SECRET", secrets.token_urlsafe(32))
    JWT_REFRESH_SECRET: str = os.getenv("JWT_REFRESH_SECRET", secrets.token_urlsafe(32))
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "30"))

    # Password recovery
    OTP_EXPIRE_MINUTES: int = int(os.getenv("OTP_EXPIRE_MINUTES", "10"))
    RESET_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "15"))
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # SMTP
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    SMTP_FROM_EMAIL: str | None = os.getenv("SMTP_FROM_EMAIL")
    SMTP_FROM_NAME: str = os.getenv("SMTP_FROM_NAME", "Laviou")
    SMTP_USE_TLS: bool = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
    SMTP_TIMEOUT: int = int(os.getenv("SMTP_TIMEOUT", "15"))

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    CORS_ORIGIN: str = os.getenv("CORS_ORIGIN", "*")

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS_ORIGIN: "*" or a comma-separated list of origins."""
        raw = self.CORS_ORIGIN.strip()
        if raw == "*":
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    def validate(self) -> list[str]:
        """Validate settings and return list of problems."""
        errors = []
        if self.APP_ENV not in APP_ENVIRONMENTS:
            errors.append(f"APP_ENV must be one of {', '.join(APP_ENVIRONMENTS)}, got '{self.APP_ENV}'")
        for name in ("JWT_ACCESS_SECRET", "JWT_REFRESH_SECRET"):
            if name not in os.environ:
                errors.append(f"{name} is not set - using auto-generated key (not persistent across restarts)")
            elif len(getattr(self, name)) < MIN_SECRET_LENGTH:
                errors.append(f"{name} must be at least {MIN_SECRET_LENGTH} characters")
        if self.JWT_ACCESS_SECRET == self.JWT_REFRESH_SECRET:
            errors.append("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
