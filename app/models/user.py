"""User model."""

import uuid

from sqlalchemy import Column, DateTime, String

from app.database import Base, utcnow


class User(Base):
    """Registered account and its current refresh-token fingerprint."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(256), unique=True, nullable=False, index=True)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    password_hash = Column(String(256), nullable=False)
    refresh_token_hash = Column(String(64), nullable=True)  # sha256 hex, one live token per user
    refresh_token_expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
