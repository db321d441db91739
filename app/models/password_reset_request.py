"""Password reset request model."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, String

from app.database import Base, utcnow


class PasswordResetRequest(Base):
    """One password recovery attempt.

    The state is derived from the timestamps:

    - PENDING: ``verified_at`` and ``used_at`` unset, ``otp_expires_at`` in the future
    - VERIFIED: ``verified_at`` set, ``used_at`` unset, ``reset_token_expires_at`` in the future
    - USED: ``used_at`` set

    Rows are never deleted.
    """

    __tablename__ = "password_reset_request"
    __table_args__ = (Index("ix_password_reset_request_user_created", "user_id", "created_at"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    otp_hash = Column(String(64), nullable=False)
    otp_expires_at = Column(DateTime, nullable=False)
    verified_at = Column(DateTime, nullable=True)
    reset_token_hash = Column(String(64), nullable=True, index=True)
    reset_token_expires_at = Column(DateTime, nullable=True)
    used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    @property
    def status(self) -> str:
        """Current protocol state, evaluated against the wall clock."""
        now = utcnow()
        if self.used_at is not None:
            return "USED"
        if self.verified_at is None:
            return "PENDING" if self.otp_expires_at > now else "EXPIRED"
        if self.reset_token_expires_at is not None and self.reset_token_expires_at > now:
            return "VERIFIED"
        return "EXPIRED"
