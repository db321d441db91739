"""Authentication service: accounts, token rotation and password recovery."""

import hashlib
import hmac
import logging
import secrets
from datetime import timedelta

import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import utcnow
from app.errors import (
    AuthenticationError,
    ConflictError,
    DeliveryError,
    InvalidCodeError,
    InvalidOrExpiredError,
    ValidationError,
)
from app.models.password_reset_request import PasswordResetRequest
from app.models.user import User
from app.services.email import EmailService, get_email_service
from app.services.jwt import JWTService, TokenPair, get_jwt_service

logger = logging.getLogger("laviou")

OTP_DIGITS = 6
RESET_TOKEN_BYTES = 32
BCRYPT_MAX_BYTES = 72


def hash_token(value: str) -> str:
    """One-way fingerprint for refresh tokens, OTPs and reset tokens."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def generate_otp() -> str:
    """Random zero-padded numeric code."""
    return f"{secrets.randbelow(10**OTP_DIGITS):0{OTP_DIGITS}d}"


class AuthService:
    """Handles registration, login, token rotation and password recovery."""

    def __init__(self, jwt_service: JWTService | None = None, email_service: EmailService | None = None) -> None:
        settings = get_settings()
        self.jwt = jwt_service or get_jwt_service()
        self.email = email_service or get_email_service()
        self.bcrypt_rounds = settings.BCRYPT_ROUNDS
        self.otp_ttl = timedelta(minutes=settings.OTP_EXPIRE_MINUTES)
        self.reset_token_ttl = timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
        self._unknown_user_hash: str | None = None

    # --- passwords ---

    def _hash_password(self, password: str) -> str:
        raw = password.encode("utf-8")
        if len(raw) > BCRYPT_MAX_BYTES:
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(raw, bcrypt.gensalt(self.bcrypt_rounds)).decode("utf-8")

    @staticmethod
    def _check_password(password: str, password_hash: str) -> bool:
        raw = password.encode("utf-8")
        if len(raw) > BCRYPT_MAX_BYTES:
            return False
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))

    def _dummy_hash(self) -> str:
        if self._unknown_user_hash is None:
            self._unknown_user_hash = self._hash_password(secrets.token_hex(16))
        return self._unknown_user_hash

    # --- tokens ---

    def _issue_tokens(self, db: Session, user: User) -> TokenPair:
        """Mint a pair and overwrite the stored refresh fingerprint."""
        pair = self.jwt.create_token_pair(user.id, user.email)
        user.refresh_token_hash = hash_token(pair.refresh_token)
        user.refresh_token_expires_at = pair.refresh_expires_at
        db.commit()
        return pair

    def register(
        self,
        db: Session,
        email: str,
        password: str,
        confirm_password: str,
        first_name: str,
        last_name: str,
    ) -> tuple[User, TokenPair]:
        """Create an account and log it in. Returns (user, tokens)."""
        if password != confirm_password:
            raise ValidationError("Passwords do not match")

        if db.query(User.id).filter(User.email == email).first():
            raise ConflictError("Email already registered")

        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=self._hash_password(password),
        )
        db.add(user)
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError("Email already registered") from e

        tokens = self._issue_tokens(db, user)
        logger.info("Registered user %s", user.id)
        return user, tokens

    def login(self, db: Session, email: str, password: str) -> TokenPair:
        """Authenticate by email and password and issue a fresh pair."""
        user = db.query(User).filter(User.email == email).first()
        # Unknown emails still pay for one bcrypt check.
        password_hash = user.password_hash if user else self._dummy_hash()
        if not self._check_password(password, password_hash) or user is None:
            logger.info("Rejected login attempt")
            raise AuthenticationError("Invalid credentials")
        return self._issue_tokens(db, user)

    def refresh(self, db: Session, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new pair. Each refresh token works once."""
        payload = self.jwt.decode_refresh_token(refresh_token)
        if not payload:
            raise AuthenticationError("Invalid refresh token")

        user = db.get(User, payload["sub"])
        if user is None or not user.refresh_token_hash or not user.refresh_token_expires_at:
            logger.info("Rejected refresh: no active refresh token")
            raise AuthenticationError("Invalid refresh token")
        if user.refresh_token_expires_at <= utcnow():
            logger.info("Rejected refresh for user %s: expired", user.id)
            raise AuthenticationError("Invalid refresh token")

        presented_hash = hash_token(refresh_token)
        if not hmac.compare_digest(user.refresh_token_hash, presented_hash):
            logger.info("Rejected refresh for user %s: token mismatch", user.id)
            raise AuthenticationError("Invalid refresh token")

        # Conditional on the presented hash so a concurrent refresh cannot rotate twice.
        pair = self.jwt.create_token_pair(user.id, user.email)
        rotated = (
            db.query(User)
            .filter(User.id == user.id, User.refresh_token_hash == presented_hash)
            .update(
                {
                    User.refresh_token_hash: hash_token(pair.refresh_token),
                    User.refresh_token_expires_at: pair.refresh_expires_at,
                },
                synchronize_session=False,
            )
        )
        if rotated != 1:
            db.rollback()
            raise AuthenticationError("Invalid refresh token")
        db.commit()
        return pair

    def logout(self, db: Session, user_id: str) -> None:
        """Revoke the stored refresh token. Access tokens live until they expire."""
        user = db.get(User, user_id)
        if user is None:
            raise AuthenticationError("User not found")
        user.refresh_token_hash = None
        user.refresh_token_expires_at = None
        db.commit()

    def get_user(self, db: Session, user_id: str) -> User:
        """Load the authenticated user's record."""
        user = db.get(User, user_id)
        if user is None:
            raise AuthenticationError("User not found")
        return user

    # --- password recovery ---

    def forgot_password(self, db: Session, email: str) -> None:
        """Open a PENDING reset request and send its code.

        Unknown emails are accepted silently; the caller gets the same
        acknowledgement either way.
        """
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            logger.info("Password reset requested for unknown email")
            return

        otp = generate_otp()
        reset_request = PasswordResetRequest(
            user_id=user.id,
            otp_hash=hash_token(otp),
            otp_expires_at=utcnow() + self.otp_ttl,
        )
        db.add(reset_request)
        db.flush()

        # Only a delivered code may become the newest PENDING request.
        try:
            self.email.send_password_reset_otp(user.email, otp)
        except DeliveryError:
            logger.warning("Reset code delivery failed for user %s", user.id)
            db.rollback()
            raise
        db.commit()
        logger.info("Password reset request %s opened for user %s", reset_request.id, user.id)

    def verify_reset_otp(self, db: Session, email: str, otp: str) -> str:
        """Confirm a code against the newest PENDING request. Returns the reset token."""
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            raise InvalidCodeError()

        now = utcnow()
        reset_request = (
            db.query(PasswordResetRequest)
            .filter(
                PasswordResetRequest.user_id == user.id,
                PasswordResetRequest.verified_at.is_(None),
                PasswordResetRequest.used_at.is_(None),
                PasswordResetRequest.otp_expires_at > now,
            )
            .order_by(PasswordResetRequest.created_at.desc(), PasswordResetRequest.id.desc())
            .first()
        )
        if reset_request is None or not hmac.compare_digest(reset_request.otp_hash, hash_token(otp)):
            logger.info("Rejected reset code for user %s", user.id)
            raise InvalidCodeError()

        reset_token = secrets.token_hex(RESET_TOKEN_BYTES)
        reset_request.verified_at = now
        reset_request.reset_token_hash = hash_token(reset_token)
        reset_request.reset_token_expires_at = now + self.reset_token_ttl
        db.commit()
        logger.info("Password reset request %s verified", reset_request.id)
        return reset_token

    def reset_password(self, db: Session, reset_token: str, new_password: str) -> None:
        """Set a new password with a verified reset token, then burn the token.

        The password change, the refresh-token revocation and the USED stamp
        commit together or not at all.
        """
        now = utcnow()
        reset_request = (
            db.query(PasswordResetRequest)
            .filter(
                PasswordResetRequest.reset_token_hash == hash_token(reset_token),
                PasswordResetRequest.verified_at.is_not(None),
                PasswordResetRequest.used_at.is_(None),
                PasswordResetRequest.reset_token_expires_at > now,
            )
            .order_by(PasswordResetRequest.created_at.desc(), PasswordResetRequest.id.desc())
            .first()
        )
        if reset_request is None:
            raise InvalidOrExpiredError()

        user = db.get(User, reset_request.user_id)
        if user is None:
            raise InvalidOrExpiredError()

        password_hash = self._hash_password(new_password)
        try:
            claimed = (
                db.query(PasswordResetRequest)
                .filter(PasswordResetRequest.id == reset_request.id, PasswordResetRequest.used_at.is_(None))
                .update({PasswordResetRequest.used_at: now}, synchronize_session=False)
            )
            if claimed != 1:
                db.rollback()
                raise InvalidOrExpiredError()
            user.password_hash = password_hash
            user.refresh_token_hash = None
            user.refresh_token_expires_at = None
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info("Password reset completed for user %s", user.id)


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
