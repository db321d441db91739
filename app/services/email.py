"""Outbound email for password recovery codes."""

import logging
import smtplib
from email.message import EmailMessage

from app.config import get_settings
from app.errors import DeliveryError

logger = logging.getLogger("laviou")

OTP_SUBJECT = "Your Laviou password reset code"


class EmailService:
    """Sends password reset codes over SMTP.

    Outside production, a missing SMTP setup or a failed send is not fatal: the
    code is written to the application log so local testing is never blocked.
    In production both cases raise ``DeliveryError``.
    """

    def __init__(self) -> None:
        self.settings = get_settings()

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.SMTP_HOST and self.settings.SMTP_FROM_EMAIL)

    def _build_message(self, to_email: str, otp: str) -> EmailMessage:
        minutes = self.settings.OTP_EXPIRE_MINUTES
        msg = EmailMessage()
        msg["Subject"] = OTP_SUBJECT
        msg["From"] = f"{self.settings.SMTP_FROM_NAME} <{self.settings.SMTP_FROM_EMAIL}>"
        msg["To"] = to_email
        msg.set_content(f"Your password reset code is: {otp}\n\nThis code expires in {minutes} minutes.")
        msg.add_alternative(
            f"""
            <div style="font-family:Arial,sans-serif;line-height:1.5">
              <h2>Password reset</h2>
              <p>Your password reset code is:</p>
              <p style="font-size:28px;letter-spacing:4px;font-weight:bold">{otp}</p>
              <p>This code expires in <b>{minutes} minutes</b>.</p>
              <p>If you didn't request this, you can ignore this email.</p>
            </div>
            """,
            subtype="html",
        )
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        settings = self.settings
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT) as server:
            if settings.SMTP_USE_TLS:
                server.starttls()
            if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.send_message(msg)

    def send_password_reset_otp(self, to_email: str, otp: str) -> None:
        """Deliver a reset code, falling back to the log outside production."""
        if not self.is_configured:
            if self.settings.is_production:
                raise DeliveryError("Email delivery is not configured")
            logger.warning("SMTP not configured. OTP for %s: %s", to_email, otp)
            return

        try:
            self._deliver(self._build_message(to_email, otp))
        except (smtplib.SMTPException, OSError) as e:
            if self.settings.is_production:
                logger.error("Failed to send reset code to %s: %s", to_email, e)
                raise DeliveryError() from e
            logger.error("SMTP send failed; falling back to console OTP for %s: %s", to_email, e)
            logger.warning("OTP for %s: %s", to_email, otp)
            return

        logger.info("Sent password reset code to %s", to_email)


_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    """Get singleton email service instance."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
