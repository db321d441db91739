"""Application error taxonomy.

Services raise these; ``main.py`` renders them as ``{"detail": message}`` with
the matching status code. Messages on the auth and recovery errors are kept
generic so responses never reveal which check failed.
"""


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Invalid credentials"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class InvalidCodeError(AppError):
    status_code = 400
    default_message = "Invalid or expired code"


class InvalidOrExpiredError(AppError):
    status_code = 400
    default_message = "Invalid or expired reset token"


class DeliveryError(AppError):
    status_code = 503
    default_message = "Unable to send reset code"
