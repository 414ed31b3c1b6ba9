"""Error taxonomy shared by services and API handlers.

Every error reaches the client as ``{"message": ...}`` with the status code
carried by the exception class.
"""


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request data"


class AuthenticationError(AppError):
    """Absent or unusable credential (no token, unknown user, bad password)."""

    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(AppError):
    """A token was presented but failed verification."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Uniqueness violation (pre-check or store constraint)."""

    status_code = 409
    default_message = "Duplicate record"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal server error"
