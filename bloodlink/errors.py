"""Domain errors raised by the services and mapped to HTTP responses in main."""


class AppError(RuntimeError):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(AppError):
    """Missing or invalid identity/input field."""
    status_code = 400


class ForbiddenError(AppError):
    """Management code or contact verification failed."""
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class DuplicateError(AppError):
    """A pending request already exists for the same phone and blood group."""
    status_code = 409


class ConflictError(AppError):
    """Store-level uniqueness violation (duplicate key)."""
    status_code = 409


class DeliveryError(AppError):
    """Push delivery failed. Contained by the notification dispatcher."""
    status_code = 502
