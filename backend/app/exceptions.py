"""Domain errors raised by the service layer.

Each error carries the HTTP status the JSON API answers with; the HTML routes
catch them and turn the message into a flash message or an inline partial.
"""


class AppError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Malformed or out-of-range input."""

    status_code = 400

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Duplicate email or duplicate watch-list entry."""

    status_code = 409


class UnauthorizedError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class AccountDeactivatedError(ForbiddenError):
    pass
