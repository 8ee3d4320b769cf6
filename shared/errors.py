"""Application error taxonomy.

Every error the service layer raises on purpose derives from ``AppError``.
The HTTP layer turns them into ``{"success": false, "error": ...}`` using the
class's ``status_code``; the message is meant to be shown to the end user as is.
"""


class AppError(Exception):
    """Base class for anticipated application errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    """Referenced entity does not exist or is outside the caller's scope."""

    status_code = 404


class ValidationError(AppError):
    """Input is well-formed but violates a business rule."""

    status_code = 400


class ConflictError(AppError):
    """Operation blocked by existing state (e.g. dependent rows)."""

    status_code = 409


class DuplicateError(ConflictError):
    """Unique value (slug, code, email) already taken within its scope."""


class UnauthorizedError(AppError):
    """No caller identity on the request."""

    status_code = 401


class ForbiddenError(AppError):
    """Caller lacks the role required for the operation."""

    status_code = 403


class UnexpectedError(AppError):
    """Infrastructure failure that is not specifically anticipated."""

    status_code = 500
