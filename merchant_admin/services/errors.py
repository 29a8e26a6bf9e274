"""Service-level exceptions.

Services raise these; the application maps them to the structured
error response { "error": { "code", "message", "detail" } }.
"""

from typing import Any


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, detail: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class UnauthorizedError(ServiceError):
    """Missing authentication or insufficient role/group/store scope."""

    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Login required"


class ResourceNotFoundError(ServiceError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(ServiceError):
    """Uniqueness violation (username, catalog code within a store)."""

    status_code = 409
    code = "CONFLICT"
    default_message = "Resource already exists"


class OperationNotAllowedError(ServiceError):
    status_code = 400
    code = "OPERATION_NOT_ALLOWED"
    default_message = "Operation not allowed"


class TooManyAttemptsError(ServiceError):
    status_code = 429
    code = "TOO_MANY_ATTEMPTS"
    default_message = "Too many failed login attempts"
