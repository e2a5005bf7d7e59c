class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400
    error = "Bad Request"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials or access tokens are invalid."""

    status_code = 401
    error = "Unauthorized"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    error = "Forbidden"


class NotFoundError(DomainError):
    status_code = 404
    error = "Not Found"


class ConflictError(DomainError):
    status_code = 409
    error = "Conflict"
