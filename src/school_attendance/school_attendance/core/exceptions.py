class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 500


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when there is no valid session or login credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when the requested resource does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a write would violate a uniqueness rule."""

    status_code = 409


class InternalError(DomainError):
    """Raised when an operation fails for reasons the caller cannot fix."""

    status_code = 500
