class DomainError(Exception):
    """Base exception for business rule violations."""

    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when the requested transition clashes with the current state."""


class BalanceError(DomainError):
    """Raised when a leave request exceeds the remaining balance."""


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are invalid."""

    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    http_status = 403


class NotFoundError(DomainError):
    """Raised when a record id does not exist."""

    http_status = 404
