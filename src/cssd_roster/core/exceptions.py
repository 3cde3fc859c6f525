class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist or is not owned by the claimed party."""


class InvalidStateError(DomainError):
    """Raised when a request is no longer in a state that allows the action."""


class ConstraintViolation(DomainError):
    """Raised by a store when a write breaks a database constraint."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
