class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when an interval's start is not before its end."""


class NotFoundError(DomainError):
    """Raised when a referenced punch, grant or override does not exist."""


class TransitionError(DomainError):
    """Raised when a reviewed punch is asked to move to the other terminal state."""
