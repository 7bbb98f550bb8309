class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class FormatError(DomainError):
    """Raised when an uploaded sheet has no recognizable header row."""


class NotFoundError(DomainError):
    """Raised when a record or employee does not exist."""


class LookupFailure(DomainError):
    """Raised by directory adapters when the employee store is unreachable."""
