class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidShiftError(ValidationError):
    """Raised when a start/end pair cannot form a positive work duration."""


class InvalidAmountError(ValidationError):
    """Raised when a monetary field is negative or not a finite number."""


class InvalidConsumptionError(ValidationError):
    """Raised when a consumption description is missing or too long."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""
