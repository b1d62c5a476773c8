class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an administrative operation targets a missing student."""


class StorageError(Exception):
    """Raised when the database fails (connectivity, unexpected SQL errors)."""


class DuplicateRecordError(StorageError):
    """Raised when an insert violates a uniqueness constraint."""
