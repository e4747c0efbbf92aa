"""
Custom exception classes and error handling.

Provides a consistent error surface for callers of the journal core.
"""
from typing import Optional


class JournalError(Exception):
    """Base journal exception with consistent structure."""

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.error_code = error_code


class NotFoundError(JournalError):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            detail=f"{resource} not found: {identifier}",
            error_code="NOT_FOUND"
        )
        self.resource = resource
        self.identifier = identifier


class StorageUnavailableError(JournalError):
    """Storage cannot be opened, read or written. Not retried here."""

    def __init__(self, detail: str):
        super().__init__(
            detail=f"Storage unavailable: {detail}",
            error_code="STORAGE_UNAVAILABLE"
        )


class ValidationError(JournalError):
    """Validation error."""

    def __init__(self, detail: str, field: Optional[str] = None):
        error_code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(
            detail=detail,
            error_code=error_code
        )
        self.field = field


class ConflictError(JournalError):
    """Resource conflict (e.g., duplicate entry)."""

    def __init__(self, detail: str):
        super().__init__(
            detail=detail,
            error_code="CONFLICT"
        )
