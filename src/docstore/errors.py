"""Structured error types for docstore."""

from __future__ import annotations


class DocstoreError(Exception):
    """Base error for all docstore errors."""


class ValidationError(DocstoreError):
    """Raised when caller input fails validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidDocumentError(ValidationError):
    """Raised when a document is null or not a JSON object."""


class InvalidIdError(ValidationError):
    """Raised when a document's id is present but not a string."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Document id must be a string, got {type(value).__name__}")


class InvalidFilterError(ValidationError):
    """Raised when a where()/sort() call names a bad field or operator."""


class InvalidPaginationError(ValidationError):
    """Raised for a negative limit (other than -1) or a negative offset."""


class ConfigError(DocstoreError):
    """Raised when a DocstoreConfig value is not acceptable."""


class StorageBackendError(DocstoreError):
    """Raised when backend storage operations fail."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage backend error during {operation}: {detail}")


class DuplicateColumnError(StorageBackendError):
    """Raised when ALTER TABLE adds a column that already exists."""

    def __init__(self, column: str, detail: str) -> None:
        self.column = column
        super().__init__("add_column", detail)
