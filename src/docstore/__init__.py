"""docstore: schema-flexible JSON documents in SQLite with lazily indexed fields."""

__version__ = "0.1.0"

from docstore.config import DocstoreConfig
from docstore.errors import (
    ConfigError,
    DocstoreError,
    DuplicateColumnError,
    InvalidDocumentError,
    InvalidFilterError,
    InvalidIdError,
    InvalidPaginationError,
    StorageBackendError,
    ValidationError,
)
from docstore.query import DocumentQuery
from docstore.storage import SqliteStorage, StorageProtocol, open_storage
from docstore.store import DocumentStore, open_store

__all__ = [
    "__version__",
    "DocumentStore",
    "DocumentQuery",
    "open_store",
    "open_storage",
    "SqliteStorage",
    "StorageProtocol",
    "DocstoreConfig",
    "DocstoreError",
    "ValidationError",
    "InvalidDocumentError",
    "InvalidIdError",
    "InvalidFilterError",
    "InvalidPaginationError",
    "StorageBackendError",
    "DuplicateColumnError",
    "ConfigError",
]
