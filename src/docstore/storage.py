"""Storage backends: the narrow relational contract the document store consumes."""

from __future__ import annotations

import re
import sqlite3
from typing import Any, Protocol, Sequence, runtime_checkable

from docstore.config import DocstoreConfig
from docstore.errors import DuplicateColumnError, StorageBackendError

_DUPLICATE_COLUMN_RE = re.compile(r"duplicate column name: (\S+)")


@runtime_checkable
class StorageProtocol(Protocol):
    """Backend-agnostic storage contract used by the document store."""

    def execute(self, statement: str, params: Sequence[Any] = ()) -> int: ...

    def query(self, statement: str, params: Sequence[Any] = ()) -> list[tuple[Any, ...]]: ...

    def list_columns(self, table: str) -> list[str]: ...

    def begin_transaction(self) -> None: ...

    def commit_transaction(self) -> None: ...

    def rollback_transaction(self) -> None: ...

    def close(self) -> None: ...

    def storage_info(self) -> dict[str, Any]: ...


class SqliteStorage:
    """SQLite-backed storage with explicit transaction control."""

    def __init__(self, db_path: str, config: DocstoreConfig | None = None) -> None:
        cfg = (config or DocstoreConfig()).validate()
        self.db_path = db_path
        self.config = cfg
        try:
            # isolation_level=None: no implicit BEGIN, transactions are issued explicitly.
            self._conn = sqlite3.connect(
                db_path,
                timeout=cfg.timeout_s,
                isolation_level=None,
                check_same_thread=False,
            )
            if db_path != ":memory:":
                self._conn.execute(f"PRAGMA journal_mode={cfg.journal_mode.upper()}")
            self._conn.execute(f"PRAGMA synchronous={cfg.synchronous.upper()}")
        except sqlite3.Error as e:
            raise StorageBackendError("open", str(e)) from e

    def execute(self, statement: str, params: Sequence[Any] = ()) -> int:
        """Run a non-query statement and return the number of affected rows."""
        try:
            cursor = self._conn.execute(statement, tuple(params))
        except sqlite3.OperationalError as e:
            match = _DUPLICATE_COLUMN_RE.search(str(e))
            if match:
                raise DuplicateColumnError(match.group(1), str(e)) from e
            raise StorageBackendError("execute", str(e)) from e
        except sqlite3.Error as e:
            raise StorageBackendError("execute", str(e)) from e
        return cursor.rowcount

    def query(self, statement: str, params: Sequence[Any] = ()) -> list[tuple[Any, ...]]:
        try:
            return self._conn.execute(statement, tuple(params)).fetchall()
        except sqlite3.Error as e:
            raise StorageBackendError("query", str(e)) from e

    def list_columns(self, table: str) -> list[str]:
        rows = self.query(f'PRAGMA table_info("{table}")')
        return [str(r[1]) for r in rows]

    def begin_transaction(self) -> None:
        self.execute("BEGIN IMMEDIATE")

    def commit_transaction(self) -> None:
        self.execute("COMMIT")

    def rollback_transaction(self) -> None:
        try:
            self._conn.rollback()
        except sqlite3.Error as e:
            raise StorageBackendError("rollback", str(e)) from e

    @property
    def in_transaction(self) -> bool:
        return self._conn.in_transaction

    def close(self) -> None:
        self._conn.close()

    def storage_info(self) -> dict[str, Any]:
        """Return backend info for operator commands."""
        return {
            "backend": "sqlite",
            "db_path": self.db_path,
            "journal_mode": self.config.journal_mode.upper(),
        }


def open_storage(db_path: str, config: DocstoreConfig | None = None) -> StorageProtocol:
    """Open the storage backend for a database path."""
    return SqliteStorage(db_path, config=config)
