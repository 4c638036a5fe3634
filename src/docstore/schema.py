"""Shadow columns: naming, value extraction, registry and lazy schema evolution."""

from __future__ import annotations

import json
import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, ContextManager, Iterable

from docstore.errors import DuplicateColumnError, InvalidFilterError
from docstore.filters import is_numeric

if TYPE_CHECKING:
    from docstore.storage import StorageProtocol

logger = logging.getLogger(__name__)

TABLE = "documents"
JSON_COLUMN = "_json"
PRIMARY_KEY_COLUMN = "id_TEXT"

TEXT = "TEXT"
REAL = "REAL"

BLANK_TEXT = ""


def sql_type_for(numeric: bool) -> str:
    return REAL if numeric else TEXT


def shadow_column_name(field: str, numeric: bool) -> str:
    """Canonical column for a (field, declared type) pair, e.g. ``index_REAL``."""
    return f"{field}_{sql_type_for(numeric)}"


def split_column_name(column: str) -> tuple[str, str]:
    """Inverse of shadow_column_name: ``index_REAL`` -> ("index", "REAL")."""
    field, _, sql_type = column.rpartition("_")
    return field, sql_type


def shadow_value(document: dict[str, Any], column: str) -> Any:
    """Extract the value a shadow column holds for a document.

    REAL columns hold numbers only: numeric strings are parsed, anything else
    is NULL. TEXT columns hold strings and stringified numbers; a missing,
    null, bool, list or object value is the empty string.
    """
    field, sql_type = split_column_name(column)
    value = document.get(field)
    if sql_type == REAL:
        return _as_real(value)
    if isinstance(value, str):
        return value
    if is_numeric(value):
        try:
            return str(value)
        except ValueError:
            # int beyond the interpreter's str() digit limit
            return BLANK_TEXT
    return BLANK_TEXT


def _as_real(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        try:
            return float(value)
        except (OverflowError, ValueError):
            return None
    return None


def quote(identifier: str) -> str:
    return f'"{identifier}"'


class SchemaEvolver:
    """Adds shadow columns to the documents table and backfills them."""

    def __init__(
        self,
        storage: StorageProtocol,
        transaction: Callable[[], ContextManager[None]],
    ) -> None:
        self._storage = storage
        self._transaction = transaction

    def create_column(self, column: str, sql_type: str) -> None:
        """ALTER TABLE + full backfill, atomically.

        Backfill reads every stored document, so the first filter or sort on a
        new field costs O(rows).
        """
        with self._transaction():
            try:
                self._storage.execute(
                    f"ALTER TABLE {TABLE} ADD COLUMN {quote(column)} {sql_type}"
                )
            except DuplicateColumnError:
                existing = self._existing_spelling(column)
                if existing != column:
                    raise _case_collision(column, existing)
                logger.warning("Column %s already exists; treating as created", column)
                return

            # Materialize all rows first: the table is modified while we walk it.
            rows = self._storage.query(
                f"SELECT {PRIMARY_KEY_COLUMN}, {JSON_COLUMN} FROM {TABLE}"
            )
            update_sql = f"UPDATE {TABLE} SET {quote(column)} = ? WHERE {PRIMARY_KEY_COLUMN} = ?"
            filled = 0
            for doc_id, raw in rows:
                value = shadow_value(json.loads(raw), column)
                if value is None:
                    continue
                self._storage.execute(update_sql, (value, doc_id))
                filled += 1

        logger.info("Created column %s (%s); backfilled %d of %d rows",
                    column, sql_type, filled, len(rows))

    def _existing_spelling(self, column: str) -> str | None:
        folded = column.lower()
        for name in self._storage.list_columns(TABLE):
            if name.lower() == folded:
                return name
        return None


def _case_collision(column: str, existing: str | None) -> InvalidFilterError:
    field, _ = split_column_name(column)
    return InvalidFilterError(
        f"Field '{field}' needs column {column}, which collides with existing column "
        f"{existing}: column names are case-insensitive"
    )


class ColumnRegistry:
    """Ordered set of materialized columns, keyed by (field, declared type).

    Column names are matched case-insensitively, as SQLite matches them.
    """

    def __init__(self, evolver: SchemaEvolver, lock: threading.RLock) -> None:
        self._evolver = evolver
        self._lock = lock
        self._columns: dict[str, str] = {}
        self.clear()

    @property
    def columns(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._columns.values())

    def __contains__(self, column: object) -> bool:
        return isinstance(column, str) and self._columns.get(column.lower()) == column

    def load(self, columns: Iterable[str]) -> None:
        """Rehydrate from the persisted table layout."""
        with self._lock:
            for column in columns:
                if column == JSON_COLUMN:
                    continue
                self._columns.setdefault(column.lower(), column)

    def ensure_column(self, field: str, numeric: bool) -> str:
        column = shadow_column_name(field, numeric)
        with self._lock:
            existing = self._columns.get(column.lower())
            if existing == column:
                return column
            if existing is not None:
                raise _case_collision(column, existing)
            self._evolver.create_column(column, sql_type_for(numeric))
            self._columns[column.lower()] = column
        return column

    def clear(self) -> None:
        with self._lock:
            self._columns = {PRIMARY_KEY_COLUMN.lower(): PRIMARY_KEY_COLUMN}
