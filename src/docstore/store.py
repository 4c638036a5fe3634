"""DocumentStore: JSON documents in one relational table with lazily indexed fields."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

from docstore.compiler import CompiledQuery, QueryCompiler, QuerySpec
from docstore.config import DocstoreConfig
from docstore.errors import InvalidDocumentError, InvalidIdError
from docstore.indexes import IndexCatalog
from docstore.query import DocumentQuery
from docstore.schema import (
    JSON_COLUMN,
    PRIMARY_KEY_COLUMN,
    TABLE,
    ColumnRegistry,
    SchemaEvolver,
    quote,
    shadow_value,
)
from docstore.storage import StorageProtocol, open_storage

logger = logging.getLogger(__name__)

T = TypeVar("T")


def new_id() -> str:
    return str(uuid.uuid4())


class DocumentStore:
    """Schema-flexible document store over a StorageProtocol backend.

    Documents are persisted whole in ``_json``. Fields that appear in a
    filter or sort get a typed shadow column (``<field>_TEXT`` or
    ``<field>_REAL``) which is created and backfilled on first use and kept
    in sync on every write. The column registry and index catalog live as
    long as this handle and are dropped on close().
    """

    def __init__(self, storage: StorageProtocol) -> None:
        self._storage = storage
        self._lock = threading.RLock()
        self._depth = 0
        self._prepared = False
        self._closed = False
        self._registry = ColumnRegistry(SchemaEvolver(storage, self.transaction), self._lock)
        self._catalog = IndexCatalog(storage, self._lock)
        self._compiler = QueryCompiler(self._registry, self._catalog)

    @property
    def storage(self) -> StorageProtocol:
        return self._storage

    @property
    def columns(self) -> tuple[str, ...]:
        """Materialized columns, primary key first."""
        self._prepare()
        return self._registry.columns

    def _prepare(self) -> None:
        if self._prepared:
            return
        with self._lock:
            if self._prepared:
                return
            self._storage.execute(
                f"CREATE TABLE IF NOT EXISTS {TABLE} "
                f"({PRIMARY_KEY_COLUMN} TEXT PRIMARY KEY, {JSON_COLUMN} TEXT)"
            )
            self._registry.load(self._storage.list_columns(TABLE))
            self._prepared = True
        logger.debug("Prepared %s with columns %s", TABLE, self._registry.columns)

    def _resync_schema(self) -> None:
        # A rollback can undo ALTER TABLE / CREATE INDEX issued inside the transaction.
        self._registry.clear()
        self._registry.load(self._storage.list_columns(TABLE))
        self._catalog.clear()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._storage.close()
            self._registry.clear()
            self._catalog.clear()
            self._prepared = False
            self._closed = True

    def __enter__(self) -> DocumentStore:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --- Transactions ---

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """All-or-nothing unit of work.

        Nested use joins the outermost transaction. On any exception the
        outermost level rolls back and the exception propagates unchanged.
        """
        with self._lock:
            self._prepare()
            if self._depth > 0:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            self._storage.begin_transaction()
            self._depth = 1
            try:
                yield
                self._depth = 0
                self._storage.commit_transaction()
            except BaseException:
                self._depth = 0
                self._storage.rollback_transaction()
                self._resync_schema()
                raise

    def batch(self, work: Callable[[], T]) -> T:
        """Run ``work`` in one transaction and return its result."""
        with self.transaction():
            return work()

    # --- Documents ---

    def put(self, document: dict[str, Any], merge: bool = False) -> str:
        """Insert or replace a document; return its id.

        A missing ``id`` is generated and written back into ``document``.
        With ``merge=True`` the top-level keys of ``document`` are laid over
        the stored version, keeping keys it does not mention.
        """
        if document is None or not isinstance(document, dict):
            raise InvalidDocumentError(
                f"Document must be a JSON object, got {type(document).__name__}"
            )
        if "id" not in document:
            document["id"] = new_id()
        doc_id = document["id"]
        if not isinstance(doc_id, str):
            raise InvalidIdError(doc_id)

        with self.transaction():
            if merge:
                existing = self.get(doc_id)
                if existing is not None:
                    existing.update(document)
                    self._write(existing)
                    return doc_id
            self._write(document)
        return doc_id

    def _write(self, document: dict[str, Any]) -> None:
        columns = self._registry.columns
        values = [shadow_value(document, c) for c in columns]
        sql = (
            f"INSERT OR REPLACE INTO {TABLE} ({JSON_COLUMN}, "
            f"{', '.join(quote(c) for c in columns)}) "
            f"VALUES (?, {', '.join('?' for _ in columns)})"
        )
        self._storage.execute(sql, [json.dumps(document), *values])

    def get(self, doc_id: str) -> dict[str, Any] | None:
        """Return the document with this id, or None."""
        return self.query().where("id", "==", doc_id).get()

    def remove(self, doc_id: str) -> bool:
        """Delete the document with this id; False if there was none."""
        return self.query().where("id", "==", doc_id).remove() > 0

    def query(self) -> DocumentQuery:
        return DocumentQuery(self)

    def count(self) -> int:
        return self.query().count()

    def storage_info(self) -> dict[str, Any]:
        info = self._storage.storage_info()
        info["table"] = TABLE
        info["columns"] = list(self.columns)
        info["documents"] = self.count()
        info["indexes_ensured"] = len(self._catalog)
        return info

    # --- Query execution (called by DocumentQuery) ---

    def _compile(self, spec: QuerySpec) -> CompiledQuery:
        self._prepare()
        return self._compiler.compile(spec)

    def _select_raw(self, spec: QuerySpec) -> list[str]:
        with self._lock:
            compiled = self._compile(spec)
            rows = self._storage.query(compiled.select_sql(), compiled.params)
        return [r[0] for r in rows]

    def _select(self, spec: QuerySpec) -> list[dict[str, Any]]:
        return [self._decode(raw) for raw in self._select_raw(spec)]

    def _delete(self, spec: QuerySpec) -> int:
        with self._lock:
            compiled = self._compile(spec)
            removed = self._storage.execute(compiled.delete_sql(), compiled.params)
        logger.debug("Removed %d documents", removed)
        return removed

    def _count(self, spec: QuerySpec) -> int:
        with self._lock:
            compiled = self._compile(spec)
            rows = self._storage.query(compiled.count_sql(), compiled.params)
        return int(rows[0][0]) if rows else 0

    @staticmethod
    def _decode(raw: str) -> dict[str, Any]:
        return json.loads(raw)


def open_store(db_path: str, config: DocstoreConfig | None = None) -> DocumentStore:
    """Open a document store backed by a SQLite file (or ":memory:")."""
    return DocumentStore(open_storage(db_path, config=config))
