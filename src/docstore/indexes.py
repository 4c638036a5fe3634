"""Composite index catalog, memoized per query shape."""

from __future__ import annotations

import hashlib
import logging
import threading
from typing import TYPE_CHECKING, Sequence

from docstore.filters import Filter, Sort
from docstore.schema import PRIMARY_KEY_COLUMN, TABLE, quote, shadow_column_name

if TYPE_CHECKING:
    from docstore.storage import StorageProtocol

logger = logging.getLogger(__name__)


def index_signature(filters: Sequence[Filter], sort: Sort | None) -> str:
    """Ordered filter columns followed by the sort column."""
    columns = [shadow_column_name(f.field, f.numeric) for f in filters]
    if sort is not None:
        columns.append(shadow_column_name(sort.field, sort.numeric))
    return ",".join(columns)


def _signature_hash(signature: str) -> str:
    return hashlib.sha256(signature.encode()).hexdigest()


class IndexCatalog:
    """Tracks which composite indexes this store has already created."""

    def __init__(self, storage: StorageProtocol, lock: threading.RLock) -> None:
        self._storage = storage
        self._lock = lock
        self._created: set[str] = set()

    def __len__(self) -> int:
        return len(self._created)

    def __contains__(self, signature_hash: object) -> bool:
        return signature_hash in self._created

    def ensure_index(self, filters: Sequence[Filter], sort: Sort | None) -> str | None:
        """Create the index for this filter/sort shape if needed; return its name."""
        if not filters and sort is None:
            return None

        signature = index_signature(filters, sort)
        # dict.fromkeys keeps first occurrence order: a field filtered twice is indexed once.
        columns = list(dict.fromkeys(signature.split(",")))
        if columns == [PRIMARY_KEY_COLUMN]:
            # Lookups by id use the primary key index.
            return None

        digest = _signature_hash(signature)
        name = f"{TABLE}_idx_{digest[:16]}"
        with self._lock:
            if digest in self._created:
                logger.debug("Index %s already ensured for (%s)", name, signature)
                return name
            self._storage.execute(
                f"CREATE INDEX IF NOT EXISTS {quote(name)} ON {TABLE} "
                f"({', '.join(quote(c) for c in columns)})"
            )
            self._created.add(digest)
        logger.info("Ensured index %s on (%s)", name, ", ".join(columns))
        return name

    def clear(self) -> None:
        with self._lock:
            self._created.clear()
