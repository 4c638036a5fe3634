"""Query DSL: the chainable DocumentQuery builder."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any, Iterator

from docstore.compiler import UNBOUNDED, QuerySpec
from docstore.errors import InvalidPaginationError
from docstore.filters import Filter, Sort

if TYPE_CHECKING:
    from docstore.store import DocumentStore


def _check_count(name: str, n: int, minimum: int) -> int:
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidPaginationError(f"{name} must be an integer, got {type(n).__name__}")
    if n < minimum:
        raise InvalidPaginationError(f"Cannot use negative numbers for the {name}: {n}")
    return n


class DocumentQuery:
    """Chainable query over the documents of one store.

    Every builder call returns a new query; a query value can be shared and
    extended without affecting other holders. Nothing touches the database
    until a terminal call (list, iter, get, remove, count), and each terminal
    call compiles afresh.

        store.query().where("type", "==", "batched").sort("index", ascending=False).limit(2).list()
    """

    def __init__(self, store: DocumentStore, spec: QuerySpec | None = None) -> None:
        self._store = store
        self._spec = spec or QuerySpec()

    @property
    def spec(self) -> QuerySpec:
        return self._spec

    def _with(self, **changes: Any) -> DocumentQuery:
        return DocumentQuery(self._store, replace(self._spec, **changes))

    # --- Building ---

    def where(self, field: str, op: str, value: str | float) -> DocumentQuery:
        """Add a filter; ``op`` is one of == != < <= > >=.

        A numeric value compares against the field's REAL column, a string
        value against its TEXT column.
        """
        f = Filter.build(field, op, value)
        return self._with(filters=self._spec.filters + (f,))

    def sort(self, field: str, ascending: bool = True, numeric: bool = True) -> DocumentQuery:
        return self._with(sort=Sort.build(field, ascending, numeric))

    def limit(self, n: int) -> DocumentQuery:
        """Maximum number of documents, or -1 for all."""
        return self._with(limit=_check_count("limit", n, UNBOUNDED))

    def offset(self, n: int) -> DocumentQuery:
        return self._with(offset=_check_count("offset", n, 0))

    # --- Terminals ---

    def list(self) -> list[dict[str, Any]]:
        return self._store._select(self._spec)

    def iter(self) -> Iterator[dict[str, Any]]:
        """Lazily yield matching documents; execution starts on first next()."""
        for raw in self._store._select_raw(self._spec):
            yield self._store._decode(raw)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return self.iter()

    def get(self) -> dict[str, Any] | None:
        docs = self._store._select(replace(self._spec, limit=1))
        return docs[0] if docs else None

    def first(self) -> dict[str, Any] | None:
        return self.get()

    def remove(self) -> int:
        """Delete every matching document and return how many were removed."""
        return self._store._delete(self._spec)

    def count(self) -> int:
        return self._store._count(self._spec)

    def __repr__(self) -> str:
        return f"DocumentQuery({self._spec!r})"
