"""Compile a query description into a parameterized SQL clause."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from docstore.filters import Filter, Sort
from docstore.indexes import IndexCatalog
from docstore.schema import JSON_COLUMN, PRIMARY_KEY_COLUMN, TABLE, ColumnRegistry, quote

logger = logging.getLogger(__name__)

UNBOUNDED = -1


@dataclass(frozen=True)
class QuerySpec:
    """Immutable description of a query: filters, sort and pagination."""

    filters: tuple[Filter, ...] = ()
    sort: Sort | None = None
    limit: int = UNBOUNDED
    offset: int = 0

    @property
    def has_clause(self) -> bool:
        return bool(self.filters) or self.sort is not None


@dataclass(frozen=True)
class CompiledQuery:
    """A WHERE/ORDER/LIMIT/OFFSET clause plus its bound parameters.

    The same clause feeds the SELECT, DELETE and COUNT statements.
    """

    clause: str
    params: tuple[Any, ...]

    def select_sql(self) -> str:
        return f"SELECT {JSON_COLUMN} FROM {TABLE}{self.clause}"

    def delete_sql(self) -> str:
        # DELETE ... ORDER BY/LIMIT needs a compile-time SQLite option; a keyed subquery does not.
        return (
            f"DELETE FROM {TABLE} WHERE {PRIMARY_KEY_COLUMN} IN "
            f"(SELECT {PRIMARY_KEY_COLUMN} FROM {TABLE}{self.clause})"
        )

    def count_sql(self) -> str:
        return f"SELECT COUNT(*) FROM (SELECT 1 FROM {TABLE}{self.clause})"


class QueryCompiler:
    """Translate QuerySpec values into CompiledQuery values.

    Compiling may evolve the schema (new shadow columns) and create indexes.
    """

    def __init__(self, registry: ColumnRegistry, catalog: IndexCatalog) -> None:
        self._registry = registry
        self._catalog = catalog

    def compile(self, spec: QuerySpec) -> CompiledQuery:
        clause = ""
        params: list[Any] = []

        if spec.filters:
            conditions = []
            for f in spec.filters:
                column = self._registry.ensure_column(f.field, f.numeric)
                conditions.append(f"{quote(column)} {f.sql_op} ?")
                params.append(f.value)
            clause += " WHERE " + " AND ".join(conditions)

        if spec.sort is not None:
            column = self._registry.ensure_column(spec.sort.field, spec.sort.numeric)
            clause += f" ORDER BY {quote(column)} {spec.sort.direction}"

        if spec.limit >= 0:
            clause += " LIMIT ?"
            params.append(spec.limit)
        elif spec.offset > 0:
            # SQLite only accepts OFFSET after a LIMIT; -1 means no limit.
            clause += " LIMIT -1"

        if spec.offset > 0:
            clause += " OFFSET ?"
            params.append(spec.offset)

        if spec.has_clause:
            self._catalog.ensure_index(spec.filters, spec.sort)

        logger.debug("Compiled clause %r with %d params", clause, len(params))
        return CompiledQuery(clause=clause, params=tuple(params))
