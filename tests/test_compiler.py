"""Tests for QueryCompiler clause generation."""

from __future__ import annotations

import threading

import pytest

from docstore.compiler import CompiledQuery, QueryCompiler, QuerySpec
from docstore.filters import Filter, Sort
from docstore.indexes import IndexCatalog
from docstore.schema import ColumnRegistry


class NullEvolver:
    def __init__(self):
        self.created = []

    def create_column(self, column, sql_type):
        self.created.append(column)


class NullStorage:
    def __init__(self):
        self.statements = []

    def execute(self, statement, params=()):
        self.statements.append(statement)
        return 0


@pytest.fixture
def parts():
    lock = threading.RLock()
    evolver = NullEvolver()
    storage = NullStorage()
    compiler = QueryCompiler(ColumnRegistry(evolver, lock), IndexCatalog(storage, lock))
    return compiler, evolver, storage


class TestClause:
    def test_empty_spec(self, parts):
        compiler, evolver, storage = parts
        compiled = compiler.compile(QuerySpec())
        assert compiled == CompiledQuery(clause="", params=())
        assert evolver.created == []
        assert storage.statements == []

    def test_full_spec(self, parts):
        compiler, evolver, _ = parts
        spec = QuerySpec(
            filters=(Filter.build("type", "==", "batched"), Filter.build("index", ">=", 100)),
            sort=Sort.build("index", ascending=False),
            limit=2,
            offset=5,
        )
        compiled = compiler.compile(spec)
        assert compiled.clause == (
            ' WHERE "type_TEXT" = ? AND "index_REAL" >= ?'
            ' ORDER BY "index_REAL" DESC LIMIT ? OFFSET ?'
        )
        assert compiled.params == ("batched", 100.0, 2, 5)
        assert evolver.created == ["type_TEXT", "index_REAL"]

    def test_offset_without_limit(self, parts):
        compiler, _, _ = parts
        compiled = compiler.compile(QuerySpec(offset=3))
        assert compiled.clause == " LIMIT -1 OFFSET ?"
        assert compiled.params == (3,)

    def test_limit_only_creates_nothing(self, parts):
        compiler, evolver, storage = parts
        compiled = compiler.compile(QuerySpec(limit=10))
        assert compiled.clause == " LIMIT ?"
        assert evolver.created == []
        assert storage.statements == []

    def test_zero_offset_is_omitted(self, parts):
        compiler, _, _ = parts
        assert compiler.compile(QuerySpec(limit=1, offset=0)).clause == " LIMIT ?"

    def test_text_sort_ascending(self, parts):
        compiler, _, _ = parts
        compiled = compiler.compile(QuerySpec(sort=Sort.build("name", numeric=False)))
        assert compiled.clause == ' ORDER BY "name_TEXT" ASC'

    def test_values_are_never_inlined(self, parts):
        compiler, _, _ = parts
        hostile = "x'; DROP TABLE documents; --"
        compiled = compiler.compile(QuerySpec(filters=(Filter.build("name", "==", hostile),)))
        assert hostile not in compiled.clause
        assert compiled.params == (hostile,)

    def test_filter_compiles_index(self, parts):
        compiler, _, storage = parts
        compiler.compile(QuerySpec(filters=(Filter.build("a", "<", 1),)))
        assert len(storage.statements) == 1
        assert storage.statements[0].startswith("CREATE INDEX IF NOT EXISTS")


class TestStatements:
    def test_statement_shapes(self):
        compiled = CompiledQuery(clause=' WHERE "a_TEXT" = ?', params=("x",))
        assert compiled.select_sql() == 'SELECT _json FROM documents WHERE "a_TEXT" = ?'
        assert compiled.delete_sql() == (
            "DELETE FROM documents WHERE id_TEXT IN "
            '(SELECT id_TEXT FROM documents WHERE "a_TEXT" = ?)'
        )
        assert compiled.count_sql() == (
            'SELECT COUNT(*) FROM (SELECT 1 FROM documents WHERE "a_TEXT" = ?)'
        )

    def test_has_clause(self):
        assert not QuerySpec(limit=5, offset=1).has_clause
        assert QuerySpec(sort=Sort.build("a")).has_clause
        assert QuerySpec(filters=(Filter.build("a", "==", "b"),)).has_clause
