"""Tests for the SQLite storage backend."""

from __future__ import annotations

import pytest

from docstore import DocstoreConfig
from docstore.errors import ConfigError, DuplicateColumnError, StorageBackendError
from docstore.storage import SqliteStorage, StorageProtocol, open_storage


@pytest.fixture
def storage(tmp_db):
    s = SqliteStorage(tmp_db)
    s.execute("CREATE TABLE t (a TEXT, b REAL)")
    yield s
    s.close()


class TestSqliteStorage:
    def test_satisfies_protocol(self, storage):
        assert isinstance(storage, StorageProtocol)

    def test_open_storage_returns_sqlite(self, tmp_db):
        s = open_storage(tmp_db)
        try:
            assert isinstance(s, SqliteStorage)
        finally:
            s.close()

    def test_execute_returns_affected_rows(self, storage):
        assert storage.execute("INSERT INTO t VALUES (?, ?)", ("x", 1.0)) == 1
        storage.execute("INSERT INTO t VALUES (?, ?)", ("y", 2.0))
        assert storage.execute("DELETE FROM t") == 2

    def test_query_returns_rows(self, storage):
        storage.execute("INSERT INTO t VALUES (?, ?)", ("x", 1.5))
        assert storage.query("SELECT a, b FROM t") == [("x", 1.5)]

    def test_list_columns(self, storage):
        assert storage.list_columns("t") == ["a", "b"]

    def test_list_columns_missing_table(self, storage):
        assert storage.list_columns("nope") == []

    def test_sql_error_is_wrapped(self, storage):
        with pytest.raises(StorageBackendError) as exc_info:
            storage.query("SELECT * FROM missing_table")
        assert exc_info.value.operation == "query"
        assert "missing_table" in exc_info.value.detail

    def test_duplicate_column_is_distinguished(self, storage):
        with pytest.raises(DuplicateColumnError) as exc_info:
            storage.execute("ALTER TABLE t ADD COLUMN a TEXT")
        assert exc_info.value.column == "a"
        assert isinstance(exc_info.value, StorageBackendError)

    def test_transaction_commit(self, storage):
        storage.begin_transaction()
        assert storage.in_transaction
        storage.execute("INSERT INTO t VALUES ('x', 1)")
        storage.commit_transaction()
        assert not storage.in_transaction
        assert storage.query("SELECT COUNT(*) FROM t") == [(1,)]

    def test_transaction_rollback_includes_ddl(self, storage):
        storage.begin_transaction()
        storage.execute("ALTER TABLE t ADD COLUMN c TEXT")
        storage.execute("INSERT INTO t VALUES ('x', 1, 'c')")
        storage.rollback_transaction()
        assert storage.list_columns("t") == ["a", "b"]
        assert storage.query("SELECT COUNT(*) FROM t") == [(0,)]

    def test_commit_without_begin_fails(self, storage):
        with pytest.raises(StorageBackendError):
            storage.commit_transaction()

    def test_storage_info(self, storage, tmp_db):
        info = storage.storage_info()
        assert info == {"backend": "sqlite", "db_path": tmp_db, "journal_mode": "WAL"}

    def test_wal_mode_applied(self, storage):
        assert storage.query("PRAGMA journal_mode") == [("wal",)]

    def test_config_journal_mode(self, tmp_db):
        s = SqliteStorage(tmp_db, config=DocstoreConfig(journal_mode="delete"))
        try:
            assert s.query("PRAGMA journal_mode") == [("delete",)]
        finally:
            s.close()

    def test_invalid_config_rejected_before_connecting(self, tmp_db):
        with pytest.raises(ConfigError):
            SqliteStorage(tmp_db, config=DocstoreConfig(synchronous="sometimes"))

    def test_open_failure_is_wrapped(self, tmp_path):
        with pytest.raises(StorageBackendError) as exc_info:
            SqliteStorage(str(tmp_path / "missing_dir" / "x.db"))
        assert exc_info.value.operation == "open"

    def test_in_memory(self):
        s = SqliteStorage(":memory:")
        try:
            s.execute("CREATE TABLE m (x)")
            assert s.list_columns("m") == ["x"]
        finally:
            s.close()
