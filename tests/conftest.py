"""Shared test fixtures for docstore tests."""

from __future__ import annotations

import pytest

from docstore import DocumentStore, open_store
from docstore.storage import SqliteStorage


@pytest.fixture
def tmp_db(tmp_path):
    """Create a temporary SQLite database path."""
    return str(tmp_path / "test.db")


@pytest.fixture
def store(tmp_db):
    """Create a DocumentStore with a temporary database."""
    s = open_store(tmp_db)
    yield s
    s.close()


class RecordingStorage(SqliteStorage):
    """SqliteStorage that keeps every executed statement for assertions."""

    def __init__(self, db_path: str) -> None:
        super().__init__(db_path)
        self.statements: list[tuple[str, tuple]] = []

    def execute(self, statement, params=()):
        self.statements.append((statement, tuple(params)))
        return super().execute(statement, params)

    def query(self, statement, params=()):
        self.statements.append((statement, tuple(params)))
        return super().query(statement, params)

    def matching(self, prefix: str) -> list[str]:
        return [s for s, _ in self.statements if s.startswith(prefix)]


@pytest.fixture
def recording(tmp_db):
    """A store over RecordingStorage; yields (store, storage)."""
    storage = RecordingStorage(tmp_db)
    s = DocumentStore(storage)
    yield s, storage
    s.close()


@pytest.fixture
def batched(store):
    """Store seeded with 1000 {type: batched, index: i} documents in one batch."""

    def seed():
        for i in range(1000):
            store.put({"id": f"b{i}", "type": "batched", "index": i})

    store.batch(seed)
    return store
