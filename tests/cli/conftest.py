"""Shared fixtures for CLI tests."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from docstore import open_store
from docstore.cli import app


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_db(tmp_path):
    """Temp DB path passed to every command via --db."""
    return str(tmp_path / "cli_test.db")


@pytest.fixture
def seeded_db(cli_db):
    """Create a DB with some seed documents."""
    with open_store(cli_db) as store:
        store.put({"id": "c1", "name": "Alice", "age": 30, "tier": "Gold"})
        store.put({"id": "c2", "name": "Bob", "age": 25, "tier": "Silver"})
        store.put({"id": "c3", "name": "Cara", "age": 41, "tier": "Gold"})
    return cli_db


@pytest.fixture
def invoke(runner, cli_db):
    """Invoke the CLI against cli_db; global options go first in ``args``."""

    def _invoke(args: list[str], input: str | None = None):
        return runner.invoke(app, ["--db", cli_db, *args], input=input, catch_exceptions=False)

    return _invoke
