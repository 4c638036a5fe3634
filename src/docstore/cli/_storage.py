"""CLI helpers for opening the document store."""

from __future__ import annotations

from docstore.config import DocstoreConfig
from docstore.store import DocumentStore, open_store


def resolve_db_path() -> str:
    """Return the database path from CLI state."""
    from docstore.cli import state

    return state.db


def _config_from_env() -> DocstoreConfig:
    """Build store config from CLI environment defaults."""
    from docstore.cli import state

    cfg = DocstoreConfig.from_env()
    cfg.log_level = state.log_level
    return cfg


def open_cli_store() -> DocumentStore:
    """Open the document store selected by the global --db option."""
    return open_store(resolve_db_path(), config=_config_from_env())
