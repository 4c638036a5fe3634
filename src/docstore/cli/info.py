"""docstore info: show database status and materialized columns."""

from __future__ import annotations

import os

import typer

from docstore.cli import _exitcodes as ec
from docstore.cli._output import print_error, print_fields, print_json, print_table
from docstore.cli._storage import open_cli_store, resolve_db_path
from docstore.errors import DocstoreError
from docstore.schema import split_column_name

_LABELS = {
    "backend": "Backend",
    "db_path": "Database",
    "journal_mode": "Journal mode",
    "file_size_bytes": "File size (bytes)",
    "documents": "Documents",
    "indexes_ensured": "Indexes ensured",
}


def info_cmd() -> None:
    """Show database status, document count and shadow columns."""
    from docstore.cli import state

    json_mode = state.json_output
    db_path = resolve_db_path()
    if db_path != ":memory:" and not os.path.exists(db_path):
        print_error(f"Database not found: {db_path}")
        raise typer.Exit(ec.DATABASE_ERROR)

    try:
        store = open_cli_store()
    except DocstoreError as e:
        print_error(f"Cannot open database: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)

    try:
        data = store.storage_info()
    except DocstoreError as e:
        print_error(str(e))
        raise typer.Exit(ec.DATABASE_ERROR)
    finally:
        store.close()

    if os.path.exists(db_path):
        data["file_size_bytes"] = os.path.getsize(db_path)

    if json_mode:
        print_json(data)
        return

    print_fields(data, _LABELS)
    print("\nColumns:")
    rows = [[column, *split_column_name(column)] for column in data["columns"]]
    print_table(["column", "field", "type"], rows)
