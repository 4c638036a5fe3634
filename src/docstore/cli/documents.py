"""docstore put / get / remove: single-document commands."""

from __future__ import annotations

import json
import sys
from typing import Any

import typer

from docstore.cli import _exitcodes as ec
from docstore.cli._output import FORMATS, print_documents, print_error, print_json
from docstore.cli._storage import open_cli_store
from docstore.errors import DocstoreError, StorageBackendError, ValidationError


def _read_document(doc_json: str) -> Any:
    raw = sys.stdin.read() if doc_json == "-" else doc_json
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        print_error(f"Invalid JSON document: {e}")
        raise typer.Exit(ec.USAGE_ERROR)


def put_cmd(
    doc_json: str = typer.Argument(..., help="Document as JSON, or '-' to read stdin"),
    merge: bool = typer.Option(False, "--merge", help="Overlay onto the stored document"),
) -> None:
    """Insert or replace a document and print its id."""
    from docstore.cli import state

    document = _read_document(doc_json)
    try:
        store = open_cli_store()
    except DocstoreError as e:
        print_error(f"Cannot open database: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)

    try:
        doc_id = store.put(document, merge=merge)
    except ValidationError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)
    except StorageBackendError as e:
        print_error(str(e))
        raise typer.Exit(ec.DATABASE_ERROR)
    finally:
        store.close()

    if state.json_output:
        print_json({"id": doc_id})
    else:
        print(doc_id)


def get_cmd(
    doc_id: str = typer.Argument(..., help="Document id"),
    fmt: str = typer.Option("json", "--format", help="Output format: json or yaml"),
) -> None:
    """Print a document by id."""
    if fmt not in FORMATS:
        print_error(f"--format must be one of: {', '.join(FORMATS)}")
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        store = open_cli_store()
    except DocstoreError as e:
        print_error(f"Cannot open database: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)

    try:
        document = store.get(doc_id)
    except StorageBackendError as e:
        print_error(str(e))
        raise typer.Exit(ec.DATABASE_ERROR)
    finally:
        store.close()

    if document is None:
        print_error(f"Document not found: {doc_id}")
        raise typer.Exit(ec.NOT_FOUND)
    print_documents(document, fmt)


def remove_cmd(
    doc_id: str = typer.Argument(..., help="Document id"),
) -> None:
    """Delete a document by id."""
    from docstore.cli import state

    try:
        store = open_cli_store()
    except DocstoreError as e:
        print_error(f"Cannot open database: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)

    try:
        removed = store.remove(doc_id)
    except StorageBackendError as e:
        print_error(str(e))
        raise typer.Exit(ec.DATABASE_ERROR)
    finally:
        store.close()

    if state.json_output:
        print_json({"id": doc_id, "removed": removed})
    elif removed:
        print(f"Removed {doc_id}")
    if not removed:
        if not state.json_output:
            print_error(f"Document not found: {doc_id}")
        raise typer.Exit(ec.NOT_FOUND)
