"""docstore import: bulk load JSONL documents in one transaction."""

from __future__ import annotations

import json
import os
from typing import Any

import typer

from docstore.cli import _exitcodes as ec
from docstore.cli._output import print_error, print_json
from docstore.cli._storage import open_cli_store
from docstore.errors import DocstoreError, StorageBackendError, ValidationError


def import_cmd(
    input_path: str = typer.Argument(..., help="JSONL file or directory of .jsonl files"),
    merge: bool = typer.Option(False, "--merge", help="Overlay onto stored documents"),
) -> None:
    """Import documents from JSONL; either all are written or none."""
    from docstore.cli import state

    try:
        records = _load_jsonl(input_path)
    except (OSError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)

    if not records:
        print("No records to import.")
        return

    try:
        store = open_cli_store()
    except DocstoreError as e:
        print_error(f"Cannot open database: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)

    try:
        ids = store.batch(lambda: [store.put(rec, merge=merge) for rec in records])
    except ValidationError as e:
        print_error(f"Import aborted, nothing written: {e}")
        raise typer.Exit(ec.USAGE_ERROR)
    except StorageBackendError as e:
        print_error(f"Import aborted, nothing written: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)
    finally:
        store.close()

    if state.json_output:
        print_json({"imported": len(ids)})
    else:
        print(f"Imported {len(ids)} document(s)")


def _load_jsonl(path: str) -> list[Any]:
    """Load JSONL records from a file or directory."""
    records: list[Any] = []

    if os.path.isdir(path):
        for fname in sorted(os.listdir(path)):
            if fname.endswith(".jsonl"):
                records.extend(_read_jsonl_file(os.path.join(path, fname)))
    elif os.path.isfile(path):
        records = _read_jsonl_file(path)
    else:
        raise FileNotFoundError(f"Input path not found: {path}")

    return records


def _read_jsonl_file(filepath: str) -> list[Any]:
    """Read a single JSONL file."""
    records: list[Any] = []
    with open(filepath) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise ValueError(f"{filepath}:{line_num}: Invalid JSON: {e}")
    return records
