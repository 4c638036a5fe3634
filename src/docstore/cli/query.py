"""docstore query: filter, sort and page through documents."""

from __future__ import annotations

from typing import Optional

import typer

from docstore.cli import _exitcodes as ec
from docstore.cli._filters import apply_cli_filters, group_filter_args
from docstore.cli._output import FORMATS, print_documents, print_error, print_json
from docstore.cli._storage import open_cli_store
from docstore.errors import DocstoreError, StorageBackendError, ValidationError


def query_cmd(
    filter_args: Optional[list[str]] = typer.Option(
        None, "--filter", help="FIELD OP VALUE_JSON (repeatable)"
    ),
    sort: Optional[str] = typer.Option(None, "--sort", help="Sort field"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    text_sort: bool = typer.Option(
        False, "--text-sort", help="Sort on the field's text column instead of numeric"
    ),
    limit: Optional[int] = typer.Option(None, "--limit", help="Max results"),
    offset: Optional[int] = typer.Option(None, "--offset", help="Skip first N results"),
    count: bool = typer.Option(False, "--count", help="Print the number of matches only"),
    delete: bool = typer.Option(False, "--delete", help="Remove matching documents"),
    fmt: str = typer.Option("json", "--format", help="Output format: json or yaml"),
) -> None:
    """Query documents; filters are ANDed."""
    from docstore.cli import state

    if count and delete:
        print_error("--count and --delete are mutually exclusive")
        raise typer.Exit(ec.USAGE_ERROR)
    if fmt not in FORMATS:
        print_error(f"--format must be one of: {', '.join(FORMATS)}")
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        triples = group_filter_args(filter_args)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        store = open_cli_store()
    except DocstoreError as e:
        print_error(f"Cannot open database: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)

    try:
        q = apply_cli_filters(store.query(), triples)
        if sort:
            q = q.sort(sort, ascending=not desc, numeric=not text_sort)
        if limit is not None:
            q = q.limit(limit)
        if offset is not None:
            q = q.offset(offset)

        if count:
            n = q.count()
            if state.json_output:
                print_json({"count": n})
            else:
                print(n)
        elif delete:
            n = q.remove()
            if state.json_output:
                print_json({"removed": n})
            else:
                print(f"Removed {n} document(s)")
        else:
            print_documents(q.list(), fmt)
    except (ValidationError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)
    except StorageBackendError as e:
        print_error(str(e))
        raise typer.Exit(ec.DATABASE_ERROR)
    finally:
        store.close()
