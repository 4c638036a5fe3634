"""docstore CLI: operator console for inspecting and editing a document store."""

from __future__ import annotations

from typing import Optional

import typer

from docstore.cli import documents, import_cmd, info, query

app = typer.Typer(
    name="docstore",
    help="docstore CLI: operator console for JSON document stores.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    db: str = "docstore.db"
    json_output: bool = False
    log_level: str = "WARNING"


state = _State()


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError, version

        try:
            v = version("docstore")
        except PackageNotFoundError:
            from docstore import __version__ as v
        print(f"docstore {v}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    db: Optional[str] = typer.Option(
        None,
        "--db",
        envvar="DOCSTORE_DB",
        help="SQLite database file path (default: docstore.db)",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output when supported"),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        envvar="DOCSTORE_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all docstore commands."""
    from docstore.log import setup_logging

    state.db = db or "docstore.db"
    state.json_output = json_output
    state.log_level = log_level or "WARNING"
    setup_logging(state.log_level)
    if ctx.invoked_subcommand is None and not version:
        print(ctx.get_help())
        raise typer.Exit()


# Register top-level commands
app.command(name="put")(documents.put_cmd)
app.command(name="get")(documents.get_cmd)
app.command(name="remove")(documents.remove_cmd)
app.command(name="query")(query.query_cmd)
app.command(name="import")(import_cmd.import_cmd)
app.command(name="info")(info.info_cmd)


def main() -> None:
    """Entry point for the docstore CLI."""
    app()
