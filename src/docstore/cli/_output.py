"""Output formatting helpers for the CLI."""

from __future__ import annotations

import json
import sys
from typing import Any

import yaml

FORMATS = ("json", "yaml")


def print_json(data: Any) -> None:
    """Print a command result as indented JSON."""
    print(json.dumps(data, indent=2, default=str))


def print_documents(data: dict[str, Any] | list[dict[str, Any]], fmt: str = "json") -> None:
    """Print documents verbatim as JSON or YAML, keeping key order."""
    if fmt == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
        return
    print(json.dumps(data, indent=2))


def print_fields(data: dict[str, Any], labels: dict[str, str]) -> None:
    """Print ``Label: value`` lines for the keys of ``labels`` present in data."""
    for key, label in labels.items():
        if key in data:
            print(f"{label}: {data[key]}")


def print_table(headers: list[str], rows: list[list[Any]]) -> None:
    """Print left-aligned columns separated by two spaces."""
    if not rows:
        return

    cells = [[str(v) for v in row] for row in rows]
    widths = [max(len(h), *(len(row[i]) for row in cells)) for i, h in enumerate(headers)]

    print("  ".join(h.ljust(w) for h, w in zip(headers, widths)))
    print("  ".join("-" * w for w in widths))
    for row in cells:
        print("  ".join(v.ljust(w) for v, w in zip(row, widths)))


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    print(f"Error: {msg}", file=sys.stderr)
