"""CLI filter token parser: applies FIELD OP VALUE_JSON triples to a DocumentQuery."""

from __future__ import annotations

import json
from typing import Any

from docstore.query import DocumentQuery

# Map CLI operator tokens to query operators
_OP_MAP: dict[str, str] = {
    "eq": "==",
    "ne": "!=",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
}


def group_filter_args(filter_args: list[str] | None) -> list[tuple[str, str, str]]:
    """Group --filter values into (FIELD, OP, VALUE_JSON) triples.

    Accepts either three separate --filter values per triple or one
    space-separated "FIELD OP VALUE_JSON" string per --filter.
    """
    if not filter_args:
        return []

    triples: list[tuple[str, str, str]] = []
    if len(filter_args) % 3 == 0 and all(len(a.split(None, 2)) == 1 for a in filter_args[::3]):
        for i in range(0, len(filter_args), 3):
            triples.append((filter_args[i], filter_args[i + 1], filter_args[i + 2]))
        return triples

    for arg in filter_args:
        parts = arg.split(None, 2)
        if len(parts) != 3:
            raise ValueError(f"Invalid filter (expected 'FIELD OP VALUE_JSON'): {arg}")
        triples.append((parts[0], parts[1], parts[2]))
    return triples


def parse_operator(token: str) -> str:
    op = _OP_MAP.get(token, token)
    if op not in _OP_MAP.values():
        raise ValueError(
            f"Unknown filter operator '{token}'. "
            f"Valid operators: {', '.join(sorted(_OP_MAP))} (or == != > >= < <=)"
        )
    return op


def parse_value(value_json: str) -> Any:
    """Decode VALUE_JSON; a bare word that is not JSON is taken as a string."""
    try:
        value = json.loads(value_json)
    except json.JSONDecodeError:
        return value_json
    return value


def apply_cli_filters(q: DocumentQuery, triples: list[tuple[str, str, str]]) -> DocumentQuery:
    """AND every triple onto the query; the JSON type of VALUE picks text vs numeric."""
    for field, op_token, value_json in triples:
        q = q.where(field, parse_operator(op_token), parse_value(value_json))
    return q
