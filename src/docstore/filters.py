"""Filter and sort value types for the docstore query builder."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from docstore.errors import InvalidFilterError

# Field names become part of a column identifier, so only plain identifiers are allowed.
_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

OPERATORS: frozenset[str] = frozenset({"==", "!=", "<", "<=", ">", ">="})

SQL_OPERATORS: dict[str, str] = {
    "==": "=",
    "!=": "!=",
    "<": "<",
    "<=": "<=",
    ">": ">",
    ">=": ">=",
}


def is_numeric(value: Any) -> bool:
    """True for int/float values; bool is deliberately excluded."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_field(field: str) -> None:
    if not isinstance(field, str) or not field:
        raise InvalidFilterError("No field provided")
    if not _FIELD_RE.match(field):
        raise InvalidFilterError(
            f"Invalid field name '{field}': must match [A-Za-z_][A-Za-z0-9_]*"
        )


def validate_operator(op: str) -> None:
    if not isinstance(op, str) or not op:
        raise InvalidFilterError("No operation provided")
    if op not in OPERATORS:
        raise InvalidFilterError(
            f"Unknown operation '{op}'. Valid operations: {', '.join(sorted(OPERATORS))}"
        )


@dataclass(frozen=True)
class Filter:
    """One comparison against a top-level document field.

    ``numeric`` records how the caller declared the value and selects the
    shadow column type: REAL for numbers, TEXT for strings.
    """

    field: str
    op: str
    value: Any
    numeric: bool = False

    @classmethod
    def build(cls, field: str, op: str, value: Any) -> Filter:
        """Validate a where() call and infer the declared type from the value."""
        validate_field(field)
        validate_operator(op)
        if is_numeric(value):
            try:
                number = float(value)
            except OverflowError:
                raise InvalidFilterError(
                    f"Filter value for '{field}' is too large to compare as a number"
                )
            return cls(field=field, op=op, value=number, numeric=True)
        if isinstance(value, str):
            return cls(field=field, op=op, value=value, numeric=False)
        raise InvalidFilterError(
            f"Filter value for '{field}' must be a string or a number, "
            f"got {type(value).__name__}"
        )

    @property
    def sql_op(self) -> str:
        return SQL_OPERATORS[self.op]


@dataclass(frozen=True)
class Sort:
    """The single sort key of a query."""

    field: str
    ascending: bool = True
    numeric: bool = True

    @classmethod
    def build(cls, field: str, ascending: bool = True, numeric: bool = True) -> Sort:
        validate_field(field)
        return cls(field=field, ascending=bool(ascending), numeric=bool(numeric))

    @property
    def direction(self) -> str:
        return "ASC" if self.ascending else "DESC"
