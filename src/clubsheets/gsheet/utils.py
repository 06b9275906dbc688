"""Utility functions for the gsheet layer.

Helpers converting between caller-facing row values and the raw cell values
stored in a worksheet, and the strict equality used for row matching.

Functions:
    strict_equals: Compare two cell values without type coercion.
    to_cell_value: Convert a row value into a raw cell value.
    from_sheet_value: Normalize a value read from the Sheets API.
    to_sheet_value: Convert a cached cell value into its API payload.
    row_to_mapping: Turn a Row (mapping or pydantic model) into a dict.

Example:
    >>> strict_equals(5, "5")
    False
    >>> strict_equals(5, 5.0)
    True
    >>> to_cell_value(date(2024, 6, 1))
    '2024-06-01'
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from .schemas import MISSING, CellValue, Row, RowValue


def strict_equals(left: Any, right: Any) -> bool:
    """Compare two cell values without type coercion.

    Strings never equal numbers and booleans never equal numbers, even when
    Python's ``==`` would say so (``True == 1``). Ints and floats compare
    numerically, because the Sheets API does not distinguish them.

    Args:
        left: A cached cell value (or MISSING).
        right: A needle value (or MISSING).

    Returns:
        True if both values have the same kind and are equal.
    """
    if left is MISSING or right is MISSING:
        return left is right

    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right

    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right

    return type(left) is type(right) and left == right


def to_cell_value(value: RowValue) -> CellValue:
    """Convert a row value into a raw cell value.

    Dates and datetimes are stored as ISO-8601 text; every other scalar is
    stored as is.
    """
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def from_sheet_value(value: Any) -> CellValue:
    """Normalize a value read from the Sheets API; empty cells become None."""
    if value == "" or value is None:
        return None
    return value


def to_sheet_value(value: CellValue) -> str | int | float | bool:
    """Convert a cached cell value into its API payload; None clears the cell."""
    if value is None:
        return ""
    return value


def row_to_mapping(values: Row | BaseModel) -> dict[str, Any]:
    """Turn a Row into a plain ``header -> value`` dict.

    Pydantic models are dumped by alias, so a model whose field aliases are
    the header names can be passed wherever a Row is accepted.
    """
    if isinstance(values, BaseModel):
        return values.model_dump(by_alias=True)
    if isinstance(values, Mapping):
        return dict(values)
    raise TypeError(f"Expected a mapping or a pydantic model, got {type(values)!r}")
