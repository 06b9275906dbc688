"""Data schemas for the gsheet layer.

This module defines the value types flowing through the reconciliation
engine, and the small Pydantic models returned by it.

Classes:
    AddOrUpdateResult: Outcome of a ``Table.add_or_update`` call.
    CellStats: Counters describing a loaded cell cache.
    SheetRow: Base class for schema-validated report rows.

Example:
    >>> from pydantic import Field
    >>> class SessionRow(SheetRow):
    ...     class_id: str = Field(alias="Class Id")
    ...     confirmed: int = Field(alias="Confirmed")
    >>> SessionRow(**{"Class Id": "c1", "Confirmed": 3}).model_dump(by_alias=True)
    {'Class Id': 'c1', 'Confirmed': 3}
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Final, TypeAlias

from pydantic import BaseModel, ConfigDict, Field


class _Missing:
    """Marker for a value that is absent, as opposed to an empty cell."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

# Raw value of a single cell, as read with UNFORMATTED_VALUE rendering.
# Empty cells are None.
CellValue: TypeAlias = str | int | float | bool | None

# Value of a named field in a row record.
RowValue: TypeAlias = str | int | float | bool | date | datetime | None

Row: TypeAlias = Mapping[str, RowValue]


class AddOrUpdateResult(BaseModel):
    """Outcome of a ``Table.add_or_update`` call.

    Attributes:
        existing: True if at least one existing row matched the key and was
            updated, False if a new row was queued.
    """

    model_config = ConfigDict(frozen=True)

    existing: bool


class CellStats(BaseModel):
    """Counters describing a loaded cell cache."""

    rows: int = Field(description="Number of grid rows, header included")
    columns: int = Field(description="Number of grid columns")
    non_empty: int = Field(description="Number of cells holding a value")


class SheetRow(BaseModel):
    """Base class for schema-validated report rows.

    Fields should declare the column header as their alias; rows are dumped
    by alias before they reach the table.
    """

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def headers(cls) -> list[str]:
        """Return the header schema, in field declaration order."""
        return [
            field_info.alias or field_name
            for field_name, field_info in cls.model_fields.items()
        ]
