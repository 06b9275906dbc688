"""Worksheet adapter over a gspread worksheet.

The Worksheet class wraps a ``gspread.Worksheet`` and exposes only the
operations the reconciliation engine needs: a bulk cell load, a batched cell
save, a batched row append and a structured row read. Every remote call goes
through the rate-limited ``safe_call`` wrapper.

Classes:
    Worksheet: A named worksheet of a spreadsheet.
    SheetRecord: One data row read through ``Worksheet.get_rows()``.
"""

from collections.abc import Sequence
from typing import Any

import logging

from gspread import Worksheet as GspreadWorksheet
from gspread.utils import ValueInputOption, ValueRenderOption, rowcol_to_a1

from ..shared.exceptions import SheetError
from .cache import CellCache
from .ratelimit import safe_call
from .schemas import CellValue
from .table import Table
from .utils import from_sheet_value, to_cell_value, to_sheet_value

logger = logging.getLogger(__name__)


class SheetRecord:
    """One data row of a worksheet, addressed by header.

    Records are a read path that bypasses the cell cache. ``save()`` writes
    the whole row back in a single request.

    Attributes:
        row_number: 1-based sheet row number of this record.
    """

    def __init__(
        self,
        worksheet: "Worksheet",
        headers: list[str],
        row_number: int,
        values: list[CellValue],
    ) -> None:
        self._worksheet = worksheet
        self._headers = headers
        self.row_number = row_number
        self._values = list(values) + [None] * (len(headers) - len(values))

    @property
    def a1_range(self) -> str:
        """A1 range of this row, e.g. ``'Reports'!A2:H2``."""
        start = rowcol_to_a1(self.row_number, 1)
        end = rowcol_to_a1(self.row_number, max(len(self._headers), 1))
        return f"'{self._worksheet.title}'!{start}:{end}"

    def get(self, header: str) -> CellValue:
        """Return the value of ``header``; None if empty or unknown."""
        if header not in self._headers:
            return None
        return self._values[self._headers.index(header)]

    def set(self, header: str, value: Any) -> None:
        """Set the value of ``header`` locally.

        Raises:
            SheetError: If the worksheet has no such header.
        """
        if header not in self._headers:
            raise SheetError(f"No header {header} in worksheet {self._worksheet.title}")
        self._values[self._headers.index(header)] = to_cell_value(value)

    def to_dict(self) -> dict[str, CellValue]:
        return {
            header: value
            for header, value in zip(self._headers, self._values)
            if header
        }

    def save(self) -> None:
        """Write the row back to Google Sheets."""
        self._worksheet.update_row(self.row_number, self._values)

    def __repr__(self) -> str:
        return f"SheetRecord({self.a1_range}, {self.to_dict()!r})"


class Worksheet:
    """A named worksheet of a spreadsheet.

    Attributes:
        title: The worksheet (tab) title.
        logger: Logger passed on to the tables created from this worksheet.
    """

    def __init__(
        self,
        worksheet: GspreadWorksheet,
        logger: logging.Logger | None = None,
    ) -> None:
        self._worksheet = worksheet
        self.logger = logger or logging.getLogger(__name__)

    @property
    def title(self) -> str:
        return self._worksheet.title

    @property
    def row_count(self) -> int:
        return self._worksheet.row_count

    @property
    def column_count(self) -> int:
        return self._worksheet.col_count

    def __get_values(self) -> list[list[Any]]:
        return safe_call(
            self._worksheet.get_all_values,
            value_render_option=ValueRenderOption.unformatted,
        )

    def load_cells(self) -> CellCache:
        """Load every cell of the worksheet in one request.

        Returns:
            A CellCache covering the whole worksheet grid.
        """
        self.logger.debug(f"Loading worksheet cells: {self.title}")
        values = self.__get_values()
        cache = CellCache.load(values, self.row_count, self.column_count)
        self.logger.debug(f"Loaded worksheet cells: {cache.stats().model_dump()}")
        return cache

    def save_cells(self, cells: Sequence[tuple[int, int, CellValue]]) -> None:
        """Write cells back to the worksheet in one batched request.

        Args:
            cells: ``(row, col, value)`` triples with 0-based coordinates.
        """
        data = [
            {
                "range": rowcol_to_a1(row + 1, col + 1),
                "values": [[to_sheet_value(value)]],
            }
            for row, col, value in cells
        ]
        safe_call(
            self._worksheet.batch_update,
            data,
            value_input_option=ValueInputOption.raw,
        )

    def add_rows(self, rows: Sequence[Sequence[Any]]) -> None:
        """Append rows after the last row of the worksheet in one request."""
        safe_call(
            self._worksheet.append_rows,
            [list(row) for row in rows],
            value_input_option=ValueInputOption.raw,
        )

    def update_row(self, row_number: int, values: Sequence[CellValue]) -> None:
        """Overwrite the 1-based sheet row ``row_number`` in one request."""
        safe_call(
            self._worksheet.update,
            range_name=rowcol_to_a1(row_number, 1),
            values=[[to_sheet_value(value) for value in values]],
            value_input_option=ValueInputOption.raw,
        )

    def write_headers(self, headers: Sequence[str]) -> None:
        """Write the header schema as the first row."""
        self.update_row(1, list(headers))

    def get_table(self) -> Table:
        """Load every cell and return a Table bound to this worksheet."""
        return Table(self, self.load_cells(), logger=self.logger)

    def get_rows(self) -> list[SheetRecord]:
        """Read every data row as a SheetRecord, without the cell cache."""
        values = self.__get_values()
        if not values:
            return []

        headers = [
            "" if from_sheet_value(v) is None else str(v) for v in values[0]
        ]
        return [
            SheetRecord(
                self,
                headers,
                row_number=index,
                values=[from_sheet_value(v) for v in row],
            )
            for index, row in enumerate(values[1:], start=2)
        ]
