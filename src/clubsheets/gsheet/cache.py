"""In-memory cell cache for a single worksheet.

A CellCache is a dense snapshot of a worksheet grid, built from one bulk read
when a Table is loaded. Writes made through the cache are applied in place
and remembered as dirty coordinates until the Table flushes them.

The cache never observes writes made by other processes after it is loaded;
one Table (and so one cache) per worksheet per run is assumed.

Example:
    >>> cache = CellCache.load([["id", "name"], ["1", "Alice"]], 2, 2)
    >>> cache.header_columns
    {'id': 0, 'name': 1}
    >>> cache.set(1, 1, "Bob")
    >>> cache.dirty_cells()
    [(1, 1, 'Bob')]
"""

from collections.abc import Sequence
from typing import Any

from .schemas import CellStats, CellValue
from .utils import from_sheet_value


class CellCache:
    """A dense ``rows x columns`` snapshot of a worksheet's raw values.

    Attributes:
        header_columns: Mapping of header name to its 0-based column index,
            derived from row 0.
    """

    def __init__(self, grid: list[list[CellValue]], column_count: int) -> None:
        self._grid = grid
        self._column_count = column_count
        self._dirty: set[tuple[int, int]] = set()
        self.header_columns = self.__build_header_columns()

    @classmethod
    def load(
        cls,
        values: Sequence[Sequence[Any]],
        row_count: int,
        column_count: int,
    ) -> "CellCache":
        """Build a cache from the values returned by a bulk read.

        The Sheets API trims trailing empty rows and cells, so the grid is
        padded with empty cells up to ``row_count x column_count``. Values
        outside the grid are kept as well, in case the worksheet properties
        were stale when the read happened.

        Args:
            values: Rows of raw values, as returned by the Sheets API.
            row_count: Number of rows of the worksheet grid.
            column_count: Number of columns of the worksheet grid.

        Returns:
            A populated CellCache.
        """
        column_count = max([column_count, *(len(row) for row in values)])
        row_count = max(row_count, len(values))

        grid: list[list[CellValue]] = []
        for r in range(row_count):
            source = values[r] if r < len(values) else []
            row = [from_sheet_value(v) for v in source]
            row.extend([None] * (column_count - len(row)))
            grid.append(row)

        return cls(grid, column_count)

    def __build_header_columns(self) -> dict[str, int]:
        header_columns: dict[str, int] = {}
        if not self._grid:
            return header_columns

        for col, value in enumerate(self._grid[0]):
            if value is None:
                continue
            header_columns[str(value)] = col
        return header_columns

    def __in_grid(self, row: int, col: int) -> bool:
        return 0 <= row < len(self._grid) and 0 <= col < self._column_count

    @property
    def row_count(self) -> int:
        return len(self._grid)

    @property
    def column_count(self) -> int:
        return self._column_count

    def get(self, row: int, col: int) -> CellValue:
        """Return the cached value at ``(row, col)``; out-of-range is None."""
        if not self.__in_grid(row, col):
            return None
        return self._grid[row][col]

    def set(self, row: int, col: int, value: CellValue) -> None:
        """Set the cached value at ``(row, col)`` and mark the cell dirty.

        Raises:
            IndexError: If the cell is outside the loaded grid.
        """
        if not self.__in_grid(row, col):
            raise IndexError(f"Cell ({row}, {col}) is outside the loaded grid")
        self._grid[row][col] = value
        self._dirty.add((row, col))

    def dirty_cells(self) -> list[tuple[int, int, CellValue]]:
        """Return ``(row, col, value)`` for every dirty cell, in grid order."""
        return [(r, c, self._grid[r][c]) for r, c in sorted(self._dirty)]

    def clear_dirty(self) -> None:
        self._dirty.clear()

    def stats(self) -> CellStats:
        non_empty = sum(1 for row in self._grid for value in row if value is not None)
        return CellStats(
            rows=self.row_count, columns=self._column_count, non_empty=non_empty
        )
