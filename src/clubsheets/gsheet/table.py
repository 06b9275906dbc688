"""Key-based upsert of structured rows against a cached worksheet.

A Table is obtained from ``Worksheet.get_table()``, which loads every cell
of the worksheet into a CellCache. Rows are then matched, updated and queued
for insertion locally; nothing reaches Google Sheets until ``save()`` is
called, which sends all updated cells in one batched request and all new
rows in one append request.

Rows are always addressed by header name. Matching uses strict equality on
the key headers, so callers must pass key values of the same type as the
stored cells (a cell holding ``5`` never matches ``"5"``).

Example:
    >>> table = spreadsheet.get_or_create_table("Sessions", ["id", "status"])
    >>> table.add_or_update(["id"], {"id": "1", "status": "confirmed"})
    AddOrUpdateResult(existing=True)
    >>> table.save()
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import logging

from pydantic import BaseModel

from .cache import CellCache
from .schemas import MISSING, AddOrUpdateResult, CellValue, Row
from .utils import from_sheet_value, row_to_mapping, strict_equals, to_cell_value

if TYPE_CHECKING:
    from .worksheet import Worksheet

logger = logging.getLogger(__name__)


class Table:
    """A worksheet with cached cell access and key-based upsert.

    The table is valid from its creation until its final ``save()``. It does
    not see writes made by other processes, or by a second Table over the
    same worksheet, after it was loaded.

    Attributes:
        worksheet: The worksheet this table reads from and writes to.
        logger: Logger receiving row updates and save progress.
    """

    def __init__(
        self,
        worksheet: "Worksheet",
        cache: CellCache,
        logger: logging.Logger | None = None,
    ) -> None:
        self.worksheet = worksheet
        self.logger = logger or logging.getLogger(__name__)
        self._cache = cache
        self._added_rows: list[list[Any]] = []

    @property
    def headers(self) -> dict[str, int]:
        """Mapping of header name to 0-based column index."""
        return dict(self._cache.header_columns)

    @property
    def row_count(self) -> int:
        """Number of cached grid rows, header row included."""
        return self._cache.row_count

    @property
    def pending_rows(self) -> list[list[Any]]:
        """Rows queued by ``add_row`` and not saved yet."""
        return [list(row) for row in self._added_rows]

    def get_cell_value(self, header: str, row_index: int) -> CellValue:
        """Return the cached value of ``header`` in row ``row_index``.

        Returns None if the header is not part of the schema.
        """
        value = self.__lookup(header, row_index)
        return None if value is MISSING else value

    def __lookup(self, header: str, row_index: int) -> Any:
        column_index = self._cache.header_columns.get(header)
        if column_index is None or row_index >= self._cache.row_count:
            return MISSING
        return self._cache.get(row_index, column_index)

    def __needle_values(self, needle: Row | BaseModel) -> dict[str, Any]:
        # A None needle value never matches a stored cell, empty ones included
        return {
            header: MISSING if value is None else to_cell_value(value)
            for header, value in row_to_mapping(needle).items()
        }

    def find_rows(self, needle: Row | BaseModel) -> list[int]:
        """Find all data rows containing the values in ``needle``.

        ``needle`` may be a partial record holding only the key fields. A row
        matches if, for every header in the needle, its cached value is
        strictly equal to the needle's value. None needle values match no
        cell. An empty needle matches every data row.

        Rows queued by ``add_row`` are not searched; see ``add_or_update``.

        Args:
            needle: Partial row used as the match predicate.

        Returns:
            Grid indices of the matching rows (1-based data rows; row 0 is
            the header row), in sheet order.
        """
        needle_values = self.__needle_values(needle)

        rows = []
        for row in range(1, self._cache.row_count):
            found = all(
                strict_equals(self.__lookup(header, row), needle_value)
                for header, needle_value in needle_values.items()
            )
            if found:
                rows.append(row)
        return rows

    def __find_pending_rows(self, needle: Row | BaseModel) -> list[int]:
        needle_values = self.__needle_values(needle)

        rows = []
        for index, pending_row in enumerate(self._added_rows):
            found = True
            for header, needle_value in needle_values.items():
                column_index = self._cache.header_columns.get(header)
                value = (
                    MISSING
                    if column_index is None
                    else from_sheet_value(pending_row[column_index])
                )
                if not strict_equals(value, needle_value):
                    found = False
                    break
            if found:
                rows.append(index)
        return rows

    def find_row_index(self, needle: Row | BaseModel) -> int | None:
        """Return the first data row matching ``needle``, or None."""
        rows = self.find_rows(needle)
        return rows[0] if rows else None

    def update_row(self, row_index: int, values: Row | BaseModel) -> None:
        """Update the cells of an existing row in the cache.

        Headers missing from the schema are ignored. The updated cells are
        sent to Google Sheets on the next ``save()``.
        """
        values_dict = row_to_mapping(values)
        self.logger.info(f"Updating existing row {row_index}: {values_dict}")

        for header, value in values_dict.items():
            column_index = self._cache.header_columns.get(header)
            if column_index is not None:
                self._cache.set(row_index, column_index, to_cell_value(value))

    def __fill_row(self, row: list[Any], values_dict: dict[str, Any]) -> None:
        for header, value in values_dict.items():
            column_index = self._cache.header_columns.get(header)
            if column_index is not None:
                cell_value = to_cell_value(value)
                row[column_index] = "" if cell_value is None else cell_value

    def add_row(self, values: Row | BaseModel) -> None:
        """Queue a new row to be appended on the next ``save()``.

        The row is laid out by header; missing headers and None values
        become empty strings. The cache is not modified.
        """
        values_dict = row_to_mapping(values)
        self.logger.info(f"Adding new row: {values_dict}")

        new_row: list[Any] = [""] * self._cache.column_count
        self.__fill_row(new_row, values_dict)
        self._added_rows.append(new_row)

    def __update_pending_row(self, index: int, values_dict: dict[str, Any]) -> None:
        self.logger.info(f"Updating queued row {index}: {values_dict}")
        self.__fill_row(self._added_rows[index], values_dict)

    @staticmethod
    def _needle(keys: Sequence[str], values: dict[str, Any]) -> dict[str, Any]:
        return {key: values.get(key, MISSING) for key in keys}

    def __update_matches(self, keys: Sequence[str], values_dict: dict[str, Any]) -> int:
        needle = self._needle(keys, values_dict)
        rows = self.find_rows(needle)
        pending_rows = self.__find_pending_rows(needle)

        for row_index in rows:
            self.update_row(row_index, values_dict)
        for index in pending_rows:
            self.__update_pending_row(index, values_dict)
        return len(rows) + len(pending_rows)

    def update_rows(self, keys: Sequence[str], values: Row | BaseModel) -> int:
        """Update every row whose key headers match ``values``.

        Never inserts. Used for status-correction passes where an insert
        would be wrong if the key is absent. Rows queued since the last
        ``save()`` are updated as well.

        Args:
            keys: Headers making up the key.
            values: Full row values; the key is projected from them.

        Returns:
            The number of rows updated, queued rows included.
        """
        return self.__update_matches(keys, row_to_mapping(values))

    def add_or_update(
        self, keys: Sequence[str], values: Row | BaseModel
    ) -> AddOrUpdateResult:
        """Update ALL rows whose key headers match ``values``, or add a new one.

        Both the cached rows and the rows queued since the last ``save()``
        are matched, so repeating a call never queues a duplicate row. An
        empty ``keys`` matches every existing row, so every row gets
        updated. Pass the headers that identify an entity.

        Args:
            keys: Headers making up the key.
            values: Full row values; the key is projected from them.

        Returns:
            ``AddOrUpdateResult(existing=True)`` if at least one row matched
            and was updated, ``existing=False`` if a new row was queued.
        """
        values_dict = row_to_mapping(values)

        if self.__update_matches(keys, values_dict):
            return AddOrUpdateResult(existing=True)

        self.add_row(values_dict)
        return AddOrUpdateResult(existing=False)

    def save(self, reload: bool = False) -> None:
        """Flush updated cells and queued rows to Google Sheets.

        Updated cells are sent in one batched request and new rows in one
        append request. Local changes are lost if this is never called.

        Args:
            reload: Re-load the cell cache afterwards, so that rows appended
                by this save can be matched by later calls.

        Raises:
            Exception: Whatever the remote calls raised after their retries.
        """
        dirty_cells = self._cache.dirty_cells()
        self.logger.debug(f"Saving {len(dirty_cells)} updated cell(s)")
        if dirty_cells:
            self.worksheet.save_cells(dirty_cells)
            self._cache.clear_dirty()

        if self._added_rows:
            self.logger.debug(f"Adding {len(self._added_rows)} new row(s)")
            self.worksheet.add_rows(self._added_rows)
            self._added_rows = []

        if reload:
            self._cache = self.worksheet.load_cells()
