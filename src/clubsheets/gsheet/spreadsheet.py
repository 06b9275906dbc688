"""Spreadsheet accessors.

This module provides the entry points of the gsheet layer: a client that
opens spreadsheets by URL or ID, and a Spreadsheet adapter that fetches or
creates worksheets by title and header schema.

Classes:
    Spreadsheet: A loaded spreadsheet document.
    SpreadsheetClient: Opens spreadsheets through a gspread client.

Functions:
    extract_spreadsheet_id: Extract a spreadsheet ID from a URL.

Example:
    >>> from gspread import service_account
    >>> client = SpreadsheetClient(service_account(filename="keys/bot.json"))
    >>> spreadsheet = client.load_spreadsheet(
    ...     "https://docs.google.com/spreadsheets/d/1BxiMV/edit#gid=0"
    ... )
    >>> table = spreadsheet.get_or_create_table("Camps", ["campId", "name"])
"""

from collections.abc import Sequence
from urllib.parse import urlparse

import logging

from gspread import Client as GspreadClient
from gspread import Spreadsheet as GspreadSpreadsheet

from ..shared.exceptions import SpreadsheetIdError
from .ratelimit import safe_call
from .table import Table
from .worksheet import Worksheet

logger = logging.getLogger(__name__)


def extract_spreadsheet_id(url_or_id: str) -> str:
    """Extract the spreadsheet ID from a URL, or return an ID as is.

    Args:
        url_or_id: A Google Sheets URL such as
            ``https://docs.google.com/spreadsheets/d/<id>/edit``, or a bare ID.

    Returns:
        The spreadsheet ID.

    Raises:
        SpreadsheetIdError: If the input is a URL without an ID segment.

    Example:
        >>> extract_spreadsheet_id("https://docs.google.com/spreadsheets/d/abc123/edit")
        'abc123'
        >>> extract_spreadsheet_id("abc123")
        'abc123'
    """
    url = urlparse(url_or_id.strip())
    if not (url.scheme and url.netloc):
        return url_or_id.strip()

    path_segments = url.path.split("/")
    if len(path_segments) < 4 or not path_segments[3]:
        raise SpreadsheetIdError(f"Cannot extract spreadsheet ID from {url_or_id}")

    return path_segments[3]


class Spreadsheet:
    """A loaded spreadsheet document.

    Wraps a ``gspread.Spreadsheet``; worksheets are looked up from the
    metadata fetched by ``load_info()``.

    Attributes:
        logger: Logger passed on to worksheets and tables.
    """

    def __init__(
        self,
        spreadsheet: GspreadSpreadsheet,
        logger: logging.Logger | None = None,
    ) -> None:
        self._spreadsheet = spreadsheet
        self.logger = logger or logging.getLogger(__name__)
        self._sheets_by_title: dict[str, Worksheet] = {}

    @property
    def id(self) -> str:
        return self._spreadsheet.id

    @property
    def title(self) -> str:
        return self._spreadsheet.title

    @property
    def locale(self) -> str | None:
        return getattr(self._spreadsheet, "locale", None)

    @property
    def timezone(self) -> str | None:
        return getattr(self._spreadsheet, "timezone", None)

    @property
    def sheets_by_title(self) -> dict[str, Worksheet]:
        return dict(self._sheets_by_title)

    def load_info(self) -> None:
        """Fetch the list of worksheets of this spreadsheet."""
        worksheets = safe_call(self._spreadsheet.worksheets)
        self._sheets_by_title = {
            ws.title: Worksheet(ws, logger=self.logger) for ws in worksheets
        }

    def __create_worksheet(self, title: str, headers: Sequence[str]) -> Worksheet:
        self.logger.debug(f"Creating worksheet {title} with headers {list(headers)}")
        gspread_worksheet = safe_call(
            self._spreadsheet.add_worksheet,
            title=title,
            rows=1,
            cols=len(headers),
        )
        worksheet = Worksheet(gspread_worksheet, logger=self.logger)
        worksheet.write_headers(headers)
        self._sheets_by_title[title] = worksheet
        return worksheet

    def get_or_create_worksheet(self, title: str, headers: Sequence[str]) -> Worksheet:
        """Return the worksheet named ``title``, creating it if absent.

        A new worksheet is sized to one row and ``len(headers)`` columns and
        gets ``headers`` as its first row. The headers of an existing
        worksheet are not checked against ``headers``.
        """
        worksheet = self._sheets_by_title.get(title)
        if worksheet is None:
            worksheet = self.__create_worksheet(title, headers)
        return worksheet

    def get_or_create_table(self, title: str, headers: Sequence[str]) -> Table:
        """Shortcut for ``get_or_create_worksheet(title, headers).get_table()``."""
        return self.get_or_create_worksheet(title, headers).get_table()


class SpreadsheetClient:
    """Opens spreadsheets through an authorized gspread client."""

    def __init__(
        self,
        client: GspreadClient,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.logger = logger or logging.getLogger(__name__)

    def load_spreadsheet(self, url_or_id: str) -> Spreadsheet:
        """Open a spreadsheet by URL or ID and load its worksheet list.

        Raises:
            SpreadsheetIdError: If no ID can be extracted from the URL.
        """
        spreadsheet_id = extract_spreadsheet_id(url_or_id)
        spreadsheet = Spreadsheet(
            safe_call(self.client.open_by_key, spreadsheet_id),
            logger=self.logger,
        )
        spreadsheet.load_info()

        self.logger.debug(
            f"Loaded spreadsheet {spreadsheet_id}: title={spreadsheet.title}, "
            f"locale={spreadsheet.locale}, timezone={spreadsheet.timezone}"
        )
        return spreadsheet
