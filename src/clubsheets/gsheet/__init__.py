"""gsheet: spreadsheet reconciliation for Google Sheets.

This package implements idempotent, key-based upsert of structured rows
against Google Sheets worksheets, without an intermediate database.

Features:
    - One bulk read per table load into an in-memory cell cache
    - Key-based matching with strict (type-preserving) equality
    - Batched writes: one request for updated cells, one for new rows
    - Fixed-delay throttling and backoff retry on every remote call

Main Classes:
    SpreadsheetClient: Opens spreadsheets by URL or ID.
    Spreadsheet: Fetches or creates worksheets by title and header schema.
    Worksheet: Loads tables and reads structured rows.
    Table: The upsert engine.

Quick Start:
    >>> from gspread import service_account
    >>> from clubsheets.gsheet import SpreadsheetClient
    >>>
    >>> client = SpreadsheetClient(service_account(filename="keys/bot.json"))
    >>> spreadsheet = client.load_spreadsheet("your_spreadsheet_id")
    >>> table = spreadsheet.get_or_create_table("Sheet1", ["id", "name", "status"])
    >>>
    >>> # Matched against the cache, no API call
    >>> table.add_or_update(["id"], {"id": "1", "name": "Alice", "status": "new"})
    >>>
    >>> # One request for updated cells, one for new rows
    >>> table.save()
"""

from .cache import CellCache
from .config import RateLimitConfig
from .ratelimit import RateLimiter, safe_call
from .schemas import MISSING, AddOrUpdateResult, CellValue, Row, RowValue, SheetRow
from .spreadsheet import Spreadsheet, SpreadsheetClient, extract_spreadsheet_id
from .table import Table
from .worksheet import SheetRecord, Worksheet

__all__ = [
    "AddOrUpdateResult",
    "CellCache",
    "CellValue",
    "MISSING",
    "RateLimitConfig",
    "RateLimiter",
    "Row",
    "RowValue",
    "SheetRecord",
    "SheetRow",
    "Spreadsheet",
    "SpreadsheetClient",
    "Table",
    "Worksheet",
    "extract_spreadsheet_id",
    "safe_call",
]
