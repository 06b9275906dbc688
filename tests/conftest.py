"""Shared test configuration and fixtures.

The rate limiter sleeps before every remote call and between retries; the
sleeps are replaced with a mock so the tests run instantly.
"""

from unittest.mock import MagicMock

import pytest

from clubsheets.gsheet import Worksheet

from fakes import FakeGspreadClient, FakeGspreadWorksheet


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    sleep = MagicMock()
    monkeypatch.setattr("clubsheets.gsheet.ratelimit.time.sleep", sleep)
    return sleep


@pytest.fixture
def people_sheet() -> FakeGspreadWorksheet:
    """Worksheet with headers id/name/status and one data row."""
    return FakeGspreadWorksheet(
        "People",
        [
            ["id", "name", "status"],
            ["1", "Alice", "new"],
        ],
    )


@pytest.fixture
def people_worksheet(people_sheet: FakeGspreadWorksheet) -> Worksheet:
    return Worksheet(people_sheet)


@pytest.fixture
def gspread_client() -> FakeGspreadClient:
    return FakeGspreadClient()
