"""Tests for spreadsheet and worksheet access."""

import gspread
import pytest

from clubsheets.gsheet import SpreadsheetClient, Worksheet, extract_spreadsheet_id
from clubsheets.shared.exceptions import SheetError, SpreadsheetIdError

from fakes import FakeGspreadClient, FakeGspreadWorksheet


class TestExtractSpreadsheetId:
    @pytest.mark.parametrize(
        "url_or_id,expected",
        [
            ("https://docs.google.com/spreadsheets/d/abc123/edit#gid=0", "abc123"),
            ("https://docs.google.com/spreadsheets/d/abc123", "abc123"),
            ("abc123", "abc123"),
            ("  abc123  ", "abc123"),
        ],
    )
    def test_extracts_id(self, url_or_id: str, expected: str) -> None:
        assert extract_spreadsheet_id(url_or_id) == expected

    def test_url_without_id(self) -> None:
        with pytest.raises(SpreadsheetIdError):
            extract_spreadsheet_id("https://docs.google.com/spreadsheets")


class TestSpreadsheetClient:
    def test_load_spreadsheet_by_url(self, gspread_client: FakeGspreadClient) -> None:
        fake = gspread_client.register("abc123")
        fake.register(FakeGspreadWorksheet("People", [["id"]]))

        spreadsheet = SpreadsheetClient(gspread_client).load_spreadsheet(
            "https://docs.google.com/spreadsheets/d/abc123/edit"
        )

        assert gspread_client.opened == ["abc123"]
        assert spreadsheet.id == "abc123"
        assert spreadsheet.locale == "en_US"
        assert list(spreadsheet.sheets_by_title) == ["People"]

    def test_unknown_spreadsheet_raises(self, gspread_client: FakeGspreadClient) -> None:
        with pytest.raises(gspread.SpreadsheetNotFound):
            SpreadsheetClient(gspread_client).load_spreadsheet("missing")


class TestGetOrCreate:
    @pytest.fixture
    def fake_spreadsheet(self, gspread_client: FakeGspreadClient):
        return gspread_client.register("abc123")

    @pytest.fixture
    def spreadsheet(self, gspread_client: FakeGspreadClient, fake_spreadsheet):
        return SpreadsheetClient(gspread_client).load_spreadsheet("abc123")

    def test_creates_worksheet_with_headers(self, spreadsheet, fake_spreadsheet) -> None:
        worksheet = spreadsheet.get_or_create_worksheet("Camps", ["campId", "name", "status"])

        assert fake_spreadsheet.added == [("Camps", 1, 3)]
        assert fake_spreadsheet.worksheet("Camps").values() == [["campId", "name", "status"]]
        assert worksheet.title == "Camps"
        assert "Camps" in spreadsheet.sheets_by_title

    def test_second_call_returns_same_worksheet(self, spreadsheet, fake_spreadsheet) -> None:
        first = spreadsheet.get_or_create_worksheet("Camps", ["campId"])
        second = spreadsheet.get_or_create_worksheet("Camps", ["campId"])

        assert first is second
        assert len(fake_spreadsheet.added) == 1

    def test_existing_worksheet_headers_are_not_checked(self, gspread_client, fake_spreadsheet) -> None:
        fake_spreadsheet.register(FakeGspreadWorksheet("Camps", [["a", "b"]]))
        spreadsheet = SpreadsheetClient(gspread_client).load_spreadsheet("abc123")

        table = spreadsheet.get_or_create_table("Camps", ["campId", "name"])

        assert fake_spreadsheet.added == []
        assert table.headers == {"a": 0, "b": 1}

    def test_new_table_accepts_rows(self, spreadsheet, fake_spreadsheet) -> None:
        table = spreadsheet.get_or_create_table("Camps", ["campId", "name"])

        assert table.headers == {"campId": 0, "name": 1}
        assert table.add_or_update(["campId"], {"campId": "c1", "name": "Sail"}).existing is False
        table.save()

        assert fake_spreadsheet.worksheet("Camps").values() == [
            ["campId", "name"],
            ["c1", "Sail"],
        ]


class TestSheetRecords:
    @pytest.fixture
    def sheet(self) -> FakeGspreadWorksheet:
        return FakeGspreadWorksheet(
            "Reports",
            [
                ["enabled", "report", "lastRun"],
                [True, "camps", ""],
                [False, "sessions", "2024-06-01T00:00:00+00:00"],
            ],
        )

    def test_get_rows(self, sheet: FakeGspreadWorksheet) -> None:
        rows = Worksheet(sheet).get_rows()

        assert [row.row_number for row in rows] == [2, 3]
        assert rows[0].to_dict() == {"enabled": True, "report": "camps", "lastRun": None}
        assert rows[1].get("report") == "sessions"
        assert rows[1].get("unknown") is None
        assert rows[0].a1_range == "'Reports'!A2:C2"

    def test_save_writes_whole_row(self, sheet: FakeGspreadWorksheet) -> None:
        row = Worksheet(sheet).get_rows()[0]

        row.set("lastRun", "2024-07-01T00:00:00+00:00")
        row.save()

        assert sheet.calls[-1] == (
            "update",
            ("A2", [[True, "camps", "2024-07-01T00:00:00+00:00"]]),
        )
        assert sheet.values()[1] == [True, "camps", "2024-07-01T00:00:00+00:00"]

    def test_set_unknown_header(self, sheet: FakeGspreadWorksheet) -> None:
        row = Worksheet(sheet).get_rows()[0]

        with pytest.raises(SheetError, match="unknown"):
            row.set("unknown", 1)

    def test_empty_worksheet_has_no_rows(self) -> None:
        assert Worksheet(FakeGspreadWorksheet("Empty", [])).get_rows() == []
