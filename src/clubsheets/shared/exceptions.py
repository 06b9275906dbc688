class ClubSheetsError(Exception):
    """Base class for every error raised by clubsheets."""


class SheetError(ClubSheetsError):
    """A worksheet or table could not be used as requested."""


class SpreadsheetIdError(ClubSheetsError):
    """A spreadsheet ID could not be extracted from a URL."""


class DateParseError(ClubSheetsError):
    """A config sheet value is not an ISO-8601 date/time."""


class ReportNotFoundError(ClubSheetsError):
    """No report is registered under the requested name."""
