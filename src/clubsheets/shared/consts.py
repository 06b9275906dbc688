from datetime import datetime, timezone
from typing import Final

# Google Sheets API quota
GOOGLE_API_REQUESTS_PER_MINUTE: Final[int] = 60 * 2
GOOGLE_API_NUM_ATTEMPTS: Final[int] = 2
GOOGLE_API_STARTING_DELAY: Final[float] = 60.0

# Google Chat webhook retries
WEBHOOK_NUM_ATTEMPTS: Final[int] = 10
WEBHOOK_STARTING_DELAY: Final[float] = 0.1
WEBHOOK_MAX_DELAY: Final[float] = 10.0
WEBHOOK_TIMEOUT: Final[float] = 30.0

# Config spreadsheet
CONFIG_SHEET_NAME: Final[str] = "Reports"
CONFIG_SHEET_HEADERS: Final[list[str]] = [
    "enabled",
    "report",
    "arguments",
    "spreadsheetUrl",
    "sheet",
    "lastRun",
    "success",
    "webhook",
]

EPOCH: Final[datetime] = datetime.fromtimestamp(0, tz=timezone.utc)

DATE_FORMAT: Final[str] = "{d.month}/{d.day}/{d.year}"
