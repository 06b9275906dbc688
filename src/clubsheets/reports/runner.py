"""Runs the reports listed in a config spreadsheet.

Every row of the config sheet names a report, its argument, and the target
spreadsheet and sheet. Enabled rows are run one after the other; each run
covers the interval between the row's last successful run and now. The
outcome is written back to the row, so a failed report is retried from the
same watermark on the next round. A failing row never stops the others.
"""

from datetime import datetime
from typing import Any

import json
import logging
import time

from ..gsheet import SheetRecord, SpreadsheetClient
from ..notifications import notifier_for
from ..shared.consts import CONFIG_SHEET_HEADERS, CONFIG_SHEET_NAME, EPOCH
from ..shared.exceptions import DateParseError
from .base import Interval, ReportOptions
from .registry import get_report

logger = logging.getLogger(__name__)


def parse_boolean(value: Any) -> bool | None:
    """Parse a JSON-style boolean cell (``TRUE``, ``false``, ``1``...).

    Returns None when the value cannot be parsed.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    try:
        parsed = json.loads(str(value).strip().lower())
    except ValueError:
        return None
    if isinstance(parsed, (bool, int, float)):
        return bool(parsed)
    return None


def parse_date(value: Any) -> datetime | None:
    """Parse an ISO-8601 date/time cell; empty cells give None.

    Naive values are taken as local time.

    Raises:
        DateParseError: If the value is not ISO-8601.
    """
    if value is None or str(value).strip() == "":
        return None
    try:
        result = datetime.fromisoformat(str(value).strip())
    except ValueError as e:
        raise DateParseError(f"Cannot parse {value} as a DateTime") from e
    if result.tzinfo is None:
        result = result.astimezone()
    return result


class ReportRunner:
    def __init__(
        self,
        spreadsheets: SpreadsheetClient,
        logger: logging.Logger | None = None,
    ) -> None:
        self.spreadsheets = spreadsheets
        self.logger = logger or logging.getLogger(__name__)

    def run_row(self, row: SheetRecord, now: datetime) -> None:
        """Run the report described by one config row.

        Raises:
            ReportNotFoundError: If the row names an unregistered report.
            DateParseError: If ``lastRun`` is not ISO-8601.
        """
        report_class = get_report(str(row.get("report") or ""))

        self.logger.info(f"Running report: {row.to_dict()}")
        started = time.monotonic()

        spreadsheet = self.spreadsheets.load_spreadsheet(str(row.get("spreadsheetUrl") or ""))
        webhook = row.get("webhook")
        notifier = notifier_for(None if webhook is None else str(webhook))

        # Report on the interval since the last successful run, or since the
        # epoch if the row never ran successfully. A watermark in the future
        # gives an empty interval.
        last_run = parse_date(row.get("lastRun")) or EPOCH
        interval = Interval(start=min(last_run, now), end=now)

        report = report_class(
            ReportOptions(
                arguments=str(row.get("arguments") or ""),
                spreadsheet=spreadsheet,
                sheet_name=str(row.get("sheet") or ""),
                interval=interval,
                notifier=notifier,
            ),
            logger=self.logger,
        )
        report.run()

        elapsed = time.monotonic() - started
        self.logger.info(f"Report successful in {elapsed:.1f}s: {row.to_dict()}")

    def run_all(
        self, config_spreadsheet_id: str, sheet_name: str = CONFIG_SHEET_NAME
    ) -> None:
        """Run every enabled row of the config sheet and record the outcome."""
        config_spreadsheet = self.spreadsheets.load_spreadsheet(config_spreadsheet_id)
        worksheet = config_spreadsheet.get_or_create_worksheet(
            sheet_name, CONFIG_SHEET_HEADERS
        )

        for row in worksheet.get_rows():
            if not parse_boolean(row.get("enabled")):
                self.logger.debug(f"Skipping row {row.a1_range}")
                continue

            now = datetime.now().astimezone()
            options = row.to_dict()

            try:
                self.logger.debug(f"Processing row {row.a1_range}")
                self.run_row(row, now)
                row.set("success", True)
                row.set("lastRun", now.isoformat())
            except Exception:
                self.logger.exception(f"Failed to run report: {options}")
                row.set("success", False)

            self.logger.debug(f"Saving row {row.a1_range}")
            row.save()
