from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime
from typing import TypeVar

import logging

from pydantic import BaseModel, ConfigDict, model_validator

from ..gsheet import Spreadsheet, Table
from ..notifications import NopNotifier, Notifier
from ..shared.consts import DATE_FORMAT

T = TypeVar("T")


class Interval(BaseModel):
    """Half-open time interval ``[start, end)``."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def check_order(self) -> "Interval":
        if self.end < self.start:
            raise ValueError(f"Interval ends ({self.end}) before it starts ({self.start})")
        return self

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


class ReportOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    arguments: str = ""
    spreadsheet: Spreadsheet
    sheet_name: str
    interval: Interval
    notifier: Notifier = NopNotifier()


class Report(ABC):
    """Base class of every report.

    A report reads entities from the club backend, projects them onto rows
    and upserts them into ``options.sheet_name`` of ``options.spreadsheet``.
    Only entities updated during ``options.interval`` need to be read; the
    interval starts at the last successful run.
    """

    def __init__(self, options: ReportOptions, logger: logging.Logger | None = None) -> None:
        self.options = options
        self.logger = logger or logging.getLogger(type(self).__module__)

    @property
    def arguments(self) -> str:
        return self.options.arguments

    @property
    def interval(self) -> Interval:
        return self.options.interval

    @property
    def notifier(self) -> Notifier:
        return self.options.notifier

    def get_or_create_table(self, headers: Sequence[str]) -> Table:
        return self.options.spreadsheet.get_or_create_table(
            self.options.sheet_name, headers
        )

    def updated_between(
        self, items: Iterable[T], updated_at: Callable[[T], datetime | None]
    ) -> list[T]:
        """Keep the items whose update time falls in the report interval."""
        result = []
        for item in items:
            moment = updated_at(item)
            if moment is not None and self.interval.contains(moment):
                result.append(item)
        return result

    @staticmethod
    def format_date(value: date | datetime | None) -> str:
        """Format a date as ``M/D/YYYY``; None becomes an empty string."""
        if value is None:
            return ""
        return DATE_FORMAT.format(d=value)

    @abstractmethod
    def run(self) -> None: ...
