from .base import Interval, Report, ReportOptions
from .registry import (
    REPORTS,
    get_report,
    load_report_modules,
    register_report,
    unregister_report,
)
from .runner import ReportRunner, parse_boolean, parse_date

__all__ = [
    "Interval",
    "REPORTS",
    "Report",
    "ReportOptions",
    "ReportRunner",
    "get_report",
    "load_report_modules",
    "parse_boolean",
    "parse_date",
    "register_report",
    "unregister_report",
]
