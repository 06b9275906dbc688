from collections.abc import Iterable

import importlib

from ..shared.exceptions import ReportNotFoundError
from .base import Report

# Report name (as written in the config sheet) -> report class.
# Populated at startup with register_report().
REPORTS: dict[str, type[Report]] = {}


def register_report(name: str, report_class: type[Report]) -> None:
    if not (isinstance(report_class, type) and issubclass(report_class, Report)):
        raise TypeError(f"{report_class!r} is not a Report subclass")
    REPORTS[name] = report_class


def unregister_report(name: str) -> None:
    REPORTS.pop(name, None)


def get_report(name: str) -> type[Report]:
    report_class = REPORTS.get(name)
    if report_class is None:
        raise ReportNotFoundError(f"No report with the name {name}")
    return report_class


def load_report_modules(module_names: Iterable[str]) -> None:
    """Import modules that call register_report() for their reports."""
    for module_name in module_names:
        module_name = module_name.strip()
        if module_name:
            importlib.import_module(module_name)
