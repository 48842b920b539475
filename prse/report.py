"""Validation Reports

Built at the run()/parse() entry point when a validator rejects its input.
A report pairs a console-style formatted string with structured fields:

    ValidationFailure: Expected a string
    File: /app/schemas.py
    At: Line - 12; Column - 9

When no source location is known (capture disabled or unavailable) the
report degrades to the first line only.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, TextIO

from prse.config import get_settings
from prse.errors import ValidationFailure
from prse.logging import report_logger
from prse.source_location import SourceLocation, format_source

_RED, _YELLOW, _CYAN, _MAGENTA, _RESET = "\x1b[31m", "\x1b[33m", "\x1b[36m", "\x1b[35m", "\x1b[0m"


@dataclass(frozen=True, slots=True)
class FailureDetails:
    """Structured fields of a failed evaluation.

    - name: failure class name
    - message: final (possibly overridden) message
    - code: ErrorCode name
    - file/line/column: where the failing validator was built, if known
    """
    name: str
    message: str
    code: str
    file: str | None = None
    line: int | None = None
    column: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "message": self.message, "code": self.code,
            "file": self.file, "line": self.line, "column": self.column}

    @property
    def has_location(self) -> bool: return self.file is not None

    @property
    def source(self) -> str:
        """file:line:column, or "" when no location is known."""
        return format_source(SourceLocation(self.file, self.line, self.column))


@dataclass(frozen=True, slots=True)
class ValidationReport:
    formatted: str
    details: FailureDetails


def _paint(text: Any, color: str, colors: bool) -> str:
    return f"{color}{text}{_RESET}" if colors else str(text)


def format_details(details: FailureDetails, *, colors: bool = True) -> str:
    """Render details in the console layout."""
    headline = f"{_paint(details.name, _RED, colors)}: {_paint(details.message, _RED, colors)}"
    if not details.has_location:
        return headline
    line = "?" if details.line is None else details.line
    column = "?" if details.column is None else details.column
    return (
        f"{headline}\n"
        f"{_paint('File', _YELLOW, colors)}: {_paint(details.file, _CYAN, colors)}\n"
        f"{_paint('At', _YELLOW, colors)}: {_paint('Line - ', _CYAN, colors)}{_paint(line, _MAGENTA, colors)}; "
        f"{_paint('Column - ', _CYAN, colors)}{_paint(column, _MAGENTA, colors)}"
    )


def build_report(failure: ValidationFailure, *, colors: bool | None = None) -> ValidationReport:
    """Create a fresh report for a failed evaluation."""
    if colors is None:
        colors = get_settings().REPORT_COLORS
    loc = failure.location
    details = FailureDetails(
        name=failure.name,
        message=failure.message,
        code=failure.code.name,
        file=loc.file if loc else None,
        line=loc.line if loc else None,
        column=loc.column if loc else None,
    )
    return ValidationReport(formatted=format_details(details, colors=colors), details=details)


def emit_report(report: ValidationReport, *, stream: TextIO | None = None) -> None:
    """Write a report to the configured default sink."""
    if get_settings().REPORT_SINK == "log":
        report_logger().error("validation_failed", source=report.details.source, **report.details.to_dict())
        return
    print(report.formatted, file=stream if stream is not None else sys.stderr)
