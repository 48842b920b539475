from __future__ import annotations

import sys
from dataclasses import dataclass
from itertools import islice
from types import FrameType
from typing import Any, Optional

_PACKAGE = __name__.split(".")[0]


@dataclass(frozen=True, slots=True)
class SourceLocation:
    file: Optional[str] = None
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 1-based

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line, "column": self.column}


def _is_library_frame(frame: FrameType) -> bool:
    # By module, not filename: generated dataclass methods report "<string>"
    # as their file but run with the defining module's globals.
    module = frame.f_globals.get("__name__", "")
    return module.split(".")[0] == _PACKAGE


def _column(frame: FrameType) -> Optional[int]:
    # co_positions() yields one entry per code unit; f_lasti is a byte offset.
    positions = getattr(frame.f_code, "co_positions", None)
    if positions is None or frame.f_lasti < 0:
        return None
    entry = next(islice(positions(), frame.f_lasti // 2, None), None)
    if entry is None or entry[2] is None:
        return None
    return entry[2] + 1


def capture_location() -> Optional[SourceLocation]:
    """Locate the nearest caller outside the prse package.

    Returns None when the interpreter exposes no frames.
    """
    getframe = getattr(sys, "_getframe", None)
    if getframe is None:
        return None
    frame: Optional[FrameType] = getframe(1)
    while frame is not None and _is_library_frame(frame):
        frame = frame.f_back
    if frame is None:
        return None
    return SourceLocation(
        file=frame.f_code.co_filename,
        line=frame.f_lineno,
        column=_column(frame),
    )


def format_source(loc: Optional[SourceLocation]) -> str:
    if not loc or loc.file is None:
        return ""

    if loc.line is not None and loc.column is not None:
        return f"{loc.file}:{loc.line}:{loc.column}"
    if loc.line is not None:
        return f"{loc.file}:{loc.line}"
    return loc.file
