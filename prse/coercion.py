"""Date Coercion

Dates arrive as datetime/date objects, ISO8601 strings or unix timestamps.
Parsing is delegated to pydantic's datetime handling so every accepted
format matches what pydantic models accept; the result is always a
datetime, with naive values compared as UTC.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from prse.errors import ErrorCode, Err, Ok, Result, ValidationFailure


@lru_cache(maxsize=1)
def _datetime_adapter() -> TypeAdapter[datetime]:
    return TypeAdapter(datetime)


def coerce_datetime(value: Any) -> Result[datetime, ValidationFailure]:
    """Coerce value to datetime. Returns Result."""
    if isinstance(value, datetime):
        return Ok(value)
    if isinstance(value, date):
        return Ok(datetime.combine(value, time()))
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return Err(ValidationFailure(
            "Expected a valid date",
            code=ErrorCode.E2012_INVALID_DATE,
            metadata={"actual": type(value).__name__},
        ))

    try:
        return Ok(_datetime_adapter().validate_python(value))
    except PydanticValidationError as e:
        return Err(ValidationFailure(
            "Expected a valid date",
            code=ErrorCode.E2012_INVALID_DATE,
            metadata={"actual": value, "reason": e.errors()[0].get("type")},
        ))


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes so mixed values stay comparable."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def timestamp(value: datetime) -> float:
    return as_utc(value).timestamp()
