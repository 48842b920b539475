"""Failure Builders

Ergonomic constructors that raise ValidationFailure with the appropriate
code. Checks call these instead of building failures by hand.
"""
from typing import NoReturn

from .types import ErrorCode, ValidationFailure


def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    **metadata,
) -> NoReturn:
    """Raise a validation failure."""
    raise ValidationFailure(
        message=message,
        code=code,
        metadata={k: v for k, v in metadata.items() if v is not None},
    )


def ensure(
    condition: bool,
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2005_CONSTRAINT_VIOLATION,
) -> None:
    """Guard that raises a validation failure if condition is False."""
    if not condition:
        validation_error(message, code=code)


def invalid_type(check: str) -> NoReturn:
    validation_error(
        f"Invalid type for {check} validation",
        code=ErrorCode.E2004_INVALID_TYPE,
        check=check,
    )


def expected_type(condition: bool, message: str) -> None:
    ensure(condition, message, code=ErrorCode.E2004_INVALID_TYPE)


def out_of_range(condition: bool, message: str) -> None:
    ensure(condition, message, code=ErrorCode.E2003_OUT_OF_RANGE)


def invalid_format(condition: bool, message: str) -> None:
    ensure(condition, message, code=ErrorCode.E2002_INVALID_FORMAT)


def required_field(message: str = "Field is required") -> NoReturn:
    validation_error(message, code=ErrorCode.E2001_REQUIRED_FIELD_MISSING)


def prohibited_field(message: str = "Field is prohibited") -> NoReturn:
    validation_error(message, code=ErrorCode.E2007_PROHIBITED_FIELD)


def no_alternative(message: str) -> NoReturn:
    validation_error(message, code=ErrorCode.E2006_NO_MATCHING_ALTERNATIVE)
