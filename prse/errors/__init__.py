"""Validation Error Handling

Key components:
- ValidationFailure: the "does not conform" signal raised by checks
- ErrorCode: validation error code taxonomy
- Result[T, E]: Ok/Err container returned by Validator.safe_check
- Builder functions: raise failures with the right code

Usage:
    from prse.errors import Ok, Err, ValidationFailure

    match validator.safe_check(payload):
        case Ok(value):
            store(value)
        case Err(failure):
            log.warning(failure.message, code=failure.code.name)
"""
from .types import (
    ErrorCode,
    ValidationFailure,
    Result,
    Ok,
    Err,
)

from .builders import (
    validation_error,
    ensure,
    invalid_type,
    expected_type,
    out_of_range,
    invalid_format,
    required_field,
    prohibited_field,
    no_alternative,
)

__all__ = [
    "ErrorCode",
    "ValidationFailure",
    "Result",
    "Ok",
    "Err",
    "validation_error",
    "ensure",
    "invalid_type",
    "expected_type",
    "out_of_range",
    "invalid_format",
    "required_field",
    "prohibited_field",
    "no_alternative",
]
