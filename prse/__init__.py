"""Composable Runtime Validation

Validators are immutable values built from primitive factories and chained
through combinators. Each one checks an untyped input, optionally
transforms it, and either returns the result or raises ValidationFailure.

Key Features:
- Fluent combinators (or_/union/and_/not_/optional/default/conditional/...)
- Shape-aware refinements (lengths, ranges, membership, patterns, dates)
- Override messages that survive arbitrarily deep composition
- run()/parse() entry point with formatted + structured failure reports
- Ok/Err results via safe_check()

Usage:
    import prse as p

    user = p.object_({
        "name": p.string().min_length(1),
        "email": p.string().email(),
        "age": p.number().integer().range(0, 150).optional(),
    })

    user.check({"name": "Ada", "email": "ada@example.com"})
    user.run(payload, on_failure=lambda text, details: log.warning(details.message))
"""
from .errors import ErrorCode, Err, Ok, Result, ValidationFailure
from .report import FailureDetails, ValidationReport, build_report
from .source_location import SourceLocation
from .validators import (
    MISSING,
    Shape,
    Validator,
    array,
    big_int,
    boolean,
    date,
    enums,
    fail,
    func,
    instance,
    int8_array,
    map_of,
    number,
    object_,
    object_loose,
    record,
    regexp,
    set_of,
    shape_of,
    string,
    symbol,
    tuple_of,
    uint8_array,
    unknown,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "Validator",
    "MISSING",
    "Shape",
    "shape_of",
    # Factories
    "string",
    "number",
    "boolean",
    "unknown",
    "object_",
    "object_loose",
    "array",
    "record",
    "set_of",
    "map_of",
    "tuple_of",
    "enums",
    "date",
    "instance",
    "func",
    "uint8_array",
    "int8_array",
    "symbol",
    "regexp",
    "big_int",
    "fail",
    # Errors
    "ValidationFailure",
    "ErrorCode",
    "Result",
    "Ok",
    "Err",
    # Reports
    "ValidationReport",
    "FailureDetails",
    "SourceLocation",
    "build_report",
]
