"""Primitive Factories

Leaf constructors producing base validators for one runtime kind each.
Container factories (object_, array, record, set_of, map_of, tuple_of)
validate their members with the validators they are given and return new
containers built from the validated results.

Names that would shadow builtins carry a trailing underscore (object_) or
an ``_of`` suffix (set_of, map_of, tuple_of).
"""
from __future__ import annotations

import re
from array import array as typed_array
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable, Sequence, TypeVar

from prse.coercion import coerce_datetime
from prse.errors import (
    Err, ErrorCode, Ok,
    ensure, expected_type, validation_error,
)

from .engine import Validator
from .shapes import MISSING, Shape, is_member, is_number, shape_of

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


def _leaf(condition: Callable[[Any], bool], message: str) -> Validator[Any]:
    def check_fn(value: Any) -> Any:
        expected_type(condition(value), message)
        return value
    return Validator(check_fn)


# ============================================================================
# Scalars
# ============================================================================

def string() -> Validator[str]:
    return _leaf(lambda v: isinstance(v, str), "Expected a string")


def number() -> Validator[int | float]:
    """int, float or Decimal; bool is rejected."""
    return _leaf(is_number, "Expected a number")


def boolean() -> Validator[bool]:
    return _leaf(lambda v: isinstance(v, bool), "Expected a boolean")


def unknown() -> Validator[Any]:
    """Accept anything unchanged."""
    return Validator(lambda v: v)


def big_int() -> Validator[int]:
    return _leaf(lambda v: isinstance(v, int) and not isinstance(v, bool), "Expected a BigInt")


def symbol() -> Validator[Enum]:
    """Enum members stand in for opaque unique tokens."""
    return _leaf(lambda v: isinstance(v, Enum), "Expected a Symbol")


def regexp() -> Validator[re.Pattern]:
    return _leaf(lambda v: isinstance(v, re.Pattern), "Expected a RegExp")


def func() -> Validator[Callable[..., Any]]:
    return _leaf(callable, "Expected a function")


def instance(cls: type[T]) -> Validator[T]:
    return _leaf(lambda v: isinstance(v, cls), f"Expected an instance of {cls.__name__}")


def uint8_array() -> Validator[bytes | bytearray | typed_array]:
    """bytes, bytearray, or array('B')."""
    return _leaf(
        lambda v: isinstance(v, (bytes, bytearray)) or (isinstance(v, typed_array) and v.typecode == "B"),
        "Expected an Uint8Array",
    )


def int8_array() -> Validator[typed_array]:
    return _leaf(lambda v: isinstance(v, typed_array) and v.typecode == "b", "Expected an Int8Array")


def enums(allowed: Iterable[T]) -> Validator[T]:
    options = tuple(allowed)
    message = f"Expected one of: {', '.join(str(o) for o in options)}"

    def check_fn(value: Any) -> T:
        ensure(is_member(value, options), message)
        return value
    return Validator(check_fn)


def date() -> Validator[datetime]:
    """datetime/date objects, ISO8601 strings and unix timestamps, parsed to datetime."""
    def check_fn(value: Any) -> datetime:
        match coerce_datetime(value):
            case Ok(parsed):
                return parsed
            case Err(failure):
                raise failure
    return Validator(check_fn)


def fail(message: str = "Validation failed") -> Validator[Any]:
    """Reject everything; an explicit dead branch for conditional/union."""
    def check_fn(value: Any) -> Any:
        validation_error(message)
    return Validator(check_fn)


# ============================================================================
# Containers
# ============================================================================

def _mapping(value: Any) -> Mapping:
    expected_type(shape_of(value) is Shape.OBJECT, "Expected an object")
    return value


def _sequence(value: Any) -> Sequence:
    expected_type(shape_of(value) is Shape.ARRAY, "Expected an array")
    return value


def object_(schema: Mapping[str, Validator[Any]]) -> Validator[dict[str, Any]]:
    """Strict object: only declared keys are kept in the result.

    An absent key fails with "Missing property: <key>" unless its validator
    was built to accept one (optional, default, prohibited); that validator
    is then checked against MISSING and a MISSING result omits the key.
    An empty schema returns the input as is.
    """
    fields = dict(schema)

    def check_fn(value: Any) -> dict[str, Any]:
        source = _mapping(value)
        if not fields:
            return source
        result: dict[str, Any] = {}
        for key, validator in fields.items():
            if key in source:
                result[key] = validator.check(source[key])
                continue
            if not validator.absent_ok:
                validation_error(f"Missing property: {key}", code=ErrorCode.E2001_REQUIRED_FIELD_MISSING, key=key)
            checked = validator.check(MISSING)
            if checked is not MISSING:
                result[key] = checked
        return result
    return Validator(check_fn)


def object_loose(schema: Mapping[str, Validator[Any]]) -> Validator[dict[str, Any]]:
    """Loose object: unknown keys are preserved, declared keys that are present are validated."""
    fields = dict(schema)

    def check_fn(value: Any) -> dict[str, Any]:
        result = dict(_mapping(value))
        for key, item in result.items():
            if key in fields:
                result[key] = fields[key].check(item)
        return result
    return Validator(check_fn)


def array(element: Validator[T]) -> Validator[list[T]]:
    return Validator(lambda v: [element.check(item) for item in _sequence(v)])


def record(value_validator: Validator[V]) -> Validator[dict[Any, V]]:
    """Keyed collection with any keys; values are validated."""
    return Validator(lambda v: {key: value_validator.check(item) for key, item in _mapping(v).items()})


def set_of(element: Validator[T]) -> Validator[set[T]]:
    def check_fn(value: Any) -> set[T]:
        expected_type(isinstance(value, (set, frozenset)), "Expected a Set")
        return {element.check(item) for item in value}
    return Validator(check_fn)


def map_of(key_validator: Validator[K], value_validator: Validator[V]) -> Validator[dict[K, V]]:
    def check_fn(value: Any) -> dict[K, V]:
        expected_type(shape_of(value) is Shape.OBJECT, "Expected a Map")
        return {key_validator.check(key): value_validator.check(item) for key, item in value.items()}
    return Validator(check_fn)


def tuple_of(validators: Sequence[Validator[Any]]) -> Validator[tuple[Any, ...]]:
    """Positional validation with exact arity."""
    positions = tuple(validators)

    def check_fn(value: Any) -> tuple[Any, ...]:
        items = _sequence(value)
        ensure(len(items) == len(positions), "Array length does not match tuple length",
            code=ErrorCode.E2003_OUT_OF_RANGE)
        return tuple(validator.check(item) for validator, item in zip(positions, items))
    return Validator(check_fn)
