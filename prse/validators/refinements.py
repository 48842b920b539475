"""Refinements

Constraint checks applied to the result of an existing validator. Each
refinement dispatches on the runtime Shape of that result and rejects any
shape it does not support with an "Invalid type for <name> validation"
failure, rather than letting the value through unchecked.

Format validators (email, ip addresses, ...) are plain pattern refinements
with a fixed regex and an override message.
"""
from __future__ import annotations

import math
import re
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Iterable

from prse.coercion import coerce_datetime, timestamp
from prse.errors import (
    Err, ErrorCode, Ok, ValidationFailure,
    ensure, expected_type, invalid_format, invalid_type, out_of_range, validation_error,
)

from .shapes import MISSING, Shape, is_member, is_number, members, shape_of

if TYPE_CHECKING:
    from .engine import Validator

_SIZED = (Shape.STRING, Shape.ARRAY, Shape.OBJECT)

_SUBJECTS = {
    Shape.NUMBER: "Value",
    Shape.STRING: "Length",
    Shape.ARRAY: "Length",
    Shape.OBJECT: "Number of keys",
}

_LENGTH_MESSAGES = {
    "min_length": {
        Shape.STRING: "String must be at least {n} characters long",
        Shape.ARRAY: "Array must have at least {n} elements",
        Shape.NUMBER: "Number must be at least {n} digits long",
        Shape.OBJECT: "Object must have at least {n} keys",
    },
    "max_length": {
        Shape.STRING: "String must be at most {n} characters long",
        Shape.ARRAY: "Array must have at most {n} elements",
        Shape.NUMBER: "Number must be at most {n} digits long",
        Shape.OBJECT: "Object must have at most {n} keys",
    },
    "length": {
        Shape.STRING: "String must be exactly {n} characters long",
        Shape.ARRAY: "Array must have exactly {n} elements",
        Shape.NUMBER: "Number must have exactly {n} digits",
        Shape.OBJECT: "Object must have exactly {n} keys",
    },
}

EMAIL = re.compile(r"^\S+@\S+\.\S+\Z")
CREDIT_CARD = re.compile(r"^\d{4}-\d{4}-\d{4}-\d{4}\Z")
IPV4 = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\Z")
IPV6 = re.compile(r"^([0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}\Z")
DOMAIN = re.compile(r"^(?:[-A-Za-z0-9]+\.)+[A-Za-z]{2,6}\Z")


def _size(value: Any, shape: Shape, *, digits: bool = False) -> Any:
    if shape is Shape.NUMBER:
        return len(str(value)) if digits else value
    return len(value)


def _is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def _is_finite(value: Any) -> bool:
    if not is_number(value):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def _is_integer(value: Any) -> bool:
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    return value.is_finite() and value == value.to_integral_value()


def _date_bound(bound: Any) -> datetime:
    match coerce_datetime(bound):
        case Ok(parsed):
            return parsed
        case Err(failure):
            raise ValueError(f"Invalid date bound: {bound!r}") from failure


class Refinements:
    """Constraint refinements mixed into Validator.

    Every method evaluates the validator first and constrains its result.
    """

    __slots__ = ()

    if TYPE_CHECKING:
        def refine(self, assertion: Callable[[Any], None]) -> Validator[Any]: ...
        def with_message(self, message: str) -> Validator[Any]: ...
        def check(self, value: Any) -> Any: ...
        def _derive(self, check_fn: Callable[[Any], Any], *, absent_ok: bool = False) -> Validator[Any]: ...

    # ------------------------------------------------------------------
    # Size
    # ------------------------------------------------------------------

    def _emptiness(self, name: str, want_empty: bool) -> Validator[Any]:
        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape not in _SIZED:
                invalid_type(name)
            subject = "Object" if shape is Shape.OBJECT else "Value"
            if want_empty:
                ensure(len(result) == 0, f"{subject} must be empty")
            else:
                ensure(len(result) > 0, f"{subject} must not be empty")
        return self.refine(assertion)

    def not_empty(self) -> Validator[Any]:
        return self._emptiness("not_empty", want_empty=False)

    def empty(self) -> Validator[Any]:
        return self._emptiness("empty", want_empty=True)

    def _compare(self, name: str, predicate: Callable[[Any], bool], phrase: str) -> Validator[Any]:
        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape not in _SUBJECTS:
                invalid_type(name)
            message = f"{_SUBJECTS[shape]} must be {phrase}"
            if _is_nan(result):
                out_of_range(False, message)
            out_of_range(predicate(_size(result, shape)), message)
        return self.refine(assertion)

    def range(self, min_value: Any, max_value: Any) -> Validator[Any]:
        """Inclusive bounds on a number, a length or a key count."""
        return self._compare("range", lambda size: min_value <= size <= max_value,
            f"between {min_value} and {max_value}")

    def less_than(self, bound: Any) -> Validator[Any]:
        return self._compare("less_than", lambda size: size < bound, f"less than {bound}")

    def more_than(self, bound: Any) -> Validator[Any]:
        return self._compare("more_than", lambda size: size > bound, f"greater than {bound}")

    def less_than_or_equal_to(self, bound: Any) -> Validator[Any]:
        return self._compare("less_than_or_equal_to", lambda size: size <= bound,
            f"less than or equal to {bound}")

    def more_than_or_equal_to(self, bound: Any) -> Validator[Any]:
        return self._compare("more_than_or_equal_to", lambda size: size >= bound,
            f"greater than or equal to {bound}")

    def _length(self, name: str, n: int, predicate: Callable[[int], bool]) -> Validator[Any]:
        messages = _LENGTH_MESSAGES[name]

        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape not in messages:
                invalid_type(name)
            out_of_range(predicate(_size(result, shape, digits=True)), messages[shape].format(n=n))
        return self.refine(assertion)

    def min_length(self, n: int) -> Validator[Any]:
        return self._length("min_length", n, lambda size: size >= n)

    def max_length(self, n: int) -> Validator[Any]:
        return self._length("max_length", n, lambda size: size <= n)

    def length(self, n: int) -> Validator[Any]:
        """Exact length; numbers are measured by their digit string."""
        return self._length("length", n, lambda size: size == n)

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def one_of(self, allowed: Iterable[Any]) -> Validator[Any]:
        options = tuple(allowed)
        message = f"Expected one of: {', '.join(str(o) for o in options)}"

        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape in (Shape.STRING, Shape.NUMBER):
                ensure(is_member(result, options), message)
            elif shape in (Shape.ARRAY, Shape.OBJECT):
                for item in members(result, shape):
                    ensure(is_member(item, options), message)
            else:
                invalid_type("one_of")
        return self.refine(assertion)

    def includes(self, item: Any) -> Validator[Any]:
        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape is Shape.STRING:
                ensure(isinstance(item, str) and item in result, f'String must include "{item}"')
            elif shape is Shape.ARRAY:
                ensure(is_member(item, result), f'Array must include "{item}"')
            elif shape is Shape.OBJECT:
                ensure(is_member(item, result.keys()), f'Object keys must include "{item}"')
            else:
                invalid_type("includes")
        return self.refine(assertion)

    def first(self, item: Any) -> Validator[Any]:
        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape is Shape.STRING:
                ensure(isinstance(item, str) and result.startswith(item), f'String must start with "{item}"')
            elif shape in (Shape.ARRAY, Shape.OBJECT):
                values = members(result, shape)
                subject = "Array's first element" if shape is Shape.ARRAY else "Object's first value"
                ensure(bool(values) and values[0] == item, f'{subject} must be "{item}"')
            else:
                invalid_type("first")
        return self.refine(assertion)

    def last(self, item: Any) -> Validator[Any]:
        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape is Shape.STRING:
                ensure(isinstance(item, str) and result.endswith(item), f'String must end with "{item}"')
            elif shape in (Shape.ARRAY, Shape.OBJECT):
                values = members(result, shape)
                subject = "Array's last element" if shape is Shape.ARRAY else "Object's last value"
                ensure(bool(values) and values[-1] == item, f'{subject} must be "{item}"')
            else:
                invalid_type("last")
        return self.refine(assertion)

    def pattern(self, regex: str | re.Pattern) -> Validator[Any]:
        """Strings, or every element/value of an array/object, must match regex."""
        compiled = re.compile(regex) if isinstance(regex, str) else regex

        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape is Shape.STRING:
                invalid_format(compiled.search(result) is not None, "Value does not match pattern")
                return
            if shape not in (Shape.ARRAY, Shape.OBJECT):
                invalid_type("pattern")
            container, part = ("Array", "element") if shape is Shape.ARRAY else ("Object", "value")
            for item in members(result, shape):
                expected_type(isinstance(item, str), f"{container} contains non-string {part}s")
                invalid_format(compiled.search(item) is not None, f"{container} {part} does not match pattern")
        return self.refine(assertion)

    # ------------------------------------------------------------------
    # Equality
    # ------------------------------------------------------------------

    def equal_to(self, expected: Any) -> Validator[Any]:
        return self.refine(lambda result: ensure(result == expected, f"Expected to be equal to: {expected}"))

    def strictly_equal_to(self, expected: Any) -> Validator[Any]:
        """Identity, or same type and equal value."""
        def assertion(result: Any) -> None:
            same = result is expected or (type(result) is type(expected) and result == expected)
            ensure(same, f"Expected to be strictly equal to: {expected}")
        return self.refine(assertion)

    def not_equal_to(self, unexpected: Any) -> Validator[Any]:
        return self.refine(lambda result: ensure(result != unexpected, f"Expected to not be equal to: {unexpected}"))

    # ------------------------------------------------------------------
    # Type negation
    # ------------------------------------------------------------------

    def _excludes(self, is_excluded: Callable[[Any], bool], message: str) -> Validator[Any]:
        return self.refine(lambda result: expected_type(not is_excluded(result), message))

    def not_string(self) -> Validator[Any]:
        return self._excludes(lambda v: isinstance(v, str), "Expected not a string")

    def not_number(self) -> Validator[Any]:
        return self._excludes(is_number, "Expected not a number")

    def not_boolean(self) -> Validator[Any]:
        return self._excludes(lambda v: isinstance(v, bool), "Expected not a boolean")

    def not_null(self) -> Validator[Any]:
        return self._excludes(lambda v: v is None, "Expected not null")

    def not_undefined(self) -> Validator[Any]:
        return self._excludes(lambda v: v is MISSING, "Expected not undefined")

    def not_func(self) -> Validator[Any]:
        return self._excludes(callable, "Expected not a function")

    def not_set(self) -> Validator[Any]:
        return self._excludes(lambda v: isinstance(v, (set, frozenset)), "Expected not a Set")

    def not_map(self) -> Validator[Any]:
        return self._excludes(lambda v: shape_of(v) is Shape.OBJECT, "Expected not a Map")

    def not_array(self) -> Validator[Any]:
        return self._excludes(lambda v: shape_of(v) is Shape.ARRAY, "Expected not an array")

    # ------------------------------------------------------------------
    # Numeric
    # ------------------------------------------------------------------

    def _numeric(self, name: str, predicate: Callable[[Any], bool], message: str) -> Validator[Any]:
        def assertion(result: Any) -> None:
            if not is_number(result):
                invalid_type(name)
            ensure(predicate(result), message)
        return self.refine(assertion)

    def integer(self) -> Validator[Any]:
        return self._numeric("integer", _is_integer, "Expected an integer")

    def not_nan(self) -> Validator[Any]:
        return self._numeric("not_nan", lambda v: not _is_nan(v), "Value must not be NaN")

    def not_zero(self) -> Validator[Any]:
        return self._numeric("not_zero", lambda v: v != 0, "Value must not be zero")

    def finite_number(self) -> Validator[Any]:
        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape is Shape.ARRAY:
                for item in result:
                    ensure(_is_finite(item), "Expected all elements of the array to be finite numbers")
            elif shape is Shape.OBJECT:
                for item in result.values():
                    ensure(_is_finite(item), "Expected all values of the object to be finite numbers")
            elif shape is Shape.NUMBER:
                ensure(_is_finite(result), "Expected a finite number")
            else:
                invalid_type("finite_number")
        return self.refine(assertion)

    # ------------------------------------------------------------------
    # Dates
    # ------------------------------------------------------------------

    def _date_order(self, name: str, bound: Any, holds: Callable[[float, float], bool], phrase: str) -> Validator[Any]:
        limit = _date_bound(bound)
        message = f"Date must be {phrase} {limit.isoformat()}"

        def assertion(result: Any) -> None:
            if not isinstance(result, datetime):
                invalid_type(name)
            ensure(holds(timestamp(result), timestamp(limit)), message)
        return self.refine(assertion)

    def before(self, bound: Any) -> Validator[Any]:
        return self._date_order("before", bound, lambda value, limit: value < limit, "before")

    def after(self, bound: Any) -> Validator[Any]:
        return self._date_order("after", bound, lambda value, limit: value > limit, "after")

    def same_date_as(self, bound: Any) -> Validator[Any]:
        return self._date_order("same_date_as", bound, lambda value, limit: value == limit, "same as")

    # ------------------------------------------------------------------
    # Quantifiers
    # ------------------------------------------------------------------

    def every(self, validator: Validator[Any]) -> Validator[Any]:
        """Every array element / object value must pass validator."""
        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape not in (Shape.ARRAY, Shape.OBJECT):
                invalid_type("every")
            for item in members(result, shape):
                validator.check(item)
        return self.refine(assertion)

    def some(self, validator: Validator[Any]) -> Validator[Any]:
        """At least one array element / object value must pass validator."""
        def assertion(result: Any) -> None:
            shape = shape_of(result)
            if shape not in (Shape.ARRAY, Shape.OBJECT):
                invalid_type("some")
            for item in members(result, shape):
                try:
                    validator.check(item)
                    return
                except ValidationFailure:
                    continue
            validation_error("None of the elements/values match the validator",
                code=ErrorCode.E2005_CONSTRAINT_VIOLATION)
        return self.refine(assertion)

    # ------------------------------------------------------------------
    # Formats
    # ------------------------------------------------------------------

    def email(self) -> Validator[Any]:
        return self.pattern(EMAIL).with_message("Expected an email")

    def credit_card(self) -> Validator[Any]:
        return self.pattern(CREDIT_CARD).with_message("Invalid credit card number format")

    def ipv4(self) -> Validator[Any]:
        return self.pattern(IPV4).with_message("Invalid IPv4 address format")

    def ipv6(self) -> Validator[Any]:
        return self.pattern(IPV6).with_message("Invalid IPv6 address format")

    def domain(self) -> Validator[Any]:
        return self.pattern(DOMAIN).with_message("Invalid domain format")
