"""Validator Engine

A Validator wraps a check function (input -> output, raising
ValidationFailure on non-conformance) and an optional override message.
Every combinator returns a new Validator; nothing is mutated in place, so
validators can be shared freely between schemas, branches and threads.

Features:
- Frozen dataclass validators for immutability
- Override messages applied once per enclosing validator
- Only ValidationFailure is absorbed by or_/union/default/some; any other
  exception propagates untouched
- Best-effort call-site capture for failure reports
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from prse.config import get_settings
from prse.errors import (
    ErrorCode, Err, Ok, Result, ValidationFailure,
    ensure, no_alternative, prohibited_field, required_field, validation_error,
)
from prse.logging import engine_logger
from prse.report import build_report, emit_report
from prse.source_location import SourceLocation, capture_location

from .refinements import Refinements
from .shapes import MISSING, is_absent

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class Validator(Refinements, Generic[T]):
    """Composable validation unit.

    Usage:
        user = object_({"name": string().not_empty(), "age": number().integer().optional()})
        user.check({"name": "Ada"})          # -> {"name": "Ada"}
        user.run({"name": ""})               # -> False, report written to stderr
    """
    check_fn: Callable[[Any], T] = field(repr=False)
    message: str | None = None
    location: SourceLocation | None = field(default=None, compare=False, repr=False)
    absent_ok: bool = False  # accepts a missing object key

    def __post_init__(self):
        if self.location is None and get_settings().CAPTURE_LOCATIONS:
            object.__setattr__(self, "location", capture_location())

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def check(self, value: Any) -> T:
        """Validate value, returning the (possibly transformed) result.

        Raises:
            ValidationFailure: value does not conform. If this validator has
                an override message the failure carries it instead.
        """
        try:
            return self.check_fn(value)
        except ValidationFailure as failure:
            if failure.location is None:
                failure.location = self.location
            if self.message is None or (failure.overridden and failure.message == self.message):
                raise
            raise failure.with_override(self.message) from failure

    def __call__(self, value: Any) -> T: return self.check(value)

    def safe_check(self, value: Any) -> Result[T, ValidationFailure]:
        """Validate value without raising on non-conformance."""
        try:
            return Ok(self.check(value))
        except ValidationFailure as failure:
            return Err(failure)

    def run(
        self,
        value: Any,
        on_success: Callable[[], Any] | None = None,
        on_failure: Callable[[str, Any], Any] | None = None,
    ) -> bool:
        """Validate value and report the outcome.

        On failure a ValidationReport is built; on_failure receives
        (formatted, details) when given, otherwise the report goes to the
        configured sink (stderr by default).

        Returns:
            True if value conforms, False otherwise.
        """
        log = engine_logger()
        try:
            self.check(value)
        except ValidationFailure as failure:
            report = build_report(failure)
            log.debug("validation_failed", failure=failure)
            if on_failure is not None:
                on_failure(report.formatted, report.details)
            else:
                emit_report(report)
            return False

        log.debug("validation_succeeded")
        if on_success is not None:
            on_success()
        return True

    parse = run

    def _derive(self, check_fn: Callable[[Any], R], *, absent_ok: bool = False) -> Validator[R]:
        return Validator(check_fn, absent_ok=absent_ok)

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def with_message(self, message: str) -> Validator[T]:
        """Same check, failing with message instead."""
        return Validator(self.check_fn, message, absent_ok=self.absent_ok)

    def map(self, transform: Callable[[T], R]) -> Validator[R]:
        return self._derive(lambda v: transform(self.check(v)))

    def refine(self, assertion: Callable[[T], None]) -> Validator[T]:
        """Run assertion on the result; it raises ValidationFailure to reject."""
        def check_fn(value: Any) -> T:
            result = self.check(value)
            assertion(result)
            return result
        return self._derive(check_fn)

    def or_(self, *alternatives: Validator[Any]) -> Validator[Any]:
        """First of self, *alternatives to accept the value wins."""
        candidates = (self, *alternatives)

        def check_fn(value: Any) -> Any:
            for candidate in candidates:
                try:
                    return candidate.check(value)
                except ValidationFailure:
                    continue
            no_alternative("No valid alternatives")
        return self._derive(check_fn)

    def union(self, *alternatives: Validator[Any]) -> Validator[Any]:
        """First of alternatives to accept the value wins; self is not tried."""
        def check_fn(value: Any) -> Any:
            for candidate in alternatives:
                try:
                    return candidate.check(value)
                except ValidationFailure:
                    continue
            no_alternative("Value does not match any of the union types")
        return self._derive(check_fn)

    def and_(self, other: Validator[R]) -> Validator[tuple[T, R]]:
        """Both must accept the same input; result is the pair of results."""
        return self._derive(lambda v: (self.check(v), other.check(v)))

    def not_(self, other: Validator[Any]) -> Validator[T]:
        """Self must accept the input and other must reject it."""
        def check_fn(value: Any) -> T:
            result = self.check(value)
            try:
                other.check(value)
            except ValidationFailure:
                return result
            validation_error("Failed to pass not(condition)", code=ErrorCode.E2005_CONSTRAINT_VIOLATION)
        return self._derive(check_fn)

    def __or__(self, other: Validator[Any]) -> Validator[Any]: return self.or_(other)

    def __and__(self, other: Validator[R]) -> Validator[tuple[T, R]]: return self.and_(other)

    def optional(self) -> Validator[T | None]:
        """None and MISSING pass through unchanged."""
        return self._derive(lambda v: v if is_absent(v) else self.check(v), absent_ok=True)

    def nullable(self) -> Validator[T | None]:
        """None passes through unchanged; MISSING is still checked."""
        return self._derive(lambda v: v if v is None else self.check(v))

    def default(self, fallback: T) -> Validator[T]:
        def check_fn(value: Any) -> T:
            try:
                return self.check(value)
            except ValidationFailure:
                return fallback
        return self._derive(check_fn, absent_ok=True)

    def required(self) -> Validator[T]:
        def check_fn(value: Any) -> T:
            if is_absent(value):
                required_field()
            return self.check(value)
        return self._derive(check_fn)

    def prohibited(self) -> Validator[None]:
        def check_fn(value: Any) -> None:
            if not is_absent(value):
                prohibited_field()
            return value
        return self._derive(check_fn, absent_ok=True)

    def conditional(
        self,
        predicate: Callable[[T], bool],
        on_true: Validator[R],
        on_false: Validator[R] | None = None,
    ) -> Validator[R]:
        """Branch on predicate(result), checking the result with the chosen validator."""
        from .primitives import unknown

        otherwise = on_false if on_false is not None else unknown()

        def check_fn(value: Any) -> R:
            result = self.check(value)
            return on_true.check(result) if predicate(result) else otherwise.check(result)
        return self._derive(check_fn)

    def combine(self, other: Validator[R]) -> Validator[R]:
        """Pipeline: other checks the result of self."""
        return self._derive(lambda v: other.check(self.check(v)))

    def custom(self, predicate: Callable[[T], bool], message: str = "Custom validation failed") -> Validator[T]:
        return self.refine(lambda result: ensure(predicate(result), message))

    def custom_error_handler(self, handler: Callable[[ValidationFailure], BaseException]) -> Validator[T]:
        """Replace failures of self with whatever handler returns."""
        def check_fn(value: Any) -> T:
            try:
                return self.check(value)
            except ValidationFailure as failure:
                raise handler(failure) from failure
        return self._derive(check_fn)

    def has_prop(self, name: str) -> Validator[T]:
        def present(result: Any) -> bool:
            if isinstance(result, Mapping):
                return name in result
            return result is not MISSING and hasattr(result, name)
        return self.custom(present, f"Property {name} does not exist")

    def of_class(self, name: str) -> Validator[T]:
        return self.custom(lambda result: type(result).__name__ == name, f"Expected an instance of class {name}")
