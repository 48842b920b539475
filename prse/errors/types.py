"""Failure Signal and Result Types

The validation failure signal is an exception carrying a typed error code,
the (possibly overridden) message and best-effort source location. It is the
only exception the combinators treat as "does not conform"; anything else
propagates untouched.

Result/Either types offer the same outcome as a value for callers that
prefer matching over try/except.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING, Any, Callable, Generic, Iterator, NoReturn,
    TypeVar, Union, final,
)

if TYPE_CHECKING:
    from prse.source_location import SourceLocation

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound=Exception)
F = TypeVar("F", bound=Exception)


class ErrorCode(Enum):
    """Validation error code taxonomy.

    E20xx: value-level failures raised by checks
    """
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005
    E2006_NO_MATCHING_ALTERNATIVE = 2006
    E2007_PROHIBITED_FIELD = 2007
    E2012_INVALID_DATE = 2012

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if code in (2001, 2007):
            return "presence"
        if code in (2002, 2012):
            return "format"
        if code == 2004:
            return "type"
        if code in (2003, 2005, 2006):
            return "constraint"
        return "validation"


@dataclass
class ValidationFailure(Exception):
    """Raised when a value does not conform to a validator.

    Carries:
    - Typed error code from taxonomy
    - Message (replaced by override messages on the way up)
    - The message as first raised, before any override
    - Where the failing validator was built, when known
    """
    message: str
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC
    overridden: bool = False
    original_message: str | None = None
    location: SourceLocation | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        super().__init__(self.message)
        if self.original_message is None:
            self.original_message = self.message

    def __str__(self) -> str:
        return self.message

    @property
    def name(self) -> str:
        return type(self).__name__

    def with_override(self, message: str) -> ValidationFailure:
        """Create a failure carrying ``message`` in place of the current one."""
        return ValidationFailure(
            message=message,
            code=self.code,
            overridden=True,
            original_message=self.original_message,
            location=self.location,
            metadata=dict(self.metadata),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured reports."""
        result = {
            "name": self.name,
            "code": self.code.name,
            "category": self.code.category,
            "message": self.message,
        }
        if self.overridden:
            result["original_message"] = self.original_message
        if self.location is not None:
            result["location"] = self.location.to_dict()
        if self.metadata:
            result["metadata"] = self.metadata
        return result


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result.

    Wraps the validated value.
    """
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U, Any]:
        """Transform the success value."""
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], F]) -> Result[T, F]:
        return self  # type: ignore

    def match(self, ok: Callable[[T], U], err: Callable[[Any], U]) -> U:
        return ok(self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result.

    Wraps the ValidationFailure that stopped evaluation.
    """
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Re-raise the wrapped failure."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, f: Callable[[Any], U]) -> Result[U, E]:
        return self  # type: ignore

    def map_err(self, f: Callable[[E], F]) -> Result[Any, F]:
        """Transform the error."""
        return Err(f(self.error))

    def match(self, ok: Callable[[Any], U], err: Callable[[E], U]) -> U:
        return err(self.error)

    def __iter__(self) -> Iterator:
        return iter([])


Result = Union[Ok[T], Err[E]]
