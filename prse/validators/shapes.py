"""Runtime shape classification for refinement dispatch."""
from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Iterable


class _Missing:
    """Sentinel for a value that was never supplied (absent key)."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class Shape(Enum):
    STRING = auto()
    ARRAY = auto()
    NUMBER = auto()
    OBJECT = auto()
    BOOLEAN = auto()
    NULL = auto()
    OTHER = auto()


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_absent(value: Any) -> bool:
    return value is None or value is MISSING


def shape_of(value: Any) -> Shape:
    if isinstance(value, str):
        return Shape.STRING
    if isinstance(value, bool):
        return Shape.BOOLEAN
    if is_number(value):
        return Shape.NUMBER
    if isinstance(value, (list, tuple)):
        return Shape.ARRAY
    if isinstance(value, Mapping):
        return Shape.OBJECT
    if is_absent(value):
        return Shape.NULL
    return Shape.OTHER


def members(value: Any, shape: Shape) -> list[Any]:
    """Elements of an array or values of an object."""
    if shape is Shape.ARRAY:
        return list(value)
    if shape is Shape.OBJECT:
        return list(value.values())
    raise ValueError(f"{shape.name} has no members")


def is_member(value: Any, options: Iterable[Any]) -> bool:
    """Equality membership where booleans never match numbers (True != 1)."""
    flag = isinstance(value, bool)
    return any(isinstance(option, bool) == flag and option == value for option in options)
