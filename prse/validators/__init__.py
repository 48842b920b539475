from .engine import Validator
from .shapes import MISSING, Shape, shape_of
from .primitives import (
    string,
    number,
    boolean,
    unknown,
    object_,
    object_loose,
    array,
    record,
    set_of,
    map_of,
    tuple_of,
    enums,
    date,
    instance,
    func,
    uint8_array,
    int8_array,
    symbol,
    regexp,
    big_int,
    fail,
)

__all__ = [
    "Validator",
    "MISSING",
    "Shape",
    "shape_of",
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
]
