"""
Tests for shape-aware refinements and derived format validators.
"""
import math
import re
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from prse import (
    MISSING, ErrorCode, ValidationFailure,
    array, boolean, date, number, record, string, unknown,
)


def failure_of(validator, value) -> ValidationFailure:
    with pytest.raises(ValidationFailure) as exc:
        validator.check(value)
    return exc.value


class TestSize:
    """Test emptiness, comparison and length refinements."""

    @pytest.mark.parametrize("value", ["a", [1], {"k": 1}])
    def test_not_empty_accepts(self, value):
        assert unknown().not_empty().check(value) == value

    @pytest.mark.parametrize("value, message", [
        ("", "Value must not be empty"),
        ([], "Value must not be empty"),
        ({}, "Object must not be empty"),
    ])
    def test_not_empty_rejects(self, value, message):
        assert failure_of(unknown().not_empty(), value).message == message

    def test_empty(self):
        assert unknown().empty().check([]) == []
        assert failure_of(unknown().empty(), {"a": 1}).message == "Object must be empty"

    @pytest.mark.parametrize("value", [0, 10, 5.5])
    def test_range_is_inclusive(self, value):
        assert number().range(0, 10).check(value) == value

    @pytest.mark.parametrize("value", [-1, 11])
    def test_range_rejects_outside(self, value):
        failure = failure_of(number().range(0, 10), value)
        assert failure.message == "Value must be between 0 and 10"
        assert failure.code is ErrorCode.E2003_OUT_OF_RANGE

    def test_range_on_lengths_and_keys(self):
        assert failure_of(string().range(2, 3), "abcd").message == "Length must be between 2 and 3"
        assert failure_of(record(number()).range(2, 3), {"a": 1}).message == "Number of keys must be between 2 and 3"

    def test_comparison_family(self):
        assert number().less_than(5).check(4) == 4
        assert number().more_than(5).check(6) == 6
        assert number().less_than_or_equal_to(5).check(5) == 5
        assert number().more_than_or_equal_to(5).check(5) == 5
        assert failure_of(array(unknown()).more_than(1), [1]).message == "Length must be greater than 1"
        assert failure_of(number().less_than_or_equal_to(5), 6).message == "Value must be less than or equal to 5"
        assert (failure_of(string().more_than_or_equal_to(3), "ab").message
                == "Length must be greater than or equal to 3")

    @pytest.mark.parametrize("value, message", [
        ("ab", "String must be at least 3 characters long"),
        ([1, 2], "Array must have at least 3 elements"),
        (12, "Number must be at least 3 digits long"),
        ({"a": 1}, "Object must have at least 3 keys"),
    ])
    def test_min_length_per_shape(self, value, message):
        assert failure_of(unknown().min_length(3), value).message == message

    def test_max_length_and_length(self):
        assert unknown().max_length(2).check("ab") == "ab"
        assert failure_of(unknown().max_length(2), [1, 2, 3]).message == "Array must have at most 2 elements"
        assert unknown().length(4).check(2024) == 2024
        assert failure_of(unknown().length(2), {"a": 1}).message == "Object must have exactly 2 keys"
        assert failure_of(unknown().length(2), "abc").message == "String must be exactly 2 characters long"

    @pytest.mark.parametrize("validator, name", [
        (unknown().not_empty(), "not_empty"),
        (unknown().range(0, 1), "range"),
        (unknown().min_length(1), "min_length"),
        (unknown().less_than(1), "less_than"),
    ])
    def test_unsupported_shape_is_rejected(self, validator, name):
        failure = failure_of(validator, True)
        assert failure.message == f"Invalid type for {name} validation"
        assert failure.code is ErrorCode.E2004_INVALID_TYPE


class TestMembership:
    def test_one_of(self):
        validator = unknown().one_of(["a", "b", 1])
        assert validator.check("a") == "a"
        assert validator.check(1) == 1
        assert validator.check(["a", "b"]) == ["a", "b"]
        assert validator.check({"x": "b"}) == {"x": "b"}
        assert failure_of(validator, ["a", "z"]).message == "Expected one of: a, b, 1"
        assert failure_of(validator, None).message == "Invalid type for one_of validation"

    @pytest.mark.parametrize("value", [[True], {"k": False}])
    def test_one_of_keeps_booleans_and_numbers_apart(self, value):
        assert failure_of(unknown().one_of([0, 1]), value).message == "Expected one of: 0, 1"

    def test_includes_unhashable_item(self):
        assert failure_of(unknown().includes(["id"]), {"id": 1}).message == "Object keys must include \"['id']\""
        assert unknown().includes([1]).check([[1], 2]) == [[1], 2]

    def test_includes(self):
        assert string().includes("ell").check("hello") == "hello"
        assert failure_of(array(number()).includes(3), [1, 2]).message == 'Array must include "3"'
        assert failure_of(unknown().includes("id"), {"name": 1}).message == 'Object keys must include "id"'

    def test_first_and_last(self):
        assert string().first("he").last("lo").check("hello") == "hello"
        assert failure_of(unknown().first("a"), ["b", "a"]).message == "Array's first element must be \"a\""
        assert failure_of(unknown().last("a"), {"x": "a", "y": "b"}).message == "Object's last value must be \"a\""
        assert failure_of(unknown().first("a"), []).message == "Array's first element must be \"a\""
        assert failure_of(unknown().last("x"), 5).message == "Invalid type for last validation"

    def test_pattern(self):
        assert string().pattern(r"^\d+$").check("123") == "123"
        assert unknown().pattern(re.compile("^a")).check(["ab", "ac"]) == ["ab", "ac"]
        assert failure_of(string().pattern("^a"), "b").message == "Value does not match pattern"
        assert failure_of(unknown().pattern("^a"), ["ab", 1]).message == "Array contains non-string elements"
        assert failure_of(unknown().pattern("^a"), {"k": "b"}).message == "Object value does not match pattern"
        assert failure_of(unknown().pattern("^a"), 1).code is ErrorCode.E2004_INVALID_TYPE


class TestEquality:
    def test_equal_to_is_loose(self):
        assert number().equal_to(1).check(1.0) == 1.0

    def test_strictly_equal_to_requires_same_type(self):
        assert number().strictly_equal_to(1).check(1) == 1
        assert failure_of(number().strictly_equal_to(1), 1.0).message == "Expected to be strictly equal to: 1"

    def test_not_equal_to(self):
        assert failure_of(string().not_equal_to("x"), "x").message == "Expected to not be equal to: x"


class TestTypeNegation:
    @pytest.mark.parametrize("method, value, message", [
        ("not_string", "s", "Expected not a string"),
        ("not_number", 1, "Expected not a number"),
        ("not_boolean", False, "Expected not a boolean"),
        ("not_null", None, "Expected not null"),
        ("not_undefined", MISSING, "Expected not undefined"),
        ("not_func", len, "Expected not a function"),
        ("not_set", {1}, "Expected not a Set"),
        ("not_map", {"a": 1}, "Expected not a Map"),
        ("not_array", [1], "Expected not an array"),
    ])
    def test_rejects_excluded_kind(self, method, value, message):
        validator = getattr(unknown(), method)()
        assert failure_of(validator, value).message == message

    def test_accepts_other_kinds(self):
        assert unknown().not_string().not_null().check(3) == 3
        assert boolean().not_number().check(True) is True


class TestNumeric:
    def test_integer(self):
        assert number().integer().check(3) == 3
        assert number().integer().check(3.0) == 3.0
        assert number().integer().check(Decimal("4")) == Decimal("4")
        assert failure_of(number().integer(), 3.5).message == "Expected an integer"
        assert failure_of(unknown().integer(), "3").code is ErrorCode.E2004_INVALID_TYPE

    @pytest.mark.parametrize("validator", [
        number().range(0, 10),
        number().less_than(10),
        number().more_than(0),
        number().less_than_or_equal_to(10),
        number().more_than_or_equal_to(0),
    ])
    def test_decimal_nan_fails_comparisons(self, validator):
        failure = failure_of(validator, Decimal("NaN"))
        assert failure.code is ErrorCode.E2003_OUT_OF_RANGE
        assert validator.run(Decimal("NaN"), on_failure=lambda text, details: None) is False

    def test_not_nan(self):
        assert failure_of(number().not_nan(), math.nan).message == "Value must not be NaN"
        assert number().not_nan().check(1.5) == 1.5

    def test_not_zero(self):
        assert failure_of(number().not_zero(), 0).message == "Value must not be zero"

    def test_finite_number(self):
        assert number().finite_number().check(10**400) == 10**400
        assert failure_of(number().finite_number(), math.inf).message == "Expected a finite number"
        assert (failure_of(unknown().finite_number(), [1, math.nan]).message
                == "Expected all elements of the array to be finite numbers")
        assert (failure_of(unknown().finite_number(), {"a": "1"}).message
                == "Expected all values of the object to be finite numbers")


class TestDates:
    def test_before_and_after(self):
        validator = date().after("2020-01-01").before("2030-01-01")
        assert validator.check("2024-06-01T12:00:00Z") == datetime(2024, 6, 1, 12, tzinfo=timezone.utc)
        assert failure_of(validator, "2031-01-01").message.startswith("Date must be before")

    def test_same_date_as(self):
        validator = date().same_date_as(datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert validator.check("2024-01-01T00:00:00+00:00")
        assert failure_of(validator, "2024-01-02").message.startswith("Date must be same as")

    def test_non_date_result_rejected(self):
        assert failure_of(unknown().before("2020-01-01"), "2019-01-01").message == "Invalid type for before validation"

    def test_invalid_bound_is_a_programming_error(self):
        with pytest.raises(ValueError):
            date().before("not a date")


class TestQuantifiers:
    def test_every(self):
        assert unknown().every(number()).check([1, 2]) == [1, 2]
        assert failure_of(unknown().every(number()), {"a": 1, "b": "x"}).message == "Expected a number"
        assert failure_of(unknown().every(number()), "abc").message == "Invalid type for every validation"

    def test_some(self):
        assert unknown().some(string()).check([1, "a"]) == [1, "a"]
        assert (failure_of(unknown().some(string()), [1, 2]).message
                == "None of the elements/values match the validator")

    def test_some_propagates_unrelated_faults(self):
        def explode(value):
            raise LookupError()

        with pytest.raises(LookupError):
            unknown().some(unknown().map(explode)).check([1])


class TestFormats:
    @pytest.mark.parametrize("method, good, bad, message", [
        ("email", "ada@example.com", "ada@", "Expected an email"),
        ("credit_card", "1234-5678-9012-3456", "1234567890123456", "Invalid credit card number format"),
        ("ipv4", "192.168.0.1", "192.168.0", "Invalid IPv4 address format"),
        ("ipv6", "2001:0db8:85a3:0000:0000:8a2e:0370:7334", "2001::1", "Invalid IPv6 address format"),
        ("domain", "example.co.uk", "localhost", "Invalid domain format"),
    ])
    def test_format(self, method, good, bad, message):
        validator = getattr(string(), method)()
        assert validator.check(good) == good
        assert failure_of(validator, bad).message == message

    def test_trailing_newline_rejected(self):
        assert failure_of(string().email(), "ada@example.com\n").message == "Expected an email"
