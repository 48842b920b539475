"""
Tests for date coercion helpers.
"""
from datetime import datetime, timedelta, timezone

import pytest

from prse.coercion import as_utc, coerce_datetime, timestamp
from prse.errors import Err, ErrorCode, Ok


class TestCoerceDatetime:
    def test_iso_with_offset(self):
        result = coerce_datetime("2024-05-01T09:00:00+02:00")
        assert isinstance(result, Ok)
        assert result.unwrap() == datetime(2024, 5, 1, 7, tzinfo=timezone.utc)

    def test_date_only_string(self):
        assert coerce_datetime("2024-05-01").unwrap() == datetime(2024, 5, 1)

    @pytest.mark.parametrize("value", ["", "05/01/2024", b"2024-05-01", object()])
    def test_rejects(self, value):
        result = coerce_datetime(value)
        assert isinstance(result, Err)
        assert result.unwrap_err().code is ErrorCode.E2012_INVALID_DATE


class TestUtcHelpers:
    def test_naive_treated_as_utc(self):
        naive = datetime(2024, 1, 1)
        assert as_utc(naive) == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_aware_kept(self):
        aware = datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=3)))
        assert as_utc(aware) is aware

    def test_timestamp(self):
        assert timestamp(datetime(1970, 1, 1, 0, 0, 10)) == 10.0
