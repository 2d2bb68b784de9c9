"""Tests for leave date arithmetic."""

from datetime import date, datetime

import pytest

from leave_kernel.domain.dates import coerce_date, inclusive_days
from leave_kernel.exceptions import InvalidDateRangeError, ValidationError


class TestInclusiveDays:

    def test_same_day_is_one(self):
        assert inclusive_days(date(2024, 1, 15), date(2024, 1, 15)) == 1

    def test_three_day_range(self):
        assert inclusive_days(date(2024, 1, 15), date(2024, 1, 17)) == 3

    def test_leap_day_counted(self):
        assert inclusive_days(date(2024, 2, 28), date(2024, 3, 1)) == 3
        assert inclusive_days(date(2023, 2, 28), date(2023, 3, 1)) == 2

    def test_weekends_are_counted(self):
        # Fri..Mon
        assert inclusive_days(date(2024, 3, 1), date(2024, 3, 4)) == 4

    def test_end_before_start(self):
        with pytest.raises(InvalidDateRangeError) as exc_info:
            inclusive_days(date(2024, 1, 17), date(2024, 1, 15))
        assert exc_info.value.field == "end_date"
        assert exc_info.value.start_date == "2024-01-17"


class TestCoerceDate:

    def test_date_passthrough(self):
        assert coerce_date(date(2024, 1, 15), "start_date") == date(2024, 1, 15)

    def test_datetime_truncated(self):
        assert coerce_date(datetime(2024, 1, 15, 23, 59), "start_date") == date(2024, 1, 15)

    def test_iso_string(self):
        assert coerce_date(" 2024-01-15 ", "start_date") == date(2024, 1, 15)

    def test_iso_timestamp_string(self):
        assert coerce_date("2024-01-15T08:30:00Z", "start_date") == date(2024, 1, 15)

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_missing(self, value):
        with pytest.raises(ValidationError, match="start_date is required"):
            coerce_date(value, "start_date")

    @pytest.mark.parametrize("value", ["15/01/2024", "tomorrow", "2024-02-30", 20240115])
    def test_unparseable(self, value):
        with pytest.raises(ValidationError) as exc_info:
            coerce_date(value, "end_date")
        assert exc_info.value.field == "end_date"
