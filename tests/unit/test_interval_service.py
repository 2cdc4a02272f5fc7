"""
Interval engine tests.

Run with: pytest tests/unit/test_interval_service.py -v
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from services.interval_service import (
    MAX_INTERVAL_DAYS,
    compute_next_due_date,
    local_today,
    normalize_to_midnight,
    parse_interval,
)
from utils.error_handling import ValidationError


class TestNormalizeToMidnight:
    def test_drops_time_of_day(self):
        assert normalize_to_midnight(datetime(2024, 6, 10, 17, 45, 12, 999)) == datetime(2024, 6, 10)

    def test_accepts_plain_date(self):
        assert normalize_to_midnight(date(2024, 6, 10)) == datetime(2024, 6, 10)

    def test_aware_datetime_becomes_naive_local(self):
        aware = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)
        result = normalize_to_midnight(aware)
        assert result.tzinfo is None
        assert result == aware.astimezone().replace(tzinfo=None).replace(
            hour=0, minute=0, second=0, microsecond=0
        )


class TestComputeNextDueDate:
    @pytest.mark.parametrize("days", [0, 1, 7, 30, 365])
    def test_lands_exactly_interval_days_later_at_midnight(self, days):
        reference = datetime(2024, 6, 10, 23, 59, 59)
        result = compute_next_due_date(reference, days)
        assert result == datetime(2024, 6, 10) + timedelta(days=days)
        assert (result.hour, result.minute, result.second, result.microsecond) == (0, 0, 0, 0)

    def test_crosses_month_and_leap_day(self):
        assert compute_next_due_date(datetime(2024, 2, 27, 9), 3) == datetime(2024, 3, 1)

    def test_zero_interval_is_same_day(self):
        assert compute_next_due_date(datetime(2024, 6, 10, 8), 0) == datetime(2024, 6, 10)

    def test_negative_interval_rejected(self):
        with pytest.raises(ValidationError):
            compute_next_due_date(datetime(2024, 6, 10), -1)

    @pytest.mark.parametrize("days", [3_000_000, 1_000_000_000])
    def test_interval_past_calendar_end_rejected(self, days):
        with pytest.raises(ValidationError) as exc_info:
            compute_next_due_date(datetime(2024, 6, 10), days)
        assert exc_info.value.status_code == 422

    @pytest.mark.parametrize("bad", [1.5, "7", None, True])
    def test_non_integer_interval_rejected(self, bad):
        with pytest.raises(ValidationError):
            compute_next_due_date(datetime(2024, 6, 10), bad)


class TestParseInterval:
    def test_integer_passes_through(self):
        assert parse_interval(14, default=7) == 14

    def test_numeric_string_is_coerced(self):
        assert parse_interval(" 21 ", default=7) == 21

    @pytest.mark.parametrize("blank", [None, "", "   "])
    def test_blank_uses_default(self, blank):
        assert parse_interval(blank, default=30) == 30

    def test_unparsable_uses_default(self):
        assert parse_interval("weekly", default=7) == 7

    def test_zero_is_allowed(self):
        assert parse_interval("0", default=7) == 0

    def test_negative_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_interval("-3", default=7)
        assert exc_info.value.status_code == 422


    def test_upper_bound(self):
        assert parse_interval(str(MAX_INTERVAL_DAYS), default=7) == MAX_INTERVAL_DAYS
        with pytest.raises(ValidationError):
            parse_interval(str(MAX_INTERVAL_DAYS + 1), default=7)
        with pytest.raises(ValidationError):
            parse_interval("3000000", default=7)


def test_local_today_uses_clock():
    assert local_today(lambda: datetime(2024, 6, 10, 14, 30)) == datetime(2024, 6, 10)
