"""Tests for the injectable clocks."""

from datetime import date, datetime, timezone

from leave_kernel.domain.clock import DeterministicClock, SystemClock


class TestDeterministicClock:

    def test_fixed_until_advanced(self):
        clock = DeterministicClock(datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc))
        assert clock.now() == clock.now()
        clock.advance(30)
        assert clock.now() == datetime(2024, 6, 1, 9, 0, 30, tzinfo=timezone.utc)

    def test_today(self):
        clock = DeterministicClock(datetime(2024, 6, 1, 23, 59, tzinfo=timezone.utc))
        assert clock.today() == date(2024, 6, 1)

    def test_set_time_resets_advance(self):
        clock = DeterministicClock()
        clock.tick()
        clock.set_time(datetime(2025, 1, 1, tzinfo=timezone.utc))
        assert clock.now() == datetime(2025, 1, 1, tzinfo=timezone.utc)


class TestSystemClock:

    def test_now_is_timezone_aware(self):
        assert SystemClock().now().tzinfo is not None
