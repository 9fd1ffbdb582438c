"""Tests for loan interest arithmetic."""

from datetime import datetime, timedelta, timezone
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tycoon.interest import elapsed_intervals, interest_for, intervals_per_day

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
TWENTY_MIN = timedelta(minutes=20)


class TestIntervals:
    def test_twenty_minutes_is_72_per_day(self):
        assert intervals_per_day(TWENTY_MIN) == 72

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValueError):
            intervals_per_day(timedelta(0))

    def test_not_yet_due(self):
        assert elapsed_intervals(T0, T0 + timedelta(minutes=19, seconds=59), TWENTY_MIN) == 0

    def test_exactly_one_interval(self):
        assert elapsed_intervals(T0, T0 + TWENTY_MIN, TWENTY_MIN) == 1

    def test_whole_intervals_only(self):
        assert elapsed_intervals(T0, T0 + timedelta(minutes=65), TWENTY_MIN) == 3

    def test_catch_up_capped_at_one_day(self):
        assert elapsed_intervals(T0, T0 + timedelta(days=3), TWENTY_MIN) == 72

    def test_clock_behind_last_applied(self):
        assert elapsed_intervals(T0, T0 - timedelta(hours=1), TWENTY_MIN) == 0


class TestInterestAmount:
    def test_one_interval_five_percent(self):
        """floor(100000 * 0.05 / 72) = 69."""
        assert interest_for(100_000, 5, 1, 72) == 69

    def test_proportional_to_intervals(self):
        assert interest_for(100_000, 5, 3, 72) == 208  # floor(208.33)

    def test_zero_balance(self):
        assert interest_for(0, 5, 1, 72) == 0

    def test_tiny_balance_floors_to_zero(self):
        assert interest_for(100, 5, 1, 72) == 0

    def test_zero_rate(self):
        assert interest_for(100_000, 0, 1, 72) == 0
