"""Loan interest arithmetic.

Rates are quoted in percent per day and accrue in fixed sub-intervals
(20 minutes by default, i.e. 72 per day).
"""

import math
from datetime import datetime, timedelta

MINUTES_PER_DAY = 24 * 60


def intervals_per_day(interval: timedelta) -> int:
    minutes = interval.total_seconds() / 60
    if minutes <= 0:
        raise ValueError("Accrual interval must be positive")
    return max(1, int(MINUTES_PER_DAY // minutes))


def elapsed_intervals(last_applied: datetime, now: datetime, interval: timedelta) -> int:
    """Whole accrual intervals since ``last_applied``, capped at one day."""
    elapsed = now - last_applied
    if elapsed < interval:
        return 0
    return min(int(elapsed // interval), intervals_per_day(interval))


def interest_for(remaining_balance: int, rate_percent: float, intervals: int, per_day: int) -> int:
    """Interest owed for ``intervals`` sub-intervals, floored to whole cents.

    >>> interest_for(100_000, 5, 1, 72)
    69
    """
    if intervals <= 0 or remaining_balance <= 0 or rate_percent <= 0:
        return 0
    daily_rate = rate_percent / 100
    return math.floor(remaining_balance * daily_rate * intervals / per_day)
