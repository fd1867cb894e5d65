from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from mockera.services.streak import next_streak, performance_credits, streak_multiplier

UTC = ZoneInfo("UTC")
DAY = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


def test_first_attempt_starts_streak():
    assert next_streak(DAY, None, 0, UTC) == 1


def test_same_day_keeps_streak():
    assert next_streak(DAY + timedelta(hours=10), DAY, 3, UTC) == 3


def test_same_day_clamps_to_one():
    assert next_streak(DAY, DAY, 0, UTC) == 1


def test_next_day_increments():
    streak = next_streak(DAY + timedelta(days=1), DAY, 3, UTC)
    assert streak == 4
    assert streak_multiplier(streak) == 2.0


def test_gap_resets():
    streak = next_streak(DAY + timedelta(days=3), DAY, 3, UTC)
    assert streak == 1
    assert streak_multiplier(streak) == 1.0


def test_clock_skew_resets():
    assert next_streak(DAY - timedelta(days=1), DAY, 5, UTC) == 1


def test_days_follow_calendar_not_elapsed_hours():
    late = datetime(2026, 3, 10, 23, 50, tzinfo=timezone.utc)
    early = datetime(2026, 3, 11, 0, 10, tzinfo=timezone.utc)
    assert next_streak(early, late, 2, UTC) == 3


def test_days_use_configured_zone():
    kolkata = ZoneInfo("Asia/Kolkata")
    last = datetime(2026, 1, 1, 20, 0, tzinfo=timezone.utc)  # 2 Jan 01:30 IST
    now = datetime(2026, 1, 2, 10, 0, tzinfo=timezone.utc)  # 2 Jan 15:30 IST
    assert next_streak(now, last, 2, kolkata) == 2
    assert next_streak(now, last, 2, UTC) == 3


def test_naive_timestamps_are_read_as_utc():
    assert next_streak(DAY + timedelta(days=1), DAY.replace(tzinfo=None), 1, UTC) == 2


@pytest.mark.parametrize(
    "streak,expected",
    [(0, 1.0), (1, 1.0), (2, 1.2), (3, 1.5), (4, 2.0), (30, 2.0)],
)
def test_multiplier_table(streak, expected):
    assert streak_multiplier(streak) == expected


def test_credit_rounding_is_half_up():
    assert performance_credits(35, 1.5) == 53
    assert performance_credits(25, 1.2) == 30
    assert performance_credits(80, 1.0) == 80
    assert performance_credits(0, 2.0) == 0
