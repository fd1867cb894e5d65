from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from mockera.services.days import days_between


def next_streak(
    now: datetime,
    last_attempt_at: datetime | None,
    prior_streak_days: int,
    tz: ZoneInfo | None = None,
) -> int:
    if last_attempt_at is None:
        return 1
    diff = days_between(last_attempt_at, now, tz)
    prior = int(prior_streak_days or 0)
    if diff == 0:
        return max(1, prior)
    if diff == 1:
        return prior + 1
    return 1


def streak_multiplier(streak_days: int) -> float:
    if streak_days >= 4:
        return 2.0
    if streak_days == 3:
        return 1.5
    if streak_days == 2:
        return 1.2
    return 1.0


def performance_credits(base: int, multiplier: float) -> int:
    # half away from zero; str() keeps 1.2 from turning into 1.19999...
    scaled = Decimal(int(base)) * Decimal(str(multiplier))
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
