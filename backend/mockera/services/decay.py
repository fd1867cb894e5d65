"""Daily credit decay and the rank shield that freezes it.

Decay is lazy: it is evaluated whenever balances are about to be shown, and is
idempotent within a calendar day because `last_decay_at` always advances to
today's midnight.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from mockera.services.days import as_aware, day_start, days_between


DECAY_PERCENT = 1
MIN_DECAY_PER_DAY = 10


@dataclass(frozen=True)
class DecayResult:
    balance: int
    last_decay_at: datetime | None
    changed: bool


def shield_active(rank_shield_until: datetime | None, now: datetime) -> bool:
    return rank_shield_until is not None and as_aware(rank_shield_until) > as_aware(now)


def decay_per_day(balance: int) -> int:
    return max(MIN_DECAY_PER_DAY, (balance * DECAY_PERCENT) // 100)


def apply_decay(
    now: datetime,
    *,
    balance: int,
    last_decay_at: datetime | None,
    last_attempt_at: datetime | None,
    rank_shield_until: datetime | None,
    tz: ZoneInfo | None = None,
) -> DecayResult:
    balance = int(balance or 0)
    anchor = last_decay_at if last_decay_at is not None else last_attempt_at
    if anchor is None:
        return DecayResult(balance=balance, last_decay_at=last_decay_at, changed=False)

    days = days_between(anchor, now, tz)
    today = day_start(now, tz)

    if shield_active(rank_shield_until, now):
        # Frozen, but the anchor still moves so no backlog builds up under the shield.
        if days > 0:
            return DecayResult(balance=balance, last_decay_at=today, changed=True)
        return DecayResult(balance=balance, last_decay_at=last_decay_at, changed=False)

    if days <= 0:
        return DecayResult(balance=balance, last_decay_at=last_decay_at, changed=False)

    total = min(balance, decay_per_day(balance) * days)
    return DecayResult(balance=max(0, balance - total), last_decay_at=today, changed=True)
