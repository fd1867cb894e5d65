"""Ranked credit leaderboard with lazy decay.

Reading the leaderboard is not side-effect free: pending decay for every
listed user is computed and written back before rows are ranked. A cache in
front of this must not skip the decay write path.
"""
from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from mockera.models.attempt import Attempt, AttemptStatus
from mockera.models.user import User
from mockera.services.days import as_aware, to_utc
from mockera.services.decay import apply_decay
from mockera.services.store import store_guard, update_rows_if_unchanged


log = logging.getLogger(__name__)


class LeaderboardScope(str, enum.Enum):
    global_ = "global"
    batch = "batch"


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    user_id: uuid.UUID
    name: str
    image: str | None
    performance_credits: int
    rank_shield_until: datetime | None


def _eligible_users_stmt(batch_code: str | None):
    submitted = select(Attempt.user_id).where(Attempt.status == AttemptStatus.submitted)
    if batch_code:
        submitted = submitted.where(Attempt.batch_code == batch_code)
    return (
        select(User)
        .where(User.id.in_(submitted))
        .order_by(User.performance_credits.desc(), User.created_at.asc(), User.id.asc())
        .execution_options(populate_existing=True)
    )


def refresh_decay(db: Session, users: list[User], *, now: datetime, chunk_size: int | None = None) -> int:
    """Apply pending decay to `users` and persist it; returns how many rows were due.

    Each write is conditional on the balance and decay anchor still being the
    ones that were read. A row that a submission or shield purchase changed in
    the meantime is left alone; its decay is picked up by the next read.
    """
    updates: list[dict] = []
    for u in users:
        result = apply_decay(
            now,
            balance=int(u.performance_credits or 0),
            last_decay_at=u.last_decay_at,
            last_attempt_at=u.last_attempt_at,
            rank_shield_until=u.rank_shield_until,
        )
        if result.changed:
            updates.append(
                {
                    "id": u.id,
                    "expected": {
                        "performance_credits": u.performance_credits,
                        "last_decay_at": u.last_decay_at,
                    },
                    "values": {
                        "performance_credits": result.balance,
                        "last_decay_at": to_utc(result.last_decay_at),
                    },
                }
            )

    if updates:
        written = update_rows_if_unchanged(db, User, updates, chunk_size=chunk_size)
        log.info(
            "leaderboard decay: users=%s due=%s written=%s skipped=%s",
            len(users),
            len(updates),
            written,
            len(updates) - written,
        )
    return len(updates)


def get_leaderboard(
    db: Session,
    *,
    scope: LeaderboardScope = LeaderboardScope.global_,
    batch_code: str | None = None,
    now: datetime | None = None,
    chunk_size: int | None = None,
) -> list[LeaderboardRow]:
    now = to_utc(now) if now is not None else datetime.now(timezone.utc)
    code = (batch_code or "").strip() or None
    if scope != LeaderboardScope.batch:
        code = None

    stmt = _eligible_users_stmt(code)
    with store_guard(db, "load leaderboard"):
        users = list(db.scalars(stmt))

    changed = refresh_decay(db, users, now=now, chunk_size=chunk_size)
    if changed:
        with store_guard(db, "reload leaderboard"):
            users = list(db.scalars(stmt))

    return [
        LeaderboardRow(
            rank=i,
            user_id=u.id,
            name=u.name or "Anonymous",
            image=u.image,
            performance_credits=int(u.performance_credits or 0),
            rank_shield_until=as_aware(u.rank_shield_until) if u.rank_shield_until else None,
        )
        for i, u in enumerate(users, start=1)
    ]
