"""Offline re-derivation of performance credits from the attempt history.

Uses the same grading, statistics, credit and streak rules as live submission.
Each attempt is scored against the statistics of the submitted attempts on its
test that came strictly before it, which is exactly what the live path saw.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from mockera.core.config import settings
from mockera.models.attempt import Attempt, AttemptStatus
from mockera.models.user import User
from mockera.services.credits import base_credits
from mockera.services.days import to_utc
from mockera.services.grading import grade_attempt
from mockera.services.population_stats import add_attempt, empty_stats
from mockera.services.question_bank import LoadedTest, load_all_tests
from mockera.services.store import store_guard, update_rows
from mockera.services.streak import next_streak, performance_credits, streak_multiplier


log = logging.getLogger(__name__)

_USE_SETTINGS = object()


@dataclass(frozen=True)
class AttemptCredit:
    id: uuid.UUID
    base_credits: int
    performance_credits: int
    streak_multiplier: float


@dataclass(frozen=True)
class UserCredit:
    id: uuid.UUID
    performance_credits: int
    streak_days: int
    last_attempt_at: datetime


@dataclass
class BackfillPlan:
    attempts: list[AttemptCredit] = field(default_factory=list)
    users: list[UserCredit] = field(default_factory=list)


def _chronological(attempts: Iterable[Attempt]) -> list[Attempt]:
    return sorted(attempts, key=lambda a: (to_utc(a.created_at), str(a.id)))


def recompute_credits(
    tests: Mapping[uuid.UUID, LoadedTest],
    attempts: Iterable[Attempt],
    *,
    accuracy_gate=_USE_SETTINGS,
) -> BackfillPlan:
    gate = settings.speed_bonus_accuracy_gate if accuracy_gate is _USE_SETTINGS else accuracy_gate
    submitted = _chronological(a for a in attempts if a.status == AttemptStatus.submitted)

    base_by_attempt: dict[uuid.UUID, int] = {}
    running = {test_id: empty_stats(loaded.questions) for test_id, loaded in tests.items()}
    for a in submitted:
        loaded = tests.get(a.test_id)
        if loaded is None:
            continue
        stats = running[a.test_id]
        grade = grade_attempt(
            loaded.questions,
            a.answers or {},
            marking_correct=loaded.test.marking_correct,
            marking_incorrect=loaded.test.marking_incorrect,
        )
        base_by_attempt[a.id] = base_credits(
            loaded.questions,
            stats,
            a.answers,
            a.time_spent,
            overall_accuracy=grade.accuracy,
            accuracy_gate=gate,
        )
        add_attempt(stats, loaded.questions, a.answers, a.time_spent)

    by_user: dict[uuid.UUID, list[Attempt]] = {}
    for a in submitted:
        if a.id in base_by_attempt:
            by_user.setdefault(a.user_id, []).append(a)

    plan = BackfillPlan()
    for user_id, items in by_user.items():
        streak = 0
        last_at: datetime | None = None
        total = 0
        for a in items:
            created = to_utc(a.created_at)
            streak = next_streak(created, last_at, streak)
            last_at = created
            multiplier = streak_multiplier(streak)
            base = base_by_attempt[a.id]
            credits = performance_credits(base, multiplier)
            total += credits
            plan.attempts.append(
                AttemptCredit(id=a.id, base_credits=base, performance_credits=credits, streak_multiplier=multiplier)
            )
        plan.users.append(
            UserCredit(id=user_id, performance_credits=total, streak_days=streak, last_attempt_at=last_at)
        )
    return plan


def backfill_credits(
    db: Session,
    *,
    chunk_size: int | None = None,
    dry_run: bool = False,
    accuracy_gate=_USE_SETTINGS,
) -> dict:
    with store_guard(db, "load backfill input"):
        tests = load_all_tests(db)
        attempts = db.scalars(select(Attempt).where(Attempt.status == AttemptStatus.submitted)).all()

    plan = recompute_credits(tests, attempts, accuracy_gate=accuracy_gate)

    if not dry_run:
        update_rows(
            db,
            Attempt,
            [
                {"id": x.id, "performance_credits": x.performance_credits, "streak_multiplier": x.streak_multiplier}
                for x in plan.attempts
            ],
            chunk_size=chunk_size,
        )
        update_rows(
            db,
            User,
            [
                {
                    "id": u.id,
                    "performance_credits": u.performance_credits,
                    "streak_days": u.streak_days,
                    "last_attempt_at": u.last_attempt_at,
                    "last_decay_at": u.last_attempt_at,
                }
                for u in plan.users
            ],
            chunk_size=chunk_size,
        )

    log.info(
        "backfill_credits: attempts=%s users=%s dry_run=%s",
        len(plan.attempts),
        len(plan.users),
        dry_run,
    )
    return {
        "ok": True,
        "dry_run": bool(dry_run),
        "attempts_updated": len(plan.attempts),
        "users_updated": len(plan.users),
        "total_credits": sum(u.performance_credits for u in plan.users),
    }
