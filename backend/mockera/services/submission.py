"""Attempt submission: grade, reward, update streak, persist.

The whole sequence runs in one transaction. Population statistics are read
before the new attempt is added to the session, so an attempt is never scored
against itself. The user row is read with a row lock so concurrent submissions
by the same user serialize on the credit/streak read-modify-write.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from mockera.core.config import settings
from mockera.core.errors import TestNotFound, UserNotFound
from mockera.models.attempt import Attempt, AttemptStatus
from mockera.models.user import User
from mockera.services.credits import base_credits
from mockera.services.days import to_utc
from mockera.services.grading import grade_attempt
from mockera.services.percentile_bands import band_for_score, list_bands
from mockera.services.population_stats import compute_stats
from mockera.services.question_bank import load_test
from mockera.services.store import store_guard
from mockera.services.streak import next_streak, performance_credits, streak_multiplier


log = logging.getLogger(__name__)

_USE_SETTINGS = object()


@dataclass(frozen=True)
class SubmissionResult:
    attempt_id: uuid.UUID
    test_id: uuid.UUID
    created_at: datetime
    score: int
    accuracy: float
    time_taken: int
    base_credits: int
    performance_credits: int
    streak_multiplier: float
    streak_days: int
    percentile_label: str | None


def _clean_answers(answers: Mapping[str, object] | None) -> dict[str, str]:
    return {str(k): v for k, v in (answers or {}).items() if isinstance(v, str)}


def _clean_time_spent(time_spent: Mapping[str, object] | None) -> dict[str, float]:
    out: dict[str, float] = {}
    for k, v in (time_spent or {}).items():
        try:
            out[str(k)] = max(0.0, float(v))
        except (TypeError, ValueError):
            continue
    return out


def submit_attempt(
    db: Session,
    *,
    test_id: uuid.UUID,
    user_id: uuid.UUID,
    answers: Mapping[str, object] | None,
    time_spent: Mapping[str, object] | None,
    candidate_name: str | None = None,
    batch_code: str | None = None,
    events: dict | None = None,
    now: datetime | None = None,
    accuracy_gate=_USE_SETTINGS,
) -> SubmissionResult:
    now = to_utc(now) if now is not None else datetime.now(timezone.utc)
    gate = settings.speed_bonus_accuracy_gate if accuracy_gate is _USE_SETTINGS else accuracy_gate
    answers = _clean_answers(answers)
    time_spent = _clean_time_spent(time_spent)

    with store_guard(db, "submit attempt"):
        loaded = load_test(db, test_id)
        if loaded is None:
            raise TestNotFound(test_id)
        test, questions = loaded.test, loaded.questions

        grade = grade_attempt(
            questions,
            answers,
            marking_correct=test.marking_correct,
            marking_incorrect=test.marking_incorrect,
        )

        prior = db.scalars(
            select(Attempt)
            .where(Attempt.test_id == test.id, Attempt.status == AttemptStatus.submitted)
            .execution_options(yield_per=500)
        )
        stats = compute_stats(questions, prior)

        base = base_credits(
            questions,
            stats,
            answers,
            time_spent,
            overall_accuracy=grade.accuracy,
            accuracy_gate=gate,
        )

        # populate_existing: the request session may already hold this User from auth
        user = db.scalar(
            select(User).where(User.id == user_id).with_for_update().execution_options(populate_existing=True)
        )
        if user is None:
            raise UserNotFound(user_id)

        streak = next_streak(now, user.last_attempt_at, int(user.streak_days or 0))
        multiplier = streak_multiplier(streak)
        credits = performance_credits(base, multiplier)

        attempt = Attempt(
            test_id=test.id,
            user_id=user.id,
            status=AttemptStatus.submitted,
            candidate_name=candidate_name or None,
            batch_code=(batch_code or "").strip() or None,
            answers=answers,
            time_spent=time_spent,
            events=events,
            score=grade.score,
            accuracy=grade.accuracy,
            time_taken=int(sum(time_spent.values())),
            performance_credits=credits,
            streak_multiplier=multiplier,
            created_at=now,
        )
        db.add(attempt)

        user.performance_credits = int(user.performance_credits or 0) + credits
        user.streak_days = streak
        user.last_attempt_at = now
        user.last_decay_at = now

        band = band_for_score(list_bands(db, test.id), grade.score)
        label = band.percentile_label if band is not None else None
        db.flush()
        attempt_id, resolved_test_id = attempt.id, test.id
        db.commit()

    log.info(
        "submit_attempt: user=%s test=%s score=%s accuracy=%.3f base=%s streak=%s credits=%s",
        user_id,
        test_id,
        grade.score,
        grade.accuracy,
        base,
        streak,
        credits,
    )

    return SubmissionResult(
        attempt_id=attempt_id,
        test_id=resolved_test_id,
        created_at=now,
        score=grade.score,
        accuracy=grade.accuracy,
        time_taken=int(sum(time_spent.values())),
        base_credits=base,
        performance_credits=credits,
        streak_multiplier=multiplier,
        streak_days=streak,
        percentile_label=label,
    )
