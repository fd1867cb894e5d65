from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mockera.models.attempt import Attempt, AttemptStatus
from mockera.models.test import Test
from mockera.models.user import User
from mockera.services.days import as_aware
from mockera.services.grading import is_attempted, is_correct
from mockera.services.question_bank import load_questions


def _iso(value) -> str | None:
    return as_aware(value).isoformat() if value is not None else None


def build_profile(db: Session, user: User) -> dict:
    tests_count = db.scalar(select(func.count(Test.id)).where(Test.owner_id == user.id)) or 0

    agg = db.execute(
        select(
            func.count(Attempt.id),
            func.sum(Attempt.time_taken),
            func.avg(Attempt.accuracy),
            func.avg(Attempt.score),
            func.max(Attempt.score),
            func.min(Attempt.time_taken),
            func.max(Attempt.created_at),
        ).where(Attempt.user_id == user.id, Attempt.status == AttemptStatus.submitted)
    ).one()
    count, total_time, avg_accuracy, avg_score, best_score, fastest, last_at = agg

    attempts = db.scalars(
        select(Attempt).where(Attempt.user_id == user.id, Attempt.status == AttemptStatus.submitted)
    ).all()

    questions_by_test: dict = {}
    subjects: dict[str, dict[str, int]] = {}
    for a in attempts:
        if a.test_id not in questions_by_test:
            questions_by_test[a.test_id] = load_questions(db, a.test_id)
        answers = a.answers or {}
        for q in questions_by_test[a.test_id]:
            raw = answers.get(str(q.id))
            if not is_attempted(raw):
                continue
            entry = subjects.setdefault(q.subject.value, {"attempted": 0, "correct": 0})
            entry["attempted"] += 1
            if is_correct(q, raw):
                entry["correct"] += 1

    subject_stats = [
        {
            "subject": name,
            "attempted": s["attempted"],
            "correct": s["correct"],
            "accuracy": s["correct"] / s["attempted"] if s["attempted"] else 0.0,
        }
        for name, s in sorted(subjects.items())
    ]
    strongest = max(subject_stats, key=lambda s: s["accuracy"])["subject"] if subject_stats else None

    return {
        "user": {
            "id": str(user.id),
            "name": user.name,
            "email": user.email,
            "image": user.image,
            "role": user.role.value,
            "performance_credits": int(user.performance_credits or 0),
            "streak_days": int(user.streak_days or 0),
            "last_attempt_at": _iso(user.last_attempt_at),
            "rank_shield_until": _iso(user.rank_shield_until),
        },
        "stats": {
            "tests_count": int(tests_count),
            "attempts_count": int(count or 0),
            "total_time_seconds": int(total_time or 0),
            "avg_accuracy": float(avg_accuracy or 0.0),
            "avg_score": float(avg_score or 0.0),
            "best_score": int(best_score or 0),
            "fastest_attempt_seconds": int(fastest or 0),
            "last_attempt_at": _iso(last_at),
            "strongest_subject": strongest,
            "subject_stats": subject_stats,
        },
    }
