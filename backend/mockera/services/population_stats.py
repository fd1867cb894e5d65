from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from mockera.models.attempt import Attempt, AttemptStatus
from mockera.models.test import Question
from mockera.services.grading import is_attempted, is_correct


@dataclass
class QuestionStats:
    attempted_count: int = 0
    correct_count: int = 0
    total_time_seconds: float = 0.0

    @property
    def accuracy_rate(self) -> float:
        return self.correct_count / self.attempted_count if self.attempted_count else 0.0

    @property
    def average_time(self) -> float:
        return self.total_time_seconds / self.attempted_count if self.attempted_count else 0.0


PopulationStats = dict[str, QuestionStats]


def empty_stats(questions: Sequence[Question]) -> PopulationStats:
    return {str(q.id): QuestionStats() for q in questions}


def seconds_for(time_spent: Mapping[str, object] | None, question_id: str) -> float:
    try:
        return float((time_spent or {}).get(question_id) or 0)
    except (TypeError, ValueError):
        return 0.0


def add_attempt(
    stats: PopulationStats,
    questions: Sequence[Question],
    answers: Mapping[str, object] | None,
    time_spent: Mapping[str, object] | None,
) -> None:
    """Fold one submitted attempt into `stats` in place."""
    answers = answers or {}
    for q in questions:
        qid = str(q.id)
        raw = answers.get(qid)
        if not is_attempted(raw):
            continue
        entry = stats.setdefault(qid, QuestionStats())
        entry.attempted_count += 1
        if is_correct(q, raw):
            entry.correct_count += 1
        # zero means "not measured", not "answered instantly"
        seconds = seconds_for(time_spent, qid)
        if seconds > 0:
            entry.total_time_seconds += seconds


def compute_stats(questions: Sequence[Question], prior_attempts: Iterable[Attempt]) -> PopulationStats:
    """Per-question population figures over the given submitted attempts.

    `prior_attempts` may be a lazy iterator; attempts that are not submitted
    are skipped.
    """
    stats = empty_stats(questions)
    for attempt in prior_attempts:
        if attempt.status != AttemptStatus.submitted:
            continue
        add_attempt(stats, questions, attempt.answers, attempt.time_spent)
    return stats
