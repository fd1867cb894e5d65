"""Base performance-credit reward for a single attempt."""
from __future__ import annotations

from typing import Mapping, Sequence

from mockera.models.test import Difficulty, Question
from mockera.services.grading import is_attempted, is_correct
from mockera.services.population_stats import PopulationStats, QuestionStats, seconds_for


TOUGH_CORRECT_BONUS = 20
SPEED_BONUS = 50
SPEED_RATIO = 0.7
SKIP_BONUS = 10
SKIP_ACCURACY_CEILING = 0.1


def speed_gate_passes(overall_accuracy: float, accuracy_gate: float | None) -> bool:
    if accuracy_gate is None:
        return True
    return overall_accuracy > accuracy_gate


def question_credits(
    question: Question,
    stat: QuestionStats,
    *,
    submitted: object,
    seconds: float,
    speed_allowed: bool,
) -> int:
    earned = 0
    correct = is_correct(question, submitted)
    if correct and question.difficulty == Difficulty.tough:
        earned += TOUGH_CORRECT_BONUS

    avg = stat.average_time
    if correct and speed_allowed and avg > 0 and 0 < seconds <= avg * SPEED_RATIO:
        earned += SPEED_BONUS

    # A rate of exactly 0 usually means a broken question, so it earns nothing.
    if not is_attempted(submitted) and 0 < stat.accuracy_rate < SKIP_ACCURACY_CEILING:
        earned += SKIP_BONUS
    return earned


def base_credits(
    questions: Sequence[Question],
    stats: PopulationStats,
    answers: Mapping[str, object] | None,
    time_spent: Mapping[str, object] | None,
    *,
    overall_accuracy: float,
    accuracy_gate: float | None,
) -> int:
    """Sum the per-question rewards against population `stats`.

    `stats` must describe the attempts made before this one. The speed bonus
    is only paid when `overall_accuracy` clears `accuracy_gate` (None disables
    the gate).
    """
    answers = answers or {}
    speed_allowed = speed_gate_passes(overall_accuracy, accuracy_gate)
    total = 0
    for q in questions:
        qid = str(q.id)
        total += question_credits(
            q,
            stats.get(qid) or QuestionStats(),
            submitted=answers.get(qid),
            seconds=seconds_for(time_spent, qid),
            speed_allowed=speed_allowed,
        )
    return total
