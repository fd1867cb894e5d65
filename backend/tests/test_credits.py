from factories import question

from mockera.models.test import Difficulty, QuestionType
from mockera.services.credits import base_credits
from mockera.services.population_stats import QuestionStats


def _scenario():
    q1 = question(key="A", difficulty=Difficulty.tough)
    q2 = question(qtype=QuestionType.numeric, key="10", difficulty=Difficulty.easy)
    stats = {
        str(q1.id): QuestionStats(attempted_count=10, correct_count=5, total_time_seconds=200),
        str(q2.id): QuestionStats(attempted_count=20, correct_count=1, total_time_seconds=600),
    }
    return q1, q2, stats


def test_tough_fast_correct_and_wise_skip():
    q1, q2, stats = _scenario()
    answers = {str(q1.id): "A", str(q2.id): ""}
    time_spent = {str(q1.id): 5}

    base = base_credits([q1, q2], stats, answers, time_spent, overall_accuracy=1.0, accuracy_gate=0.9)

    assert base == 20 + 50 + 10


def test_speed_bonus_requires_accuracy_above_gate():
    q1, q2, stats = _scenario()
    answers = {str(q1.id): "A", str(q2.id): ""}
    time_spent = {str(q1.id): 5}

    gated = base_credits([q1, q2], stats, answers, time_spent, overall_accuracy=0.9, accuracy_gate=0.9)
    ungated = base_credits([q1, q2], stats, answers, time_spent, overall_accuracy=0.9, accuracy_gate=None)

    assert gated == 30
    assert ungated == 80


def test_speed_bonus_needs_time_within_seventy_percent_of_average():
    q1, _, stats = _scenario()
    k1 = str(q1.id)

    def credits(seconds):
        return base_credits([q1], stats, {k1: "A"}, {k1: seconds}, overall_accuracy=1.0, accuracy_gate=0.9)

    assert credits(13) == 70
    assert credits(14.5) == 20
    assert credits(0) == 20


def test_speed_bonus_skipped_without_population_data():
    q1 = question(key="A")
    k1 = str(q1.id)
    base = base_credits([q1], {}, {k1: "A"}, {k1: 1}, overall_accuracy=1.0, accuracy_gate=0.9)
    assert base == 0


def test_skip_bonus_only_strictly_between_zero_and_ten_percent():
    q = question(key="A")
    k = str(q.id)

    def credits(correct, attempted):
        stats = {k: QuestionStats(attempted_count=attempted, correct_count=correct)}
        return base_credits([q], stats, {}, {}, overall_accuracy=0.0, accuracy_gate=0.9)

    assert credits(1, 20) == 10
    assert credits(0, 20) == 0
    assert credits(2, 20) == 0


def test_wrong_answer_earns_nothing():
    q1, _, stats = _scenario()
    k1 = str(q1.id)
    base = base_credits([q1], stats, {k1: "B"}, {k1: 2}, overall_accuracy=1.0, accuracy_gate=None)
    assert base == 0
