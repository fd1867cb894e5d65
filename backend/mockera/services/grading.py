"""Answer grading for the three question modalities.

Submitted values arrive as loose strings. They are resolved once, by the
question's type, into an `Answer` variant and compared against the key
resolved the same way.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence, Union

from mockera.models.test import Question, QuestionType


@dataclass(frozen=True)
class SingleAnswer:
    letter: str


@dataclass(frozen=True)
class MultiAnswer:
    letters: tuple[str, ...]

    @property
    def canonical(self) -> str:
        return ",".join(self.letters)


@dataclass(frozen=True)
class NumericAnswer:
    value: str


Answer = Union[SingleAnswer, MultiAnswer, NumericAnswer]


def is_attempted(raw: object) -> bool:
    return isinstance(raw, str) and raw.strip() != ""


def canonical_multi(raw: str) -> tuple[str, ...]:
    tokens = [t.strip().upper() for t in (raw or "").split(",")]
    return tuple(sorted(t for t in tokens if t))


def parse_answer(question_type: QuestionType, raw: object) -> Answer | None:
    """Resolve a raw submission into its typed variant; None when not attempted."""
    if not is_attempted(raw):
        return None
    text = str(raw)
    if question_type == QuestionType.numeric:
        return NumericAnswer(text.strip())
    if question_type == QuestionType.multi:
        letters = canonical_multi(text)
        return MultiAnswer(letters) if letters else None
    return SingleAnswer(text)


def answer_key(question: Question) -> Answer | None:
    if question.question_type == QuestionType.numeric:
        return parse_answer(QuestionType.numeric, question.correct_numeric or "")
    return parse_answer(question.question_type, question.correct_option or "")


def is_correct(question: Question, submitted: object) -> bool:
    got = parse_answer(question.question_type, submitted)
    if got is None:
        return False
    expected = answer_key(question)
    if expected is None:
        return False
    return got == expected


def question_marks(question: Question, *, marking_correct: int, marking_incorrect: int) -> tuple[int, int]:
    correct = question.marks_correct if question.marks_correct is not None else marking_correct
    incorrect = question.marks_incorrect if question.marks_incorrect is not None else marking_incorrect
    return int(correct), int(incorrect)


@dataclass(frozen=True)
class GradeResult:
    score: int
    attempted: int
    correct: int
    correct_ids: frozenset[str]

    @property
    def accuracy(self) -> float:
        return self.correct / self.attempted if self.attempted else 0.0


def grade_attempt(
    questions: Sequence[Question],
    answers: Mapping[str, object],
    *,
    marking_correct: int,
    marking_incorrect: int,
) -> GradeResult:
    score = 0
    attempted = 0
    correct_ids: set[str] = set()
    for q in questions:
        qid = str(q.id)
        raw = answers.get(qid)
        if not is_attempted(raw):
            continue
        attempted += 1
        plus, minus = question_marks(q, marking_correct=marking_correct, marking_incorrect=marking_incorrect)
        if is_correct(q, raw):
            score += plus
            correct_ids.add(qid)
        else:
            score += minus
    return GradeResult(score=score, attempted=attempted, correct=len(correct_ids), correct_ids=frozenset(correct_ids))
