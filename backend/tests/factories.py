import uuid
from datetime import datetime

from mockera.models.attempt import Attempt, AttemptStatus
from mockera.models.test import Difficulty, Question, QuestionType, Subject, Test, Visibility
from mockera.models.user import User, UserRole


def question(
    *,
    qtype: QuestionType = QuestionType.single,
    key: str = "A",
    difficulty: Difficulty = Difficulty.moderate,
    subject: Subject = Subject.physics,
    marks_correct: int | None = None,
    marks_incorrect: int | None = None,
    position: int = 0,
) -> Question:
    return Question(
        id=uuid.uuid4(),
        position=position,
        subject=subject,
        question_type=qtype,
        difficulty=difficulty,
        correct_option=None if qtype == QuestionType.numeric else key,
        correct_numeric=key if qtype == QuestionType.numeric else None,
        marks_correct=marks_correct,
        marks_incorrect=marks_incorrect,
        prompt="",
        options=[],
    )


def add_test(db, questions: list[Question], *, marking_correct: int = 4, marking_incorrect: int = -1) -> Test:
    test = Test(
        id=uuid.uuid4(),
        title="Mock",
        visibility=Visibility.public,
        duration_minutes=180,
        marking_correct=marking_correct,
        marking_incorrect=marking_incorrect,
        lock_navigation=False,
    )
    db.add(test)
    db.flush()
    for i, q in enumerate(questions):
        q.test_id = test.id
        q.position = i
        db.add(q)
    db.commit()
    return test


def add_user(db, name: str = "user", **kw) -> User:
    fields = {"performance_credits": 0, "streak_days": 0, "role": UserRole.student}
    fields.update(kw)
    user = User(name=name, **fields)
    db.add(user)
    db.commit()
    return user


def add_attempt(
    db,
    *,
    test: Test,
    user: User,
    answers: dict,
    time_spent: dict | None = None,
    status: AttemptStatus = AttemptStatus.submitted,
    batch_code: str | None = None,
    created_at: datetime | None = None,
    commit: bool = True,
) -> Attempt:
    attempt = Attempt(
        test_id=test.id,
        user_id=user.id,
        status=status,
        batch_code=batch_code,
        answers=answers,
        time_spent=time_spent or {},
        score=0,
        accuracy=0.0,
        time_taken=0,
        performance_credits=0,
        streak_multiplier=1.0,
    )
    if created_at is not None:
        attempt.created_at = created_at
    db.add(attempt)
    if commit:
        db.commit()
    return attempt
