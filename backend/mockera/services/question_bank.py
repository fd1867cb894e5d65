from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from mockera.models.test import Question, QuestionType, Test, Visibility
from mockera.models.user import User
from mockera.schemas.test import TestCreateRequest
from mockera.services.grading import canonical_multi, question_marks


@dataclass
class LoadedTest:
    test: Test
    questions: list[Question]


def load_questions(db: Session, test_id: uuid.UUID) -> list[Question]:
    return list(db.scalars(select(Question).where(Question.test_id == test_id).order_by(Question.position, Question.id)))


def load_test(db: Session, test_id: uuid.UUID) -> LoadedTest | None:
    test = db.scalar(select(Test).where(Test.id == test_id))
    if test is None:
        return None
    return LoadedTest(test=test, questions=load_questions(db, test.id))


def load_all_tests(db: Session) -> dict[uuid.UUID, LoadedTest]:
    tests = db.scalars(select(Test)).all()
    questions = db.scalars(select(Question).order_by(Question.test_id, Question.position, Question.id)).all()
    by_test: dict[uuid.UUID, list[Question]] = {}
    for q in questions:
        by_test.setdefault(q.test_id, []).append(q)
    return {t.id: LoadedTest(test=t, questions=by_test.get(t.id, [])) for t in tests}


def _visible_to(user: User):
    return or_(Test.visibility == Visibility.public, Test.owner_id == user.id)


def create_test(db: Session, *, owner: User, body: TestCreateRequest) -> LoadedTest:
    test = Test(
        owner_id=owner.id,
        title=body.title.strip(),
        visibility=body.visibility,
        access_code=(body.access_code or None) if body.visibility == Visibility.private else None,
        duration_minutes=int(body.duration_minutes),
        marking_correct=int(body.marking_correct),
        marking_incorrect=int(body.marking_incorrect),
        lock_navigation=bool(body.lock_navigation),
    )
    db.add(test)
    db.flush()

    for position, item in enumerate(body.questions):
        correct_option: str | None = None
        correct_numeric: str | None = None
        if item.question_type == QuestionType.multi:
            letters = item.correct_options or [item.correct_option or ""]
            correct_option = ",".join(canonical_multi(",".join(letters)))
        elif item.question_type == QuestionType.numeric:
            correct_numeric = (item.correct_numeric or "").strip()
        else:
            correct_option = item.correct_option

        db.add(
            Question(
                test_id=test.id,
                position=position,
                subject=item.subject,
                question_type=item.question_type,
                difficulty=item.difficulty,
                correct_option=correct_option,
                correct_numeric=correct_numeric,
                marks_correct=item.marks_correct,
                marks_incorrect=item.marks_incorrect,
                prompt=item.prompt or "",
                options=list(item.options or []),
                image_url=item.image_url,
            )
        )

    db.commit()
    return LoadedTest(test=test, questions=load_questions(db, test.id))


def list_visible_tests(db: Session, *, user: User) -> list[LoadedTest]:
    tests = db.scalars(select(Test).where(_visible_to(user)).order_by(Test.created_at.desc())).all()
    return [LoadedTest(test=t, questions=load_questions(db, t.id)) for t in tests]


def get_latest_visible_test(db: Session, *, user: User) -> LoadedTest | None:
    test = db.scalar(select(Test).where(_visible_to(user)).order_by(Test.created_at.desc()).limit(1))
    if test is None:
        return None
    return LoadedTest(test=test, questions=load_questions(db, test.id))


def get_visible_test(db: Session, *, user: User, test_id: uuid.UUID) -> LoadedTest | None:
    test = db.scalar(select(Test).where(Test.id == test_id, _visible_to(user)))
    if test is None:
        return None
    return LoadedTest(test=test, questions=load_questions(db, test.id))


def serialize_test(loaded: LoadedTest) -> dict:
    t = loaded.test
    questions = []
    for q in loaded.questions:
        plus, minus = question_marks(q, marking_correct=t.marking_correct, marking_incorrect=t.marking_incorrect)
        questions.append(
            {
                "id": str(q.id),
                "position": int(q.position),
                "subject": q.subject.value,
                "question_type": q.question_type.value,
                "difficulty": q.difficulty.value,
                "correct_option": q.correct_option,
                "correct_options": [x for x in (q.correct_option or "").split(",") if x]
                if q.question_type == QuestionType.multi
                else [],
                "correct_numeric": q.correct_numeric,
                "marks_correct": plus,
                "marks_incorrect": minus,
                "prompt": q.prompt or "",
                "options": list(q.options or []),
                "image_url": q.image_url,
            }
        )
    return {
        "id": str(t.id),
        "title": t.title,
        "visibility": t.visibility.value,
        "owner_id": str(t.owner_id) if t.owner_id else None,
        "access_code": t.access_code,
        "duration_minutes": int(t.duration_minutes),
        "marking_correct": int(t.marking_correct),
        "marking_incorrect": int(t.marking_incorrect),
        "lock_navigation": bool(t.lock_navigation),
        "created_at": t.created_at.isoformat() if t.created_at else "",
        "questions": questions,
    }
