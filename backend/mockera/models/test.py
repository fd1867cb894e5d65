import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from mockera.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Visibility(str, enum.Enum):
    public = "Public"
    private = "Private"


class Subject(str, enum.Enum):
    physics = "Physics"
    chemistry = "Chemistry"
    maths = "Maths"


class QuestionType(str, enum.Enum):
    single = "MCQ"
    multi = "MSQ"
    numeric = "NUM"


class Difficulty(str, enum.Enum):
    easy = "Easy"
    moderate = "Moderate"
    tough = "Tough"


class Test(Base):
    __tablename__ = "tests"
    __test__ = False

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), index=True, nullable=True)

    title: Mapped[str] = mapped_column(String(300), default="")
    visibility: Mapped[Visibility] = mapped_column(Enum(Visibility), index=True, default=Visibility.public)
    access_code: Mapped[str | None] = mapped_column(String(64), nullable=True)

    duration_minutes: Mapped[int] = mapped_column(Integer, default=180)
    marking_correct: Mapped[int] = mapped_column(Integer, default=4)
    marking_incorrect: Mapped[int] = mapped_column(Integer, default=-1)
    lock_navigation: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    test_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("tests.id"), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    subject: Mapped[Subject] = mapped_column(Enum(Subject), index=True)
    question_type: Mapped[QuestionType] = mapped_column(Enum(QuestionType), default=QuestionType.single)
    difficulty: Mapped[Difficulty] = mapped_column(Enum(Difficulty), default=Difficulty.moderate)

    # MCQ: single letter; MSQ: canonical comma-joined letters; NUM uses correct_numeric.
    correct_option: Mapped[str | None] = mapped_column(String(64), nullable=True)
    correct_numeric: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # None means "inherit from the test's marking scheme".
    marks_correct: Mapped[int | None] = mapped_column(Integer, nullable=True)
    marks_incorrect: Mapped[int | None] = mapped_column(Integer, nullable=True)

    prompt: Mapped[str] = mapped_column(String, default="")
    options: Mapped[list] = mapped_column(JSON, default=list)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)


class TestPercentileBand(Base):
    __tablename__ = "test_percentile_bands"
    __test__ = False

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    test_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("tests.id"), index=True)
    min_score: Mapped[int] = mapped_column(Integer)
    max_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    percentile_label: Mapped[str] = mapped_column(String(100))
