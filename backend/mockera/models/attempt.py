import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from mockera.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AttemptStatus(str, enum.Enum):
    submitted = "SUBMITTED"
    draft = "DRAFT"


class Attempt(Base):
    __tablename__ = "attempts"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    test_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("tests.id"), index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), index=True)

    status: Mapped[AttemptStatus] = mapped_column(Enum(AttemptStatus), index=True, default=AttemptStatus.submitted)
    candidate_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    batch_code: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)

    # question id (str) -> raw submitted value / seconds spent
    answers: Mapped[dict] = mapped_column(JSON, default=dict)
    time_spent: Mapped[dict] = mapped_column(JSON, default=dict)
    events: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    score: Mapped[int] = mapped_column(Integer, default=0)
    accuracy: Mapped[float] = mapped_column(Float, default=0.0)
    time_taken: Mapped[int] = mapped_column(Integer, default=0)

    performance_credits: Mapped[int] = mapped_column(Integer, default=0)
    streak_multiplier: Mapped[float] = mapped_column(Float, default=1.0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, index=True)
