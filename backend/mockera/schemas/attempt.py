from __future__ import annotations

from pydantic import BaseModel, Field


class AttemptSubmitRequest(BaseModel):
    test_id: str
    answers: dict[str, str] = Field(default_factory=dict)
    time_spent: dict[str, float] = Field(default_factory=dict)
    candidate_name: str | None = None
    batch_code: str | None = None

    # behavioural telemetry, stored verbatim
    answer_changes: dict[str, int] = Field(default_factory=dict)
    rapid_changes: dict[str, int] = Field(default_factory=dict)
    first_answered_at: dict[str, float] = Field(default_factory=dict)
    tab_switches: int = 0
    idle_gaps: int = 0
    idle_seconds: float = 0
    section_order: list[str] = Field(default_factory=list)

    def events(self) -> dict:
        return {
            "answer_changes": dict(self.answer_changes),
            "rapid_changes": dict(self.rapid_changes),
            "first_answered_at": dict(self.first_answered_at),
            "tab_switches": int(self.tab_switches),
            "idle_gaps": int(self.idle_gaps),
            "idle_seconds": float(self.idle_seconds),
            "section_order": list(self.section_order),
        }


class AttemptSubmitResponse(BaseModel):
    id: str
    test_id: str
    created_at: str
    score: int
    accuracy: float
    time_taken: int
    base_credits: int
    performance_credits: int
    streak_multiplier: float
    streak_days: int
    percentile_label: str | None = None


class AttemptItem(BaseModel):
    id: str
    test_id: str
    created_at: str
    status: str
    candidate_name: str | None
    batch_code: str | None
    score: int
    accuracy: float
    time_taken: int
    performance_credits: int
    streak_multiplier: float
    answers: dict[str, str]
    time_spent: dict[str, float]
    events: dict | None
    user_id: str
    user_name: str
    user_image: str | None


class AttemptsListResponse(BaseModel):
    items: list[AttemptItem]
