from __future__ import annotations

from pydantic import BaseModel


class SubjectStat(BaseModel):
    subject: str
    attempted: int
    correct: int
    accuracy: float


class ProfileUser(BaseModel):
    id: str
    name: str | None
    email: str | None
    image: str | None
    role: str
    performance_credits: int
    streak_days: int
    last_attempt_at: str | None
    rank_shield_until: str | None


class ProfileStats(BaseModel):
    tests_count: int
    attempts_count: int
    total_time_seconds: int
    avg_accuracy: float
    avg_score: float
    best_score: int
    fastest_attempt_seconds: int
    last_attempt_at: str | None
    strongest_subject: str | None
    subject_stats: list[SubjectStat]


class ProfileResponse(BaseModel):
    user: ProfileUser
    stats: ProfileStats
