from __future__ import annotations

from pydantic import BaseModel


class LeaderboardRowPublic(BaseModel):
    rank: int
    user_id: str
    name: str
    image: str | None
    performance_credits: int
    rank_shield_until: str | None


class LeaderboardResponse(BaseModel):
    rows: list[LeaderboardRowPublic]
    total_users: int


class RankShieldResponse(BaseModel):
    performance_credits: int
    rank_shield_until: str
