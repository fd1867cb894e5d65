from __future__ import annotations

from pydantic import BaseModel


class PercentileBandIn(BaseModel):
    min_score: int
    max_score: int | None = None
    percentile_label: str


class PercentileBandsReplaceRequest(BaseModel):
    test_id: str
    bands: list[PercentileBandIn]


class PercentileBandPublic(BaseModel):
    id: str
    test_id: str
    min_score: int
    max_score: int | None
    percentile_label: str
