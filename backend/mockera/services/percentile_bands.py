from __future__ import annotations

import uuid

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from mockera.models.test import TestPercentileBand
from mockera.schemas.percentile_band import PercentileBandIn


def list_bands(db: Session, test_id: uuid.UUID) -> list[TestPercentileBand]:
    return list(
        db.scalars(
            select(TestPercentileBand)
            .where(TestPercentileBand.test_id == test_id)
            .order_by(TestPercentileBand.min_score.asc())
        )
    )


def replace_bands(db: Session, test_id: uuid.UUID, bands: list[PercentileBandIn]) -> list[TestPercentileBand]:
    db.execute(delete(TestPercentileBand).where(TestPercentileBand.test_id == test_id))
    for b in bands:
        db.add(
            TestPercentileBand(
                test_id=test_id,
                min_score=int(b.min_score),
                max_score=int(b.max_score) if b.max_score is not None else None,
                percentile_label=str(b.percentile_label),
            )
        )
    db.commit()
    return list_bands(db, test_id)


def band_for_score(bands: list[TestPercentileBand], score: int) -> TestPercentileBand | None:
    # bands are ordered by min_score; the highest matching floor wins
    match = None
    for b in bands:
        if score < b.min_score:
            continue
        if b.max_score is not None and score > b.max_score:
            continue
        match = b
    return match


def serialize_band(b: TestPercentileBand) -> dict:
    return {
        "id": str(b.id),
        "test_id": str(b.test_id),
        "min_score": int(b.min_score),
        "max_score": int(b.max_score) if b.max_score is not None else None,
        "percentile_label": b.percentile_label,
    }
