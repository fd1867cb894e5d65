from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from mockera.core.config import settings
from mockera.core.rate_limit import rate_limit
from mockera.core.security import get_current_user
from mockera.db.session import get_db
from mockera.models.attempt import Attempt
from mockera.models.user import User
from mockera.schemas.attempt import AttemptsListResponse, AttemptSubmitRequest, AttemptSubmitResponse
from mockera.services.days import as_aware
from mockera.services.submission import submit_attempt

router = APIRouter(prefix="/attempts", tags=["attempts"])


def _parse_uuid(value: str, what: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"invalid {what}") from e


@router.post("", response_model=AttemptSubmitResponse, status_code=201)
def submit(
    body: AttemptSubmitRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    _: object = rate_limit(key_prefix="attempt_submit", limit=settings.submit_rate_limit_per_minute, window_seconds=60),
):
    result = submit_attempt(
        db,
        test_id=_parse_uuid(body.test_id, "test id"),
        user_id=user.id,
        answers=body.answers,
        time_spent=body.time_spent,
        candidate_name=body.candidate_name,
        batch_code=body.batch_code,
        events=body.events(),
    )
    return AttemptSubmitResponse(
        id=str(result.attempt_id),
        test_id=str(result.test_id),
        created_at=result.created_at.isoformat(),
        score=result.score,
        accuracy=result.accuracy,
        time_taken=result.time_taken,
        base_credits=result.base_credits,
        performance_credits=result.performance_credits,
        streak_multiplier=result.streak_multiplier,
        streak_days=result.streak_days,
        percentile_label=result.percentile_label,
    )


@router.get("", response_model=AttemptsListResponse)
def list_attempts(
    scope: str = Query(default="mine"),
    test_id: str | None = Query(default=None),
    batch_code: str | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stmt = select(Attempt, User).join(User, User.id == Attempt.user_id)
    if scope != "global":
        stmt = stmt.where(Attempt.user_id == user.id)
    if test_id:
        stmt = stmt.where(Attempt.test_id == _parse_uuid(test_id, "test id"))
    if batch_code:
        stmt = stmt.where(Attempt.batch_code == batch_code)

    rows = db.execute(stmt.order_by(Attempt.created_at.desc())).all()
    return {
        "items": [
            {
                "id": str(a.id),
                "test_id": str(a.test_id),
                "created_at": as_aware(a.created_at).isoformat(),
                "status": a.status.value,
                "candidate_name": a.candidate_name,
                "batch_code": a.batch_code,
                "score": int(a.score or 0),
                "accuracy": float(a.accuracy or 0.0),
                "time_taken": int(a.time_taken or 0),
                "performance_credits": int(a.performance_credits or 0),
                "streak_multiplier": float(a.streak_multiplier or 1.0),
                "answers": dict(a.answers or {}),
                "time_spent": dict(a.time_spent or {}),
                "events": a.events,
                "user_id": str(u.id),
                "user_name": u.name or "Anonymous",
                "user_image": u.image,
            }
            for a, u in rows
        ]
    }
