from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mockera.core.security import get_current_user
from mockera.db.session import get_db
from mockera.models.user import User
from mockera.schemas.leaderboard import LeaderboardResponse
from mockera.services.leaderboard import LeaderboardScope, get_leaderboard

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=LeaderboardResponse)
def leaderboard(
    scope: LeaderboardScope = Query(default=LeaderboardScope.global_),
    batch_code: str | None = Query(default=None),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    rows = get_leaderboard(db, scope=scope, batch_code=batch_code)
    return {
        "rows": [
            {
                "rank": r.rank,
                "user_id": str(r.user_id),
                "name": r.name,
                "image": r.image,
                "performance_credits": r.performance_credits,
                "rank_shield_until": r.rank_shield_until.isoformat() if r.rank_shield_until else None,
            }
            for r in rows
        ],
        "total_users": len(rows),
    }
