from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mockera.core.security import get_current_user
from mockera.db.session import get_db
from mockera.models.user import User
from mockera.schemas.leaderboard import RankShieldResponse
from mockera.services.rank_shield import purchase_rank_shield

router = APIRouter(prefix="/rank-shield", tags=["rank-shield"])


@router.post("", response_model=RankShieldResponse)
def purchase(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    result = purchase_rank_shield(db, user_id=user.id)
    return {
        "performance_credits": result.balance,
        "rank_shield_until": result.shield_until.isoformat(),
    }
