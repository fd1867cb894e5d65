from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mockera.core.security import get_current_user
from mockera.db.session import get_db
from mockera.models.user import User
from mockera.schemas.profile import ProfileResponse
from mockera.services.profile import build_profile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
def my_profile(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return build_profile(db, user)
