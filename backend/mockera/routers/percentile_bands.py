from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from mockera.core.security import require_roles
from mockera.db.session import get_db
from mockera.models.test import Test
from mockera.models.user import User, UserRole
from mockera.schemas.percentile_band import PercentileBandPublic, PercentileBandsReplaceRequest
from mockera.services.percentile_bands import list_bands, replace_bands, serialize_band

router = APIRouter(prefix="/percentile-bands", tags=["percentile-bands"])


def _test_uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError as e:
        raise HTTPException(status_code=400, detail="invalid test id") from e


@router.get("", response_model=list[PercentileBandPublic])
def get_bands(test_id: str = Query(...), db: Session = Depends(get_db)):
    return [serialize_band(b) for b in list_bands(db, _test_uuid(test_id))]


@router.post("", response_model=list[PercentileBandPublic])
def put_bands(
    body: PercentileBandsReplaceRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(UserRole.admin)),
):
    tid = _test_uuid(body.test_id)
    if db.scalar(select(Test.id).where(Test.id == tid)) is None:
        raise HTTPException(status_code=404, detail="test not found")
    return [serialize_band(b) for b in replace_bands(db, tid, body.bands)]
