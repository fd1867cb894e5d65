from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from mockera.core.security import get_current_user
from mockera.db.session import get_db
from mockera.models.user import User
from mockera.schemas.test import TestCreateRequest, TestPublic
from mockera.services.question_bank import (
    create_test,
    get_latest_visible_test,
    get_visible_test,
    list_visible_tests,
    serialize_test,
)

router = APIRouter(prefix="/tests", tags=["tests"])


@router.post("", response_model=TestPublic, status_code=201)
def create(body: TestCreateRequest, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if not body.questions:
        raise HTTPException(status_code=400, detail="test has no questions")
    return serialize_test(create_test(db, owner=user, body=body))


@router.get("", response_model=list[TestPublic])
def list_tests(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return [serialize_test(t) for t in list_visible_tests(db, user=user)]


@router.get("/latest", response_model=TestPublic | None)
def latest_test(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    loaded = get_latest_visible_test(db, user=user)
    return serialize_test(loaded) if loaded is not None else None


@router.get("/{test_id}", response_model=TestPublic)
def get_test(test_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        tid = uuid.UUID(test_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="invalid test id") from e

    loaded = get_visible_test(db, user=user, test_id=tid)
    if loaded is None:
        raise HTTPException(status_code=404, detail="test not found")
    return serialize_test(loaded)
