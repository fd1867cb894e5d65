import uuid
from datetime import datetime, timedelta, timezone

import pytest
from factories import add_user
from sqlalchemy import update

from mockera.core.errors import InsufficientCredits, UserNotFound
from mockera.db import session as session_module
from mockera.models.user import User
from mockera.services.days import as_aware
from mockera.services.rank_shield import purchase_rank_shield

NOW = datetime(2026, 7, 1, 8, 0, tzinfo=timezone.utc)


def test_purchase_debits_cost_and_grants_a_day(db):
    user = add_user(db, "buyer", performance_credits=450)

    result = purchase_rank_shield(db, user_id=user.id, now=NOW)

    assert result.balance == 250
    assert result.shield_until == NOW + timedelta(hours=24)
    db.refresh(user)
    assert user.performance_credits == 250
    assert as_aware(user.rank_shield_until) == NOW + timedelta(hours=24)


def test_repurchase_overwrites_instead_of_stacking(db):
    user = add_user(db, "buyer", performance_credits=1000)

    purchase_rank_shield(db, user_id=user.id, now=NOW)
    later = NOW + timedelta(hours=5)
    result = purchase_rank_shield(db, user_id=user.id, now=later)

    assert result.balance == 600
    assert result.shield_until == later + timedelta(hours=24)


def test_insufficient_credits(db):
    user = add_user(db, "poor", performance_credits=199)

    with pytest.raises(InsufficientCredits) as exc:
        purchase_rank_shield(db, user_id=user.id, now=NOW)

    assert exc.value.balance == 199
    assert exc.value.cost == 200
    db.refresh(user)
    assert user.performance_credits == 199
    assert user.rank_shield_until is None


def test_unknown_user(db):
    with pytest.raises(UserNotFound):
        purchase_rank_shield(db, user_id=uuid.uuid4(), now=NOW)


def test_purchase_checks_the_committed_balance(db):
    user = add_user(db, "spender", performance_credits=1000)
    # the request session already holds the user, as after authentication
    assert user.performance_credits == 1000

    with session_module.SessionLocal() as other:
        other.execute(update(User).where(User.id == user.id).values(performance_credits=100))
        other.commit()

    with pytest.raises(InsufficientCredits) as exc:
        purchase_rank_shield(db, user_id=user.id, now=NOW)

    assert exc.value.balance == 100
    db.expire_all()
    stored = db.get(User, user.id)
    assert stored.performance_credits == 100
    assert stored.rank_shield_until is None
