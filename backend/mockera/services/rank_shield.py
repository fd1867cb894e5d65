from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from mockera.core.config import settings
from mockera.core.errors import InsufficientCredits, UserNotFound
from mockera.models.user import User
from mockera.services.days import to_utc
from mockera.services.store import store_guard


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShieldPurchase:
    balance: int
    shield_until: datetime


def purchase_rank_shield(db: Session, *, user_id: uuid.UUID, now: datetime | None = None) -> ShieldPurchase:
    """Debit the shield cost and (re)start the shield window from `now`.

    A new purchase replaces any running shield rather than extending it.
    """
    now = to_utc(now) if now is not None else datetime.now(timezone.utc)
    cost = int(settings.rank_shield_cost)

    with store_guard(db, "purchase rank shield"):
        # populate_existing: the request session may already hold this User from auth
        user = db.scalar(
            select(User).where(User.id == user_id).with_for_update().execution_options(populate_existing=True)
        )
        if user is None:
            db.rollback()
            raise UserNotFound(user_id)

        balance = int(user.performance_credits or 0)
        if balance < cost:
            db.rollback()
            raise InsufficientCredits(balance=balance, cost=cost)

        until = now + timedelta(hours=int(settings.rank_shield_hours))
        user.performance_credits = balance - cost
        user.rank_shield_until = until
        db.commit()

    log.info("rank shield purchased: user=%s cost=%s until=%s", user_id, cost, until.isoformat())
    return ShieldPurchase(balance=balance - cost, shield_until=until)
