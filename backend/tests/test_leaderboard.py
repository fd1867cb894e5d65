from datetime import datetime, timedelta, timezone

from factories import add_attempt, add_test, add_user, question
from sqlalchemy import update

import mockera.services.leaderboard as leaderboard_module
from mockera.db import session as session_module
from mockera.models.attempt import AttemptStatus
from mockera.models.user import User
from mockera.services.days import as_aware
from mockera.services.leaderboard import LeaderboardScope, get_leaderboard

NOW = datetime(2026, 6, 10, 14, 0, tzinfo=timezone.utc)
TODAY = datetime(2026, 6, 10, tzinfo=timezone.utc)


def _setup(db):
    test = add_test(db, [question(key="A")])
    return test


def test_leaderboard_decays_and_ranks(db):
    test = _setup(db)
    idle = add_user(db, "idle", performance_credits=5000, last_decay_at=NOW - timedelta(days=2))
    fresh = add_user(db, "fresh", performance_credits=4950, last_decay_at=NOW - timedelta(hours=1))
    for u in (idle, fresh):
        add_attempt(db, test=test, user=u, answers={})

    rows = get_leaderboard(db, now=NOW)

    assert [r.name for r in rows] == ["fresh", "idle"]
    assert [r.rank for r in rows] == [1, 2]
    assert rows[0].performance_credits == 4950
    assert rows[1].performance_credits == 4900

    db.expire_all()
    stored = db.get(User, idle.id)
    assert stored.performance_credits == 4900
    assert as_aware(stored.last_decay_at) == TODAY


def test_two_reads_same_day_do_not_double_decay(db):
    test = _setup(db)
    user = add_user(db, "idle", performance_credits=500, last_attempt_at=NOW - timedelta(days=1))
    add_attempt(db, test=test, user=user, answers={})

    first = get_leaderboard(db, now=NOW)
    second = get_leaderboard(db, now=NOW + timedelta(hours=6))

    assert first[0].performance_credits == 490
    assert second[0].performance_credits == 490


def test_shielded_user_keeps_balance(db):
    test = _setup(db)
    user = add_user(
        db,
        "shielded",
        performance_credits=1000,
        last_decay_at=NOW - timedelta(days=5),
        rank_shield_until=NOW + timedelta(hours=3),
    )
    add_attempt(db, test=test, user=user, answers={})

    rows = get_leaderboard(db, now=NOW)

    assert rows[0].performance_credits == 1000
    assert rows[0].rank_shield_until == NOW + timedelta(hours=3)
    db.expire_all()
    assert as_aware(db.get(User, user.id).last_decay_at) == TODAY


def test_only_users_with_submitted_attempts_are_listed(db):
    test = _setup(db)
    add_user(db, "lurker", performance_credits=900)
    drafter = add_user(db, "drafter", performance_credits=800)
    add_attempt(db, test=test, user=drafter, answers={}, status=AttemptStatus.draft)
    player = add_user(db, "player", performance_credits=10)
    add_attempt(db, test=test, user=player, answers={})

    rows = get_leaderboard(db, now=NOW)

    assert [r.name for r in rows] == ["player"]


def test_batch_scope_filters_by_batch_code(db):
    test = _setup(db)
    a = add_user(db, "a", performance_credits=30)
    b = add_user(db, "b", performance_credits=20)
    add_attempt(db, test=test, user=a, answers={}, batch_code="JEE-A")
    add_attempt(db, test=test, user=b, answers={}, batch_code="JEE-B")

    rows = get_leaderboard(db, scope=LeaderboardScope.batch, batch_code="JEE-B", now=NOW)
    everyone = get_leaderboard(db, scope=LeaderboardScope.global_, batch_code="JEE-B", now=NOW)

    assert [r.name for r in rows] == ["b"]
    assert [r.name for r in everyone] == ["a", "b"]


def test_decay_writes_are_chunked(db):
    test = _setup(db)
    users = [
        add_user(db, f"u{i}", performance_credits=100 + i, last_decay_at=NOW - timedelta(days=1)) for i in range(5)
    ]
    for u in users:
        add_attempt(db, test=test, user=u, answers={})

    rows = get_leaderboard(db, now=NOW, chunk_size=2)

    assert [r.performance_credits for r in rows] == [94, 93, 92, 91, 90]


def test_decay_does_not_overwrite_a_submission_that_lands_mid_read(db, monkeypatch):
    test = _setup(db)
    user = add_user(db, "racer", performance_credits=1000, last_decay_at=NOW - timedelta(days=1))
    add_attempt(db, test=test, user=user, answers={})

    real_apply_decay = leaderboard_module.apply_decay

    def _decay_then_submission_commits(now, **kwargs):
        result = real_apply_decay(now, **kwargs)
        with session_module.SessionLocal() as other:
            other.execute(
                update(User).where(User.id == user.id).values(performance_credits=1080, last_decay_at=NOW)
            )
            other.commit()
        return result

    monkeypatch.setattr(leaderboard_module, "apply_decay", _decay_then_submission_commits)

    rows = get_leaderboard(db, now=NOW)

    assert rows[0].performance_credits == 1080
    db.expire_all()
    assert db.get(User, user.id).performance_credits == 1080


def test_guarded_decay_still_applies_when_nothing_raced(db):
    test = _setup(db)
    user = add_user(db, "calm", performance_credits=1000, last_decay_at=NOW - timedelta(days=1))
    add_attempt(db, test=test, user=user, answers={})

    # the session holds a loaded copy before the read, as under an authenticated request
    assert user.performance_credits == 1000

    rows = get_leaderboard(db, now=NOW)

    assert rows[0].performance_credits == 990
