import pytest
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from mockera.core.errors import TransientStoreFailure
from mockera.models.user import User
from mockera.services.store import chunked, store_guard


def test_connection_errors_become_transient_and_roll_back(db):
    with pytest.raises(TransientStoreFailure) as exc:
        with store_guard(db, "write user"):
            db.add(User(name="pending"))
            db.flush()
            raise OperationalError("UPDATE users", {}, Exception("server closed the connection unexpectedly"))

    assert exc.value.status_code == 503
    assert exc.value.headers == {"Retry-After": "1"}
    assert db.scalars(select(User)).all() == []


def test_invalidated_connection_is_transient(db):
    with pytest.raises(TransientStoreFailure):
        with store_guard(db, "read users"):
            raise DBAPIError("SELECT 1", {}, Exception("connection reset"), connection_invalidated=True)


def test_integrity_errors_are_not_retried(db):
    with pytest.raises(IntegrityError):
        with store_guard(db, "write user"):
            db.add(User(name="dup"))
            db.flush()
            raise IntegrityError("INSERT INTO users", {}, Exception("duplicate key"))

    assert db.scalars(select(User)).all() == []


def test_chunked_splits_in_order():
    assert [list(c) for c in chunked([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]
    assert [list(c) for c in chunked([1, 2], 0)] == [[1], [2]]
