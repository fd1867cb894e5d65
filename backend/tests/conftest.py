import sys
import time
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

backend_dir = Path(__file__).resolve().parents[1]
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from mockera.core.config import settings
from mockera.db.base import Base
from mockera.db import session as session_module
from mockera.main import create_app

# Import models so that they are registered in Base.metadata before create_all.
from mockera.models.user import User, UserRole
from mockera.models.test import Question, Test, TestPercentileBand  # noqa: F401
from mockera.models.attempt import Attempt  # noqa: F401


class _MemoryRedis:
    def __init__(self):
        self._data: dict[str, tuple[str, float | None]] = {}

    def ping(self):
        return True

    def _now(self) -> float:
        return time.time()

    def _get_entry(self, key: str):
        v = self._data.get(key)
        if not v:
            return None
        value, exp = v
        if exp is not None and exp <= self._now():
            self._data.pop(key, None)
            return None
        return value, exp

    def get(self, key: str):
        entry = self._get_entry(key)
        return entry[0] if entry else None

    def set(self, key: str, value: str, ex: int | None = None, nx: bool = False):
        if nx and self._get_entry(key) is not None:
            return None
        exp = (self._now() + int(ex)) if ex else None
        self._data[key] = (value, exp)
        return True

    def delete(self, key: str):
        self._data.pop(key, None)
        return 1

    def incr(self, key: str):
        cur = self.get(key)
        n = int(cur or 0) + 1
        _, exp = self._data.get(key, ("", None))
        self._data[key] = (str(n), exp)
        return n

    def expire(self, key: str, seconds: int):
        entry = self._get_entry(key)
        if not entry:
            return False
        value, _ = entry
        self._data[key] = (value, self._now() + int(seconds))
        return True

    def ttl(self, key: str):
        entry = self._get_entry(key)
        if not entry:
            return -2
        _, exp = entry
        if exp is None:
            return -1
        return max(0, int(exp - self._now()))


# Configure test DB (SQLite in-memory) at import time so every module that
# resolves session_module.SessionLocal at call time gets the patched factory.
_engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
Base.metadata.create_all(bind=_engine)
session_module.engine = _engine
session_module.SessionLocal = session_module.sessionmaker(autocommit=False, autoflush=False, bind=_engine)


# Stub Redis at import time (rate limiting + readiness check).
_mem_redis = _MemoryRedis()
import mockera.core.redis_client as redis_client_module

redis_client_module.get_redis = lambda: _mem_redis

import mockera.core.rate_limit as rate_limit_module

rate_limit_module.get_redis = lambda: _mem_redis

import mockera.routers.health as health_router_module

health_router_module.get_redis = lambda: _mem_redis


@pytest.fixture(autouse=True)
def _clean_tables():
    with _engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    yield


@pytest.fixture(scope="session")
def client():
    app = create_app()

    def _get_db_override():
        db = session_module.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[session_module.get_db] = _get_db_override
    return TestClient(app)


@pytest.fixture()
def db():
    with session_module.SessionLocal() as session:
        yield session


def token_for(user: User) -> str:
    return jwt.encode(
        {"sub": str(user.id), "iss": settings.jwt_issuer},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


@pytest.fixture()
def student(db):
    user = User(name="student", role=UserRole.student, performance_credits=0, streak_days=0)
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def admin_user(db):
    user = User(name="admin", role=UserRole.admin, performance_credits=0, streak_days=0)
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def auth_headers(student):
    return {"Authorization": f"Bearer {token_for(student)}"}


@pytest.fixture()
def admin_headers(admin_user):
    return {"Authorization": f"Bearer {token_for(admin_user)}"}
