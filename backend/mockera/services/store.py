"""Transaction helpers shared by the orchestrators."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Sequence, TypeVar

from sqlalchemy import update
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from mockera.core.config import settings
from mockera.core.errors import TransientStoreFailure


log = logging.getLogger(__name__)

T = TypeVar("T")


def _is_transient(e: DBAPIError) -> bool:
    return isinstance(e, (OperationalError, InterfaceError)) or bool(e.connection_invalidated)


@contextmanager
def store_guard(db: Session, operation: str) -> Iterator[None]:
    """Roll back on any driver error; connection-level ones become TransientStoreFailure.

    Integrity and programming errors are re-raised unchanged after the rollback.
    """
    try:
        yield
    except DBAPIError as e:
        db.rollback()
        if not _is_transient(e):
            raise
        log.warning("%s: store failure: %s", operation, e.__class__.__name__)
        raise TransientStoreFailure(f"{operation} failed, retry later") from e


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    size = max(1, int(size))
    for i in range(0, len(items), size):
        yield items[i : i + size]


def update_rows(db: Session, model: type, rows: Sequence[dict], *, chunk_size: int | None = None) -> int:
    """Bulk UPDATE by primary key, one committed transaction per chunk.

    Each row must carry the primary key under "id". Chunks already committed
    stay committed if a later chunk fails; re-running is safe because every
    row is written by id with absolute values.
    """
    size = int(chunk_size or settings.batch_chunk_size)
    written = 0
    for part in chunked(rows, size):
        with store_guard(db, f"update {model.__tablename__}"):
            db.execute(update(model), list(part))
            db.commit()
        written += len(part)
    return written


def update_rows_if_unchanged(
    db: Session,
    model: type,
    rows: Sequence[dict],
    *,
    chunk_size: int | None = None,
) -> int:
    """Compare-and-set UPDATE by primary key, one committed transaction per chunk.

    Each row is {"id": ..., "expected": {column: value}, "values": {column: value}}.
    A row is written only while its columns still hold the expected values, so a
    concurrent writer that committed in between wins and the row is skipped.
    Returns how many rows were written.
    """
    size = int(chunk_size or settings.batch_chunk_size)
    written = 0
    for part in chunked(rows, size):
        with store_guard(db, f"update {model.__tablename__}"):
            for row in part:
                guards = [getattr(model, k).is_not_distinct_from(v) for k, v in row["expected"].items()]
                stmt = (
                    update(model)
                    .where(model.id == row["id"], *guards)
                    .values(**row["values"])
                    .execution_options(synchronize_session=False)
                )
                written += int(db.execute(stmt).rowcount or 0)
            db.commit()
    return written
