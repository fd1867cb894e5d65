from __future__ import annotations

import logging

from rq import get_current_job

from mockera.db import session as session_module
from mockera.services.backfill import backfill_credits


log = logging.getLogger(__name__)


def backfill_credits_job(*, dry_run: bool = False, chunk_size: int | None = None) -> dict:
    job = get_current_job()

    db = session_module.SessionLocal()
    try:
        out = backfill_credits(db, chunk_size=chunk_size, dry_run=dry_run)
    finally:
        db.close()

    if job is not None:
        meta = dict(job.meta or {})
        meta.update(out)
        meta["job_kind"] = "backfill_credits"
        job.meta = meta
        job.save_meta()

    log.info("backfill_credits_job: %s", out)
    return out
