from __future__ import annotations

import redis
from fastapi import APIRouter, Depends, HTTPException, Query

from mockera.core.queue import fetch_job, get_queue
from mockera.core.security import require_roles
from mockera.models.user import User, UserRole
from mockera.services.backfill_jobs import backfill_credits_job

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/backfill-credits")
def enqueue_backfill_credits(
    dry_run: bool = Query(default=False),
    _: User = Depends(require_roles(UserRole.admin)),
):
    try:
        q = get_queue()
        job = q.enqueue(
            backfill_credits_job,
            dry_run=bool(dry_run),
            job_timeout=60 * 30,
            result_ttl=60 * 60 * 24,
            failure_ttl=60 * 60 * 24,
        )
    except redis.RedisError as e:
        raise HTTPException(status_code=503, detail="failed to enqueue backfill job") from e

    return {"ok": True, "job_id": str(job.id), "dry_run": bool(dry_run)}


@router.get("/jobs/{job_id}")
def job_status(job_id: str, _: User = Depends(require_roles(UserRole.admin))):
    try:
        job = fetch_job(job_id)
    except redis.RedisError as e:
        raise HTTPException(status_code=503, detail="job store unavailable") from e
    if job is None:
        return {"id": str(job_id), "status": "missing", "result": None, "error": "job not found"}

    status = job.get_status(refresh=True)
    meta = dict(job.meta or {})
    return {
        "id": str(job.id),
        "status": str(status),
        "job_kind": meta.get("job_kind"),
        "enqueued_at": job.enqueued_at.isoformat() if job.enqueued_at else None,
        "started_at": job.started_at.isoformat() if job.started_at else None,
        "ended_at": job.ended_at.isoformat() if job.ended_at else None,
        "result": job.return_value() if str(status) == "finished" else None,
        "error": str(job.exc_info or "").strip().splitlines()[-1] if str(status) == "failed" and job.exc_info else None,
    }
