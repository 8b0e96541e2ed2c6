"""
Background tasks for RQ (Redis Queue).

Run worker: rq worker -u $REDIS_URL default
"""

from __future__ import annotations

import logging
import os
from typing import List

from scratchcard.services.code_service import IMPORT_BATCH_SIZE, import_codes

logger = logging.getLogger(__name__)

REDIS_URL = os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0")


def enqueue_code_import(
    codes: List[str], use_queue: bool = False, batch_size: int = IMPORT_BATCH_SIZE
) -> dict:
    """
    Run a code import on the default RQ queue. Returns {"queued": True,
    "job_id": ...} when enqueued, otherwise the synchronous import result.
    """
    if not use_queue:
        return import_codes(codes, batch_size)

    from redis import Redis
    from rq import Queue

    conn = Redis.from_url(REDIS_URL, decode_responses=False)
    q = Queue("default", connection=conn)
    job = q.enqueue(import_codes, codes, batch_size, job_timeout="10m")
    logger.info("import queued job_id=%s size=%s", job.id, len(codes))
    return {"queued": True, "job_id": job.id, "total": len(codes)}


def get_import_job(job_id: str) -> dict | None:
    from redis import Redis
    from rq.exceptions import NoSuchJobError
    from rq.job import Job

    conn = Redis.from_url(REDIS_URL, decode_responses=False)
    try:
        job = Job.fetch(job_id, connection=conn)
    except NoSuchJobError:
        return None
    return {
        "job_id": job.id,
        "status": job.get_status(),
        "result": job.result if job.is_finished else None,
    }
