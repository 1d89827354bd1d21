"""
Job status routes
Handles async job status monitoring
"""
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Optional, Dict
from api.dependencies import DBSession
from models.database_service import get_workflow_job
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])

STALE_AFTER = timedelta(minutes=30)


class JobStatus(BaseModel):
    job_id: str
    kind: str
    status: str  # queued, processing, completed, failed
    progress: float = 0.0
    message: Optional[str] = None
    result: Optional[Dict] = None
    error: Optional[str] = None


@router.get("/{job_id}", response_model=JobStatus)
async def get_job_status(job_id: str, db: DBSession):
    """
    Get the status of a background generation job

    - **job_id**: Job ID from POST /api/storybook/jobs

    Returns: Job status (queued, processing, completed, failed) and, once
    completed, the full result.
    """
    job = get_workflow_job(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail=f"Job {job_id} not found")

    status = (job.status or "queued").lower()
    if status not in {"queued", "processing", "completed", "failed"}:
        status = "queued"

    message = job.message  # type: ignore
    if status == "processing" and job.updated_at:
        updated_at = job.updated_at  # type: ignore
        if updated_at.tzinfo is None:
            updated_at = updated_at.replace(tzinfo=timezone.utc)
        if datetime.now(timezone.utc) - updated_at > STALE_AFTER:
            logger.warning("Job %s has not reported progress for %s", job_id, STALE_AFTER)
            status = "failed"
            stale_message = "Job appears stale (worker may have restarted). Please retry."
            message = stale_message if not message else f"{message} {stale_message}"

    return JobStatus(
        job_id=str(job.id),
        kind=job.kind or "storybook",  # type: ignore
        status=status,
        progress=job.progress or 0.0,  # type: ignore
        message=message,
        result=job.result_json if status == "completed" else None,  # type: ignore
        error=message if status == "failed" else None
    )
