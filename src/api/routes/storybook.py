"""
Animated storybook routes
Synchronous generation, story analysis on its own, and background jobs on the
redis/rq worker.
"""
import asyncio
import uuid
from typing import Callable, Optional

from fastapi import APIRouter, Depends
from loguru import logger
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from api.dependencies import DBSession
from api.queue import get_queue
from flows.errors import FeatureUnavailableError, FlowError
from flows.storybook import StorybookPipeline, analyze_story
from models.database_service import upsert_workflow_job
from models.storybook_models import StoryAnalysis, Storybook, StorybookRequest

router = APIRouter(prefix="/api/storybook", tags=["Storybook"])

STORYBOOK_JOB_TIMEOUT = 60 * 60


def get_pipeline() -> StorybookPipeline:
    return StorybookPipeline()


@router.post("/analyze", response_model=StoryAnalysis)
async def analyze_story_endpoint(request: StorybookRequest):
    """Break a story into scenes without generating any media"""
    return await analyze_story(request)


@router.post("", response_model=Storybook)
async def storybook_endpoint(
    request: StorybookRequest,
    pipeline: StorybookPipeline = Depends(get_pipeline)
):
    """
    Generate an animated storybook

    - **story**: Full story text (at least 20 characters)
    - **grade**: Target grade level

    Returns: title and one narrated video clip per scene, in story order.
    This call blocks for several minutes; use /api/storybook/jobs for long stories.
    """
    return await pipeline.run(request)


@router.post("/jobs")
async def enqueue_storybook_job(request: StorybookRequest, db: DBSession):
    """
    Queue a storybook for the background worker

    Returns: job_id to poll at GET /api/jobs/{job_id}
    """
    job_id = str(uuid.uuid4())
    upsert_workflow_job(
        db,
        job_id,
        kind="storybook",
        status="queued",
        progress=0.0,
        message="Storybook generation queued"
    )

    try:
        q = get_queue()
        q.enqueue(
            run_storybook_job,
            job_id,
            request.model_dump_json(),
            job_timeout=STORYBOOK_JOB_TIMEOUT
        )
    except RedisError as e:
        logger.error(f"Could not queue storybook job {job_id}: {e}")
        upsert_workflow_job(db, job_id, status="failed", progress=1.0, message="Job queue unavailable")
        raise FeatureUnavailableError(
            "Background jobs are unavailable: the job queue could not be reached. Check REDIS_URL."
        ) from e
    logger.info(f"Storybook job {job_id} queued")

    return {
        "job_id": job_id,
        "status": "queued",
        "message": "Storybook generation started"
    }


def run_storybook_job(job_id: str, request_json: str) -> None:
    """rq entry point"""
    try:
        asyncio.run(process_storybook_job(job_id, request_json))
    except RuntimeError:
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(process_storybook_job(job_id, request_json))
        finally:
            loop.close()


async def process_storybook_job(
    job_id: str,
    request_json: str,
    pipeline: Optional[StorybookPipeline] = None,
    session_factory: Optional[Callable[[], Session]] = None,
):
    """Run the pipeline and record progress, result or failure on the job row"""
    if session_factory is None:
        from models.database import SessionLocal
        session_factory = SessionLocal

    db = session_factory()
    try:
        upsert_workflow_job(db, job_id, status="processing", progress=0.01, message="Processing")

        def on_progress(progress: float, message: str) -> None:
            upsert_workflow_job(db, job_id, progress=progress, message=message)

        try:
            request = StorybookRequest.model_validate_json(request_json)
            storybook = await (pipeline or StorybookPipeline()).run(request, on_progress=on_progress)
        except FlowError as e:
            logger.error(f"Storybook job {job_id} failed: {e.message}")
            upsert_workflow_job(db, job_id, status="failed", progress=1.0, message=e.message)
            return
        except Exception as e:
            logger.exception(f"Storybook job {job_id} failed critically: {e}")
            upsert_workflow_job(db, job_id, status="failed", progress=1.0, message=str(e))
            return

        upsert_workflow_job(
            db,
            job_id,
            status="completed",
            progress=1.0,
            message=f"Storybook '{storybook.title}' generated with {len(storybook.scenes)} scenes",
            result_json=storybook.model_dump()
        )
        logger.info(f"Storybook job {job_id} completed")
    finally:
        db.close()
