"""
FastAPI application for EduStudio
Generative-AI flows for teachers: quizzes, lesson plans, concept media,
animated storybooks, a tool-using assistant and a student dashboard.
"""
from dotenv import load_dotenv

# Load env vars immediately
load_dotenv()

import traceback

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from api.queue import redis_available
from flows.errors import FlowError
from models.database import create_tables
from utils.config_loader import get_settings

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "*",
    "Access-Control-Allow-Headers": "*",
}


# ============= FASTAPI APP SETUP =============
app = FastAPI(
    title="EduStudio API",
    description="Generative-AI teaching tools: flows, storybooks, assistant and student dashboard",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


class CORSErrorMiddleware(BaseHTTPMiddleware):
    """Ensure CORS headers are always added, even on errors"""

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers={**CORS_HEADERS, "Access-Control-Max-Age": "86400"})

        try:
            response = await call_next(request)
            response.headers.update(CORS_HEADERS)
            return response
        except Exception as e:
            logger.error(f"Middleware caught exception: {e}")
            logger.error(f"Traceback: {traceback.format_exc()}")
            return JSONResponse(status_code=500, content={"detail": str(e)}, headers=CORS_HEADERS)


# Add custom CORS error middleware FIRST (it will run last, wrapping everything)
app.add_middleware(CORSErrorMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.exception_handler(FlowError)
async def flow_error_handler(request: Request, exc: FlowError):
    """Map flow failures to their HTTP status with a readable detail"""
    logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.__class__.__name__},
        headers=CORS_HEADERS,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_errors(exc)},
        headers=CORS_HEADERS,
    )


def jsonable_errors(exc: RequestValidationError):
    # ctx may hold the raw ValueError raised by a validator
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


# Global exception handler to ensure CORS headers are always sent
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Handle all unhandled exceptions and ensure CORS headers are included"""
    logger.error(f"Unhandled exception: {exc}")
    logger.error(f"Traceback: {traceback.format_exc()}")
    return JSONResponse(status_code=500, content={"detail": str(exc)}, headers=CORS_HEADERS)


@app.on_event("startup")
async def startup_event():
    """Initialize database on startup"""
    create_tables()
    logger.info("Database tables created/verified")
    settings = get_settings()
    if not settings.generation_enabled:
        logger.warning("GEMINI_API_KEY is not set; generation features are disabled")
    logger.info(f"Student store: {settings.student_store}, text model: {settings.text_model}")


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "EduStudio API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "features": "GET /api/features",
            "flows": {
                "quiz": "POST /api/flows/quiz",
                "teaching_methods": "POST /api/flows/teaching-methods",
                "weekly_plan": "POST /api/flows/weekly-plan",
                "concept_images": "POST /api/flows/concept-images",
                "lesson_plan": "POST /api/flows/lesson-plan",
                "concept_video": "POST /api/flows/concept-video",
                "research": "POST /api/flows/research"
            },
            "storybook": {
                "analyze": "POST /api/storybook/analyze",
                "generate": "POST /api/storybook",
                "enqueue": "POST /api/storybook/jobs"
            },
            "job_status": "GET /api/jobs/{job_id}",
            "assistant": "POST /api/assistant",
            "students": {
                "list": "GET /api/students",
                "create": "POST /api/students",
                "quiz_results": "GET /api/students/{student_id}/quiz-results",
                "save_quiz_result": "POST /api/students/{student_id}/quiz-results",
                "evaluation": "POST /api/students/{student_id}/evaluation"
            },
            "live": "WS /api/live"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "gemini_api_configured": get_settings().generation_enabled
    }


@app.get("/api/features")
def features():
    """Which features can run with the configured secrets"""
    settings = get_settings()
    generation = settings.generation_enabled
    return {
        "generation": generation,
        "video": generation,
        "live": generation,
        "workflow_tools": bool(settings.workflow_webhook_url),
        "background_jobs": redis_available(),
        "database": settings.student_store == "database",
    }


# Import and include routers
from api.routes import assistant, flows, jobs, live, storybook, students

app.include_router(flows.router)
app.include_router(storybook.router)
app.include_router(jobs.router)
app.include_router(assistant.router)
app.include_router(students.router)
app.include_router(live.router)
