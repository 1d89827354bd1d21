"""
Generation flow routes
One POST endpoint per single-shot flow. Request bodies are validated before
any model is called; flow errors are mapped to HTTP by the app's handler.
"""
from fastapi import APIRouter

from api.dependencies import MediaClient
from flows.concept_images import generate_concept_images
from flows.concept_video import generate_concept_video
from flows.lesson_plan import create_lesson_plan
from flows.quiz import generate_quiz
from flows.research import run_research
from flows.teaching_methods import explain_teaching_methods, plan_week
from models.flow_models import (
    ConceptImageRequest, ConceptImages, ConceptVideo, ConceptVideoRequest, LessonPlan,
    LessonPlanRequest, Quiz, QuizRequest, ResearchReport, ResearchRequest, TeachingMethods,
    TeachingMethodsRequest, WeeklyPlan, WeeklyPlanRequest
)

router = APIRouter(prefix="/api/flows", tags=["Flows"])


@router.post("/quiz", response_model=Quiz)
async def quiz_endpoint(request: QuizRequest):
    """
    Generate a multiple choice quiz

    - **topic**: Topic or lesson content
    - **number_of_questions**: 1-20 questions (default 5)
    """
    return await generate_quiz(request)


@router.post("/teaching-methods", response_model=TeachingMethods)
async def teaching_methods_endpoint(request: TeachingMethodsRequest):
    """Suggest teaching methods for lesson content"""
    return await explain_teaching_methods(request)


@router.post("/weekly-plan", response_model=WeeklyPlan)
async def weekly_plan_endpoint(request: WeeklyPlanRequest):
    """Create a markdown weekly teaching plan"""
    return await plan_week(request)


@router.post("/concept-images", response_model=ConceptImages)
async def concept_images_endpoint(request: ConceptImageRequest, media: MediaClient):
    """Break a concept into illustrated steps"""
    return await generate_concept_images(request, media=media)


@router.post("/lesson-plan", response_model=LessonPlan)
async def lesson_plan_endpoint(request: LessonPlanRequest, media: MediaClient):
    """
    Create a full lesson plan

    Runs teaching methods, a 3-question quiz and concept images in parallel,
    then synthesizes them.
    """
    return await create_lesson_plan(request, media=media)


@router.post("/concept-video", response_model=ConceptVideo)
async def concept_video_endpoint(request: ConceptVideoRequest, media: MediaClient):
    """
    Generate a short educational video

    Blocks until the video job finishes or the polling bounds are reached.
    """
    return await generate_concept_video(request, media=media)


@router.post("/research", response_model=ResearchReport)
async def research_endpoint(request: ResearchRequest):
    """Research a topic and return a markdown report with sources"""
    return await run_research(request)
