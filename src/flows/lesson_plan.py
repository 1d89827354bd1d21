"""
Lesson plan creator flow
Runs the teaching-method, quiz and concept-image flows in parallel, then
synthesizes their outputs into one markdown lesson plan.
"""
import asyncio
from typing import Optional

from loguru import logger
from pydantic_ai import Agent

from flows.agents import lesson_synthesis_agent, run_agent
from flows.concept_images import generate_concept_images
from flows.quiz import format_quiz_as_text, generate_quiz
from flows.teaching_methods import explain_teaching_methods
from llm.media import GenAIMediaClient
from models.flow_models import (
    ConceptImageRequest, LessonPlan, LessonPlanRequest, QuizRequest, TeachingMethodsRequest
)

LESSON_QUIZ_QUESTIONS = 3


def build_synthesis_prompt(request: LessonPlanRequest, teaching_methods: str, quiz_text: str) -> str:
    return f"""Topic: {request.topic}
Grade Level: {request.grade}
Subject: {request.subject}

Here is the information from your assistant agents:

1. **Suggested Teaching Methods & Activities:**
{teaching_methods}

2. **Generated Assessment Quiz:**
{quiz_text}

Format the entire output as a clean, readable Markdown document."""


async def create_lesson_plan(
    request: LessonPlanRequest,
    synthesis_agent: Optional[Agent] = None,
    quiz_agent: Optional[Agent] = None,
    methods_agent: Optional[Agent] = None,
    media: Optional[GenAIMediaClient] = None,
) -> LessonPlan:
    logger.info(f"Lesson plan orchestration started for topic: {request.topic}")

    methods, quiz, images = await asyncio.gather(
        explain_teaching_methods(
            TeachingMethodsRequest(content=request.topic, grade=request.grade, subject=request.subject),
            agent=methods_agent,
        ),
        generate_quiz(
            # The lesson topic has already been validated with a shorter minimum
            QuizRequest.model_construct(
                topic=request.topic,
                grade_level=request.grade,
                subject=request.subject,
                number_of_questions=LESSON_QUIZ_QUESTIONS,
            ),
            agent=quiz_agent,
        ),
        generate_concept_images(
            ConceptImageRequest(concept_description=request.topic, grade=request.grade, subject=request.subject),
            media=media,
        ),
    )

    logger.info("Synthesizing results from all agents...")
    prompt = build_synthesis_prompt(request, methods.teaching_methods, format_quiz_as_text(quiz))
    lesson_plan = await run_agent(
        synthesis_agent or lesson_synthesis_agent(), prompt, "Failed to synthesize the lesson plan."
    )

    image_url = images.steps[0].image_url if images.steps else ""
    return LessonPlan(lesson_plan=lesson_plan, image_url=image_url)
