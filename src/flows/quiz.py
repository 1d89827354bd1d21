"""
Quiz generator flow
"""
from typing import Optional

from loguru import logger
from pydantic_ai import Agent

from flows.agents import quiz_agent, run_agent
from flows.errors import MissingOutputError
from models.flow_models import Quiz, QuizRequest


def build_quiz_prompt(request: QuizRequest) -> str:
    lines = [f"Topic: {request.topic}"]
    if request.subject:
        lines.append(f"Subject: {request.subject}")
    if request.grade_level:
        lines.append(f"Grade Level: {request.grade_level}")
    lines.append(f"Number of Questions: {request.number_of_questions}")
    return "\n".join(lines)


async def generate_quiz(request: QuizRequest, agent: Optional[Agent] = None) -> Quiz:
    agent = agent or quiz_agent()
    logger.info(f"Generating {request.number_of_questions}-question quiz on: {request.topic[:60]}")
    quiz: Quiz = await run_agent(agent, build_quiz_prompt(request), "Failed to generate quiz.")

    if len(quiz.questions) != request.number_of_questions:
        raise MissingOutputError(
            f"Expected {request.number_of_questions} questions, got {len(quiz.questions)}"
        )
    logger.info(f"Quiz generated with {len(quiz.questions)} questions")
    return quiz


def format_quiz_as_text(quiz: Quiz) -> str:
    """Numbered plain-text rendering used inside lesson plans"""
    return "\n\n".join(
        f"{i}. {q.question}\nOptions: {', '.join(q.options)}\nAnswer: {q.answer}"
        for i, q in enumerate(quiz.questions, start=1)
    )
