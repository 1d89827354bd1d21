"""
Student evaluation flow
Summarizes one student's quiz history for the teacher.
"""
from typing import List, Optional

from loguru import logger
from pydantic_ai import Agent

from flows.agents import run_agent, student_evaluation_agent
from models.flow_models import StudentEvaluation
from models.student_models import QuizResultRead, StudentSummary
from services.student_store import StudentStore, get_student_store


def build_evaluation_prompt(student: StudentSummary, results: List[QuizResultRead]) -> str:
    lines = [
        f"Student: {student.name}",
        f"Class: {student.class_name}",
        f"Quizzes completed: {student.quizzes_completed}",
        f"Average score: {student.average_score}%",
        f"Status: {student.status}",
        "",
        "Quiz history:",
    ]
    if not results:
        lines.append("- No quizzes taken yet")
    for r in results:
        lines.append(
            f"- {r.saved_at.date().isoformat()} {r.quiz_name}: {r.correct_answers}/{r.total_questions}"
        )
    return "\n".join(lines)


async def evaluate_student(
    student_id: str,
    store: Optional[StudentStore] = None,
    agent: Optional[Agent] = None,
) -> StudentEvaluation:
    store = store or get_student_store()
    # Raises StudentNotFoundError before any model call
    student = store.get_student(student_id)
    results = store.get_student_results(student_id)

    logger.info(f"Evaluating student {student_id} over {len(results)} quiz results")
    return await run_agent(
        agent or student_evaluation_agent(),
        build_evaluation_prompt(student, results),
        "Failed to evaluate the student.",
    )
