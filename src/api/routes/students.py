"""
Student management routes
Roster, quiz results with computed metrics, and AI evaluations
"""
from typing import List

from fastapi import APIRouter

from api.dependencies import Students
from flows.student_evaluation import evaluate_student
from models.flow_models import StudentEvaluation
from models.student_models import QuizResultCreate, QuizResultRead, StudentCreate, StudentSummary

router = APIRouter(prefix="/api/students", tags=["Students"])


@router.get("", response_model=List[StudentSummary])
async def list_students_endpoint(store: Students):
    """List all students with their computed metrics"""
    return store.list_students()


@router.post("", response_model=StudentSummary, status_code=201)
async def create_student_endpoint(student: StudentCreate, store: Students):
    """Add a student to the roster"""
    student_id = store.add_student(student.name, student.class_name)
    return store.get_student(student_id)


@router.get("/{student_id}", response_model=StudentSummary)
async def get_student_endpoint(student_id: str, store: Students):
    return store.get_student(student_id)


@router.get("/{student_id}/quiz-results", response_model=List[QuizResultRead])
async def list_quiz_results_endpoint(student_id: str, store: Students):
    """Quiz history of a student, oldest first"""
    return store.get_student_results(student_id)


@router.post("/{student_id}/quiz-results", status_code=201)
async def save_quiz_result_endpoint(student_id: str, result: QuizResultCreate, store: Students):
    """
    Record a quiz result

    - **total_questions**: defaults to the number of questions in quiz_data
    """
    result_id = store.save_quiz_result(student_id, result)
    return {"id": result_id, "student": store.get_student(student_id)}


@router.post("/{student_id}/evaluation", response_model=StudentEvaluation)
async def evaluate_student_endpoint(student_id: str, store: Students):
    """Generate a performance evaluation from the student's quiz history"""
    return await evaluate_student(student_id, store=store)
