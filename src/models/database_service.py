"""
Database service functions for CRUD operations
"""
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from loguru import logger
from .database_models import Student, QuizResult, WorkflowJob

# Student operations
def get_students(db: Session) -> List[Student]:
    return db.query(Student).order_by(Student.id).all()

def get_student_by_id(db: Session, student_id: int) -> Optional[Student]:
    return db.query(Student).filter(Student.id == student_id).first()

def create_student(db: Session, name: str, class_name: str) -> Student:
    student = Student(
        name=name,
        class_name=class_name
    )
    db.add(student)
    db.commit()
    db.refresh(student)
    logger.info(f"Student created: {student.name} (ID: {student.id}) in class {class_name}")
    return student

# Quiz result operations
def create_quiz_result(db: Session, student_id: int, quiz_name: str, quiz_data: Dict[str, Any],
                       correct_answers: int, total_questions: int) -> QuizResult:
    quiz_result = QuizResult(
        student_id=student_id,
        quiz_name=quiz_name,
        quiz_data=quiz_data,
        correct_answers=correct_answers,
        total_questions=total_questions
    )
    db.add(quiz_result)
    db.commit()
    db.refresh(quiz_result)
    logger.info(f"Quiz result saved: {quiz_name} for student {student_id} (ID: {quiz_result.id})")
    return quiz_result

def get_quiz_results_by_student(db: Session, student_id: int) -> List[QuizResult]:
    return (
        db.query(QuizResult)
        .filter(QuizResult.student_id == student_id)
        .order_by(QuizResult.saved_at, QuizResult.id)
        .all()
    )

# Workflow job operations
def get_workflow_job(db: Session, job_id: str) -> Optional[WorkflowJob]:
    return db.query(WorkflowJob).filter(WorkflowJob.id == job_id).first()

def upsert_workflow_job(db: Session, job_id: str, **fields) -> WorkflowJob:
    job_record = get_workflow_job(db, job_id)
    if not job_record:
        job_record = WorkflowJob(id=job_id, **fields)
        db.add(job_record)
    else:
        for key, value in fields.items():
            setattr(job_record, key, value)
    db.commit()
    return job_record
