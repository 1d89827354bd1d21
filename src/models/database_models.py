"""
SQLAlchemy database models for EduStudio
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, JSON
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

# ============= STUDENT ROSTER =============

class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    class_name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    quiz_results = relationship("QuizResult", back_populates="student", order_by="QuizResult.saved_at")


class QuizResult(Base):
    __tablename__ = "quiz_results"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    quiz_name = Column(String(500), nullable=False)
    quiz_data = Column(JSON)
    correct_answers = Column(Integer, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False)
    saved_at = Column(DateTime(timezone=True), server_default=func.now())

    student = relationship("Student", back_populates="quiz_results")

# ============= WORKFLOW JOBS =============
class WorkflowJob(Base):
    __tablename__ = "workflow_jobs"

    id = Column(String(100), primary_key=True, index=True)
    kind = Column(String(50), default="storybook")
    status = Column(String(50), default="queued")
    progress = Column(Float, default=0.0)
    message = Column(String(500))
    result_json = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
