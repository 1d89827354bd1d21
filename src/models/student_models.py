"""
Pydantic models for the student roster
"""
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

StudentStatus = Literal["On Track", "Needs Attention", "Excelling"]


class StudentCreate(BaseModel):
    name: str
    class_name: str = Field(min_length=1)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if len(v.strip()) < 2:
            raise ValueError('Name must be at least 2 characters.')
        return v.strip()


class StudentMetrics(BaseModel):
    quizzes_completed: int = 0
    average_score: int = 0
    status: StudentStatus = "Needs Attention"
    last_activity_date: str = "No activity yet"


class StudentSummary(StudentMetrics):
    id: str
    name: str
    class_name: str
    created_at: datetime


class QuizResultCreate(BaseModel):
    quiz_name: str = Field(min_length=1)
    quiz_data: Dict[str, Any] = Field(default_factory=dict)
    correct_answers: int = Field(ge=0)
    total_questions: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def fill_total_questions(self):
        if self.total_questions is None:
            questions = self.quiz_data.get("questions") or []
            if not questions:
                raise ValueError("total_questions is required when quiz_data has no questions")
            self.total_questions = len(questions)
        if self.correct_answers > self.total_questions:
            raise ValueError("correct_answers cannot exceed total_questions")
        return self


class QuizResultRead(BaseModel):
    id: str
    student_id: str
    quiz_name: str
    quiz_data: Dict[str, Any]
    correct_answers: int
    total_questions: int
    saved_at: datetime
