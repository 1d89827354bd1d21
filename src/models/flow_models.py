"""
Pydantic models for the generation flows
Request schemas validate caller input before any remote call is made;
output schemas double as the structured-output contract for the agents.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from utils.media_uri import parse_data_uri

AspectRatio = Literal["16:9", "9:16"]


def validate_data_uri(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    parse_data_uri(value)
    return value


# ============= QUIZ MODELS =============

class QuizRequest(BaseModel):
    topic: str = Field(min_length=10, description="The topic or lesson content to generate a quiz for")
    grade_level: Optional[str] = Field(default=None, description="Grade level of the students taking the quiz")
    subject: Optional[str] = None
    number_of_questions: int = Field(default=5, ge=1, le=20)


class QuizQuestion(BaseModel):
    """A multiple choice question"""
    question: str = Field(description="The question text")
    options: List[str] = Field(min_length=2, description="Answer choices")
    answer: str = Field(description="The correct answer, copied exactly from options")

    @model_validator(mode="after")
    def answer_in_options(self):
        if self.answer not in self.options:
            raise ValueError(f"Answer '{self.answer}' is not one of the options")
        return self


class Quiz(BaseModel):
    questions: List[QuizQuestion] = Field(description="List of quiz questions")


# ============= TEACHING SUPPORT MODELS =============

class TeachingMethodsRequest(BaseModel):
    content: str = Field(min_length=1, description="Lesson content")
    grade: str
    subject: str


class TeachingMethods(BaseModel):
    teaching_methods: str = Field(description="Suggested teaching methods tailored to the content and student level")


class WeeklyPlanRequest(BaseModel):
    teaching_goals: str = Field(min_length=10)
    constraints: str = Field(min_length=10)
    language: str = "English"


class WeeklyPlan(BaseModel):
    weekly_plan: str = Field(description="Weekly plan with daily activities, assignments and assessments in markdown")


# ============= CONCEPT IMAGE MODELS =============

class ConceptImageRequest(BaseModel):
    concept_description: str = Field(min_length=3)
    grade: Optional[str] = None
    subject: Optional[str] = None
    number_of_steps: int = Field(default=3, ge=1, le=6)


class ConceptStep(BaseModel):
    step_description: str
    image_url: str = Field(description="Data URI of the generated image")


class ConceptImages(BaseModel):
    steps: List[ConceptStep]


# ============= LESSON PLAN MODELS =============

class LessonPlanRequest(BaseModel):
    topic: str = Field(min_length=5)
    grade: str
    subject: str = Field(min_length=2)


class LessonPlan(BaseModel):
    lesson_plan: str = Field(description="The complete lesson plan in Markdown format")
    image_url: str = ""


# ============= CONCEPT VIDEO MODELS =============

class ConceptVideoRequest(BaseModel):
    prompt: str = Field(min_length=10)
    grade: str
    subject: str = Field(min_length=2)
    duration: int = Field(default=5, ge=5, le=8, description="Duration in seconds")
    aspect_ratio: AspectRatio = "16:9"
    image: Optional[str] = Field(default=None, description="Optional starting image as a data URI")
    model: Optional[str] = Field(default=None, description="Video model, defaults to the configured one")

    @field_validator('image')
    @classmethod
    def validate_image(cls, v):
        return validate_data_uri(v)


class VideoSummary(BaseModel):
    title: str = Field(description="Concise title of the video")
    description: str = Field(description="One-sentence description of the video")


class ConceptVideo(BaseModel):
    title: str
    description: str
    video_url: str = Field(description="Data URI of the generated video")


# ============= RESEARCH MODELS =============

class ResearchRequest(BaseModel):
    topic: str = Field(min_length=3)


class ResearchSource(BaseModel):
    title: str
    url: str


class ResearchReport(BaseModel):
    report: str = Field(description="Structured research report in Markdown")
    sources: List[ResearchSource] = Field(default_factory=list, description="Sources used for the report")


# ============= STUDENT EVALUATION MODELS =============

class StudentEvaluation(BaseModel):
    evaluation_summary: str = Field(description="Performance analysis and recommendations in Markdown")
