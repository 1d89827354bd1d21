"""
Student roster storage
One StudentStore interface with an in-memory demo backend and a SQL backend,
selected by the `student_store` setting.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Sequence

from loguru import logger
from sqlalchemy.orm import Session

from flows.errors import StudentNotFoundError
from models.database_service import (
    create_quiz_result, create_student, get_quiz_results_by_student, get_student_by_id, get_students
)
from models.student_models import (
    QuizResultCreate, QuizResultRead, StudentMetrics, StudentSummary
)
from utils.config_loader import get_settings


def compute_student_metrics(results: Sequence[QuizResultRead]) -> StudentMetrics:
    """Aggregate quiz results into dashboard metrics"""
    if not results:
        return StudentMetrics()

    total_possible = sum(r.total_questions for r in results)
    total_correct = sum(r.correct_answers for r in results)
    average_score = round(total_correct / total_possible * 100) if total_possible else 0

    status = "On Track"
    if average_score < 60:
        status = "Needs Attention"
    elif average_score > 85:
        status = "Excelling"

    last_activity = max(r.saved_at for r in results)
    return StudentMetrics(
        quizzes_completed=len(results),
        average_score=average_score,
        status=status,
        last_activity_date=last_activity.date().isoformat(),
    )


class StudentStore(ABC):
    """Roster and quiz-result persistence"""

    @abstractmethod
    def add_student(self, name: str, class_name: str) -> str:
        """Create a student and return its id"""

    @abstractmethod
    def list_students(self) -> List[StudentSummary]:
        ...

    @abstractmethod
    def get_student(self, student_id: str) -> StudentSummary:
        ...

    @abstractmethod
    def save_quiz_result(self, student_id: str, result: QuizResultCreate) -> str:
        """Record a quiz result and return its id"""

    @abstractmethod
    def get_student_results(self, student_id: str) -> List[QuizResultRead]:
        ...


def _utc(year: int, month: int, day: int, hour: int) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


DEMO_STUDENTS = [
    ("1", "Alice Johnson", "Grade 5 Math"),
    ("2", "Bob Williams", "Grade 5 Math"),
    ("3", "Charlie Brown", "Grade 6 Science"),
    ("4", "Diana Prince", "Grade 6 Science"),
    ("5", "Ethan Hunt", "Grade 5 Math"),
    ("6", "Fiona Glenanne", "Grade 5 Math"),
]

# (student_id, quiz_name, saved_at, total_questions, correct_answers)
DEMO_RESULTS = [
    ("1", "Fractions", _utc(2024, 5, 20, 10), 4, 4),
    ("1", "Decimals", _utc(2024, 5, 22, 11), 5, 4),
    ("2", "Photosynthesis", _utc(2024, 5, 21, 9), 2, 1),
    ("3", "The Solar System", _utc(2024, 5, 19, 14), 1, 0),
    ("3", "Gravity", _utc(2024, 5, 23, 15), 2, 1),
    ("4", "The Solar System", _utc(2024, 5, 24, 10), 5, 5),
]


class InMemoryStudentStore(StudentStore):
    """Process-local store seeded with demo data; not shared between workers"""

    def __init__(self, seed: bool = True, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self._clock = clock
        self._students: Dict[str, dict] = {}
        self._results: List[QuizResultRead] = []
        if seed:
            self._seed()

    def _seed(self) -> None:
        created_at = self._clock()
        for student_id, name, class_name in DEMO_STUDENTS:
            self._students[student_id] = {"id": student_id, "name": name, "class_name": class_name, "created_at": created_at}
        for i, (student_id, quiz_name, saved_at, total, correct) in enumerate(DEMO_RESULTS, start=1):
            self._results.append(QuizResultRead(
                id=f"qr-{i}",
                student_id=student_id,
                quiz_name=quiz_name,
                quiz_data={"questions": [{"answer": chr(ord("a") + n)} for n in range(total)]},
                correct_answers=correct,
                total_questions=total,
                saved_at=saved_at,
            ))

    def _require(self, student_id: str) -> dict:
        student = self._students.get(student_id)
        if not student:
            raise StudentNotFoundError(student_id)
        return student

    def _summary(self, student: dict) -> StudentSummary:
        metrics = compute_student_metrics(self.get_student_results(student["id"]))
        return StudentSummary(**student, **metrics.model_dump())

    def add_student(self, name: str, class_name: str) -> str:
        student_id = str(len(self._students) + 1)
        self._students[student_id] = {
            "id": student_id, "name": name, "class_name": class_name, "created_at": self._clock()
        }
        logger.info(f"Student created: {name} (ID: {student_id}) in class {class_name}")
        return student_id

    def list_students(self) -> List[StudentSummary]:
        return [self._summary(s) for s in self._students.values()]

    def get_student(self, student_id: str) -> StudentSummary:
        return self._summary(self._require(student_id))

    def save_quiz_result(self, student_id: str, result: QuizResultCreate) -> str:
        self._require(student_id)
        record = QuizResultRead(
            id=f"qr-{len(self._results) + 1}",
            student_id=student_id,
            quiz_name=result.quiz_name,
            quiz_data=result.quiz_data,
            correct_answers=result.correct_answers,
            total_questions=result.total_questions,  # type: ignore[arg-type]
            saved_at=self._clock(),
        )
        self._results.append(record)
        logger.info(f"Quiz result saved: {result.quiz_name} for student {student_id}")
        return record.id

    def get_student_results(self, student_id: str) -> List[QuizResultRead]:
        self._require(student_id)
        return [r for r in self._results if r.student_id == student_id]


class DatabaseStudentStore(StudentStore):
    """SQLAlchemy-backed store"""

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        if session_factory is None:
            from models.database import SessionLocal
            session_factory = SessionLocal
        self.session_factory = session_factory

    @staticmethod
    def _parse_id(student_id: str) -> int:
        try:
            return int(student_id)
        except (TypeError, ValueError):
            raise StudentNotFoundError(student_id)

    @staticmethod
    def _to_result(record) -> QuizResultRead:
        return QuizResultRead(
            id=str(record.id),
            student_id=str(record.student_id),
            quiz_name=record.quiz_name,
            quiz_data=record.quiz_data or {},
            correct_answers=record.correct_answers,
            total_questions=record.total_questions,
            saved_at=record.saved_at,
        )

    def _summary(self, student) -> StudentSummary:
        metrics = compute_student_metrics([self._to_result(r) for r in student.quiz_results])
        return StudentSummary(
            id=str(student.id),
            name=student.name,
            class_name=student.class_name,
            created_at=student.created_at,
            **metrics.model_dump(),
        )

    def add_student(self, name: str, class_name: str) -> str:
        with self.session_factory() as db:
            return str(create_student(db, name, class_name).id)

    def list_students(self) -> List[StudentSummary]:
        with self.session_factory() as db:
            return [self._summary(s) for s in get_students(db)]

    def get_student(self, student_id: str) -> StudentSummary:
        with self.session_factory() as db:
            student = get_student_by_id(db, self._parse_id(student_id))
            if not student:
                raise StudentNotFoundError(student_id)
            return self._summary(student)

    def save_quiz_result(self, student_id: str, result: QuizResultCreate) -> str:
        with self.session_factory() as db:
            pk = self._parse_id(student_id)
            if not get_student_by_id(db, pk):
                raise StudentNotFoundError(student_id)
            record = create_quiz_result(
                db, pk, result.quiz_name, result.quiz_data,
                result.correct_answers, result.total_questions  # type: ignore[arg-type]
            )
            return str(record.id)

    def get_student_results(self, student_id: str) -> List[QuizResultRead]:
        with self.session_factory() as db:
            pk = self._parse_id(student_id)
            if not get_student_by_id(db, pk):
                raise StudentNotFoundError(student_id)
            return [self._to_result(r) for r in get_quiz_results_by_student(db, pk)]


@lru_cache
def get_student_store() -> StudentStore:
    backend = get_settings().student_store
    logger.info(f"Student store backend: {backend}")
    if backend == "database":
        return DatabaseStudentStore()
    return InMemoryStudentStore()
