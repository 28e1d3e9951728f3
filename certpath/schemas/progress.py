"""
Progress tracking schemas for CertPath.

Defines Pydantic models for trainee progress including:
- Lesson status tracking (the only stored state)
- Derived module and course progress
"""

from pydantic import BaseModel, Field, computed_field
from typing import Any, Optional
from datetime import datetime
from enum import Enum

from certpath.utils import percent

from .course import LessonType
from .quiz import QuizResult


class LessonStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ModuleStatus(str, Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class LessonAvailability(str, Enum):
    """Lesson availability status for UI display."""
    LOCKED = "locked"            # Module gated by an unfinished predecessor
    AVAILABLE = "available"      # Can start
    IN_PROGRESS = "in_progress"  # Started but not completed
    COMPLETED = "completed"      # Finished


class CourseStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"          # Lessons remain, but none can be taken
    CERTIFIED = "certified"


# -----------------------------------------------------------------------------
# Stored state
# -----------------------------------------------------------------------------

class SimulationReport(BaseModel):
    """Opaque output of the simulation scorer. Extra fields are kept as-is."""
    model_config = {"extra": "allow"}

    overall_score: Optional[float] = None


class LessonState(BaseModel):
    lesson_id: str
    status: LessonStatus = LessonStatus.NOT_STARTED
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    attempt_count: int = Field(default=0, ge=0)
    ever_passed: bool = False
    latest_quiz_result: Optional[QuizResult] = None
    latest_simulation_report: Optional[SimulationReport] = None

    @property
    def is_completed(self) -> bool:
        return self.status == LessonStatus.COMPLETED


# -----------------------------------------------------------------------------
# Derived state (never stored)
# -----------------------------------------------------------------------------

class LessonProgress(BaseModel):
    lesson_id: str
    type: LessonType
    status: LessonStatus
    availability: LessonAvailability
    quiz_score: Optional[int] = None  # latest attempt


class ModuleProgress(BaseModel):
    module_id: str
    status: ModuleStatus
    completed_lessons: int
    total_lessons: int
    blocked_by: Optional[str] = None  # id of the unfinished predecessor
    lessons: list[LessonProgress] = []

    @computed_field
    @property
    def percentage(self) -> int:
        return percent(self.completed_lessons, self.total_lessons)


class CourseProgress(BaseModel):
    course_id: str
    status: CourseStatus
    percentage: int = Field(..., ge=0, le=100)
    completed_lessons: int
    total_lessons: int
    modules: list[ModuleProgress]
    next_lesson_id: Optional[str] = None
    certified: bool = False

    def module(self, module_id: str) -> Optional[ModuleProgress]:
        return next((m for m in self.modules if m.module_id == module_id), None)

    def lesson(self, lesson_id: str) -> Optional[LessonProgress]:
        for m in self.modules:
            for lesson in m.lessons:
                if lesson.lesson_id == lesson_id:
                    return lesson
        return None

    def summary(self) -> dict[str, Any]:
        """Flat summary for display."""
        return {
            "course_id": self.course_id,
            "status": self.status.value,
            "percentage": self.percentage,
            "completed": self.completed_lessons,
            "total_lessons": self.total_lessons,
            "next_lesson_id": self.next_lesson_id,
            "certified": self.certified,
            "modules": [
                {
                    "id": m.module_id,
                    "status": m.status.value,
                    "completed": m.completed_lessons,
                    "total": m.total_lessons,
                    "percentage": m.percentage,
                }
                for m in self.modules
            ],
        }
