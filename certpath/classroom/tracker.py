"""
Lesson state tracker - Record trainee activity against a course.

Transition rules:
- video/text:   viewing completes the lesson (idempotent)
- quiz:         a passing attempt completes it for good; failing attempts
                leave it in progress and may be retaken without limit.
                The latest result is reported, but "passed" is sticky.
- simulation:   submitting a scorer report completes it, whatever the score
- any type:     starting a lesson moves it from not started to in progress

Completed is terminal: no later event moves a lesson back.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from certpath.errors import UnknownLesson, WrongLessonType
from certpath.schemas import (
    VIEWABLE_LESSON_TYPES,
    Course,
    Lesson,
    LessonState,
    LessonStatus,
    LessonType,
    QuizAttempt,
    SimulationReport,
)

from .grader import grade
from .progress import ActivityStore

logger = logging.getLogger(__name__)


class LessonStateTracker:
    """
    Track one trainee's lesson state for one course.

    Lesson lookups go through the course definition; state goes through the
    activity store, which is the only thing this class mutates.
    """

    def __init__(
        self,
        course: Course,
        store: ActivityStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize tracker.

        Args:
            course: Course the lessons belong to
            store: Activity store for the trainee
            clock: Timestamp source (default: datetime.now)
        """
        self.course = course
        self.store = store
        self.clock = clock or datetime.now

    def _lesson(self, lesson_id: str) -> Lesson:
        found = self.course.find_lesson(lesson_id)
        if found is None:
            raise UnknownLesson(lesson_id, self.course.id)
        return found[1]

    def _require_type(self, lesson: Lesson, allowed: set[LessonType], action: str):
        if lesson.type not in allowed:
            raise WrongLessonType(
                f"Cannot {action} lesson {lesson.id!r} of type {lesson.type.value}"
            )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_state(self, lesson_id: str) -> LessonState:
        self._lesson(lesson_id)
        return self.store.get(lesson_id)

    def lesson_states(self) -> dict[str, LessonState]:
        """States of this course's lessons that have been touched."""
        states = self.store.all()
        return {
            lesson.id: states[lesson.id]
            for _, lesson in self.course.iter_lessons()
            if lesson.id in states
        }

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def start_lesson(self, lesson_id: str) -> LessonState:
        """Mark a lesson as started. No-op unless it is not started."""
        self._lesson(lesson_id)
        state = self.store.get(lesson_id)
        if state.status != LessonStatus.NOT_STARTED:
            return state

        logger.debug(f"Lesson {lesson_id} started")
        return self.store.put(lesson_id, state.model_copy(update={
            "status": LessonStatus.IN_PROGRESS,
            "started_at": self.clock(),
        }))

    def record_viewed(self, lesson_id: str) -> LessonState:
        """Complete a video or text lesson."""
        lesson = self._lesson(lesson_id)
        self._require_type(lesson, VIEWABLE_LESSON_TYPES, "view")

        state = self.store.get(lesson_id)
        if state.is_completed:
            return state

        now = self.clock()
        logger.info(f"Lesson {lesson_id} completed (viewed)")
        return self.store.put(lesson_id, state.model_copy(update={
            "status": LessonStatus.COMPLETED,
            "started_at": state.started_at or now,
            "completed_at": now,
        }))

    def record_quiz_attempt(self, lesson_id: str, attempt: QuizAttempt) -> LessonState:
        """
        Grade and record a quiz attempt.

        Raises:
            MalformedSubmission: If the attempt does not fit the quiz
        """
        lesson = self._lesson(lesson_id)
        self._require_type(lesson, {LessonType.QUIZ}, "submit a quiz for")

        now = self.clock()
        result = grade(lesson.quiz, attempt).model_copy(update={"graded_at": now})
        state = self.store.get(lesson_id)

        update = {
            "latest_quiz_result": result,
            "attempt_count": state.attempt_count + 1,
            "started_at": state.started_at or now,
        }
        if state.is_completed:
            logger.debug(f"Retake of completed quiz lesson {lesson_id}: {result.score}%")
        elif result.passed:
            update["status"] = LessonStatus.COMPLETED
            update["completed_at"] = now
            update["ever_passed"] = True
            logger.info(f"Quiz lesson {lesson_id} passed with {result.score}%")
        else:
            update["status"] = LessonStatus.IN_PROGRESS
            logger.info(
                f"Quiz lesson {lesson_id} not passed: {result.score}% "
                f"(needs {result.passing_grade}%)"
            )

        return self.store.put(lesson_id, state.model_copy(update=update))

    def record_simulation_result(self, lesson_id: str, report: SimulationReport) -> LessonState:
        """Complete a simulation lesson with the scorer's report."""
        lesson = self._lesson(lesson_id)
        self._require_type(lesson, {LessonType.SIMULATION}, "submit a simulation for")

        now = self.clock()
        state = self.store.get(lesson_id)
        update = {
            "latest_simulation_report": report,
            "attempt_count": state.attempt_count + 1,
            "started_at": state.started_at or now,
        }
        if not state.is_completed:
            update["status"] = LessonStatus.COMPLETED
            update["completed_at"] = now
            logger.info(f"Simulation lesson {lesson_id} completed")

        return self.store.put(lesson_id, state.model_copy(update=update))
