"""
Progression service - The entry point the application layer calls.

Combines the course definition, a trainee's activity store and the
certificate issuer:
- Records lesson activity through the LessonStateTracker
- Refuses activity on inactive courses and locked modules
- Recomputes course progress after every event
- Announces certification once, guarded by a marker in the store
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from certpath.errors import CourseInactive, LessonLocked, UnknownLesson
from certpath.schemas import (
    Course,
    CourseProgress,
    LessonAvailability,
    QuizAttempt,
    SimulationReport,
)

from .certificates import CertificateIssuer
from .engine import compute_progress
from .progress import ActivityStore
from .tracker import LessonStateTracker

logger = logging.getLogger(__name__)


class ProgressionService:
    """
    Drive one trainee through one course.

    Holds no derived state: progress is recomputed from the activity store
    on every call.
    """

    def __init__(
        self,
        course: Course,
        store: ActivityStore,
        trainee_id: str,
        issuer: Optional[CertificateIssuer] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize service.

        Args:
            course: Course definition from the content store
            store: The trainee's activity store
            trainee_id: Trainee identifier, passed to the certificate issuer
            issuer: Receives certification events (optional)
            clock: Timestamp source (default: datetime.now)
        """
        self.course = course
        self.trainee_id = trainee_id
        self.issuer = issuer
        self.clock = clock or datetime.now
        self.store = store
        self.tracker = LessonStateTracker(course, store, clock=self.clock)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def progress(self) -> CourseProgress:
        return compute_progress(self.course, self.tracker.lesson_states())

    def lesson_availability(self, lesson_id: str) -> LessonAvailability:
        lesson = self.progress().lesson(lesson_id)
        if lesson is None:
            raise UnknownLesson(lesson_id, self.course.id)
        return lesson.availability

    # -------------------------------------------------------------------------
    # Lesson actions
    # -------------------------------------------------------------------------

    def start_lesson(self, lesson_id: str) -> CourseProgress:
        return self._apply(lesson_id, lambda: self.tracker.start_lesson(lesson_id))

    def view_lesson(self, lesson_id: str) -> CourseProgress:
        return self._apply(lesson_id, lambda: self.tracker.record_viewed(lesson_id))

    def submit_quiz(self, lesson_id: str, answer_ids: list[str]) -> CourseProgress:
        attempt = QuizAttempt(answer_ids=answer_ids)
        return self._apply(lesson_id, lambda: self.tracker.record_quiz_attempt(lesson_id, attempt))

    def submit_simulation(self, lesson_id: str, report: SimulationReport | dict[str, Any]) -> CourseProgress:
        if not isinstance(report, SimulationReport):
            report = SimulationReport.model_validate(report)
        return self._apply(lesson_id, lambda: self.tracker.record_simulation_result(lesson_id, report))

    def _apply(self, lesson_id: str, action: Callable[[], Any]) -> CourseProgress:
        if not self.course.is_active:
            logger.warning(f"Refused activity on inactive course {self.course.id}")
            raise CourseInactive(f"Course {self.course.id!r} is not active")

        before = self.progress()
        lesson = before.lesson(lesson_id)
        if lesson is None:
            raise UnknownLesson(lesson_id, self.course.id)
        if lesson.availability == LessonAvailability.LOCKED:
            logger.warning(f"Refused activity on locked lesson {lesson_id} for {self.trainee_id}")
            raise LessonLocked(f"Lesson {lesson_id!r} is in a locked module")

        action()
        after = self.progress()

        if after.certified:
            self._announce_certification()
        return after

    def _announce_certification(self):
        """
        Send the certification event unless the store already holds the marker.

        The claim is atomic in the store, so two services writing for the same
        trainee cannot both send. A failed send releases the claim and the next
        action retries it.
        """
        timestamp = self.clock()
        if not self.store.claim_certification(self.course.id, timestamp):
            return

        logger.info(f"Trainee {self.trainee_id} certified for course {self.course.id}")
        if self.issuer is None:
            return
        try:
            self.issuer.certification_achieved(self.trainee_id, self.course.id, timestamp)
        except Exception:
            logger.error(f"Certification event for {self.trainee_id} on {self.course.id} failed; will retry")
            self.store.release_certification(self.course.id)
            raise
