"""
Error kinds raised by the CertPath progression engine.

All of them are deterministic failures of pure computations: they are
surfaced to the caller as rejected actions and never retried.
"""


class ProgressionError(Exception):
    """Base class for every engine error."""


class MalformedSubmission(ProgressionError):
    """Quiz attempt does not match the shape of its quiz definition."""


class InvalidQuizDefinition(ProgressionError):
    """Authored quiz data violates an integrity rule."""


class UnknownLesson(ProgressionError):
    """Lesson id is not part of the course."""

    def __init__(self, lesson_id: str, course_id: str | None = None):
        self.lesson_id = lesson_id
        self.course_id = course_id
        where = f" in course {course_id!r}" if course_id else ""
        super().__init__(f"Unknown lesson {lesson_id!r}{where}")


class WrongLessonType(ProgressionError):
    """Activity recorded against a lesson of a different type."""


class LessonLocked(ProgressionError):
    """Activity attempted on a lesson whose module is still locked."""


class CourseInactive(ProgressionError):
    """Activity attempted on a course that is not active."""


class UnknownCourse(ProgressionError):
    """Course id is not present in the content store."""
