"""
Course progression engine - Aggregate module gates into course progress.

Provides:
- Course completion percentage
- Recommended next lesson
- Per-lesson availability
- Certification eligibility

Everything here is recomputed from lesson state on every call. Nothing is
cached, so derived state cannot drift from the stored lesson state.
"""

from typing import Mapping, Optional

from certpath.schemas import (
    Course,
    CourseProgress,
    CourseStatus,
    LessonAvailability,
    LessonProgress,
    LessonState,
    LessonStatus,
    Module,
    ModuleProgress,
    ModuleStatus,
)
from certpath.utils import percent

from .gate import lesson_status, module_state


def _availability(status: LessonStatus, module_status: ModuleStatus) -> LessonAvailability:
    if status == LessonStatus.COMPLETED:
        return LessonAvailability.COMPLETED
    if module_status == ModuleStatus.LOCKED:
        return LessonAvailability.LOCKED
    if status == LessonStatus.IN_PROGRESS:
        return LessonAvailability.IN_PROGRESS
    return LessonAvailability.AVAILABLE


def compute_progress(course: Course, lesson_states: Mapping[str, LessonState]) -> CourseProgress:
    """
    Compute a trainee's progress through a course.

    Args:
        course: Course definition
        lesson_states: The trainee's lesson states keyed by lesson id.
            Lessons without an entry count as not started.

    Returns:
        CourseProgress snapshot
    """
    modules: list[ModuleProgress] = []
    completed_total = 0
    lesson_total = 0
    next_lesson_id: Optional[str] = None

    previous_module: Optional[Module] = None
    previous_state: Optional[ModuleStatus] = None

    for module in course.ordered_modules():
        status = module_state(module, lesson_states, previous_module, previous_state)

        lessons = []
        completed = 0
        for lesson in module.ordered_lessons():
            l_status = lesson_status(lesson_states, lesson.id)
            availability = _availability(l_status, status)
            if l_status == LessonStatus.COMPLETED:
                completed += 1
            elif next_lesson_id is None and availability != LessonAvailability.LOCKED:
                next_lesson_id = lesson.id

            state = lesson_states.get(lesson.id)
            quiz_result = state.latest_quiz_result if state else None
            lessons.append(LessonProgress(
                lesson_id=lesson.id,
                type=lesson.type,
                status=l_status,
                availability=availability,
                quiz_score=quiz_result.score if quiz_result else None,
            ))

        modules.append(ModuleProgress(
            module_id=module.id,
            status=status,
            completed_lessons=completed,
            total_lessons=len(lessons),
            blocked_by=previous_module.id if status == ModuleStatus.LOCKED else None,
            lessons=lessons,
        ))
        completed_total += completed
        lesson_total += len(lessons)

        previous_module = module
        previous_state = status

    certified = bool(modules) and all(m.status == ModuleStatus.COMPLETED for m in modules)

    return CourseProgress(
        course_id=course.id,
        status=_course_status(modules, certified, next_lesson_id),
        percentage=percent(completed_total, lesson_total),
        completed_lessons=completed_total,
        total_lessons=lesson_total,
        modules=modules,
        next_lesson_id=None if certified else next_lesson_id,
        certified=certified,
    )


def _course_status(
    modules: list[ModuleProgress],
    certified: bool,
    next_lesson_id: Optional[str],
) -> CourseStatus:
    if certified:
        return CourseStatus.CERTIFIED
    if not modules:
        return CourseStatus.NOT_STARTED
    if next_lesson_id is None:
        return CourseStatus.BLOCKED
    if any(m.status in (ModuleStatus.IN_PROGRESS, ModuleStatus.COMPLETED) for m in modules):
        return CourseStatus.IN_PROGRESS
    return CourseStatus.NOT_STARTED
