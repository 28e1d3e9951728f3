"""
Module gate - Derive a module's state from its lessons and its predecessor.

Content dripping: a module whose predecessor has blocks_next_module set
stays locked until that predecessor is completed. Only the immediate
predecessor is consulted; its own derived state already reflects
everything before it.
"""

from typing import Mapping, Optional

from certpath.schemas import LessonState, LessonStatus, Module, ModuleStatus


def lesson_status(lesson_states: Mapping[str, LessonState], lesson_id: str) -> LessonStatus:
    """Status of a lesson, NOT_STARTED when it has no recorded state."""
    state = lesson_states.get(lesson_id)
    return state.status if state else LessonStatus.NOT_STARTED


def is_locked_by(previous_module: Optional[Module], previous_state: Optional[ModuleStatus]) -> bool:
    """True if the predecessor blocks the next module and is unfinished."""
    if previous_module is None:
        return False
    return previous_module.blocks_next_module and previous_state != ModuleStatus.COMPLETED


def module_state(
    module: Module,
    lesson_states: Mapping[str, LessonState],
    previous_module: Optional[Module] = None,
    previous_state: Optional[ModuleStatus] = None,
) -> ModuleStatus:
    """
    Compute the state of one module.

    Args:
        module: Module to evaluate
        lesson_states: Lesson states keyed by lesson id (missing = not started)
        previous_module: Module immediately before this one, None for the first
        previous_state: Derived state of previous_module

    Returns:
        LOCKED, UNLOCKED, IN_PROGRESS or COMPLETED
    """
    if is_locked_by(previous_module, previous_state):
        return ModuleStatus.LOCKED

    statuses = [lesson_status(lesson_states, lesson.id) for lesson in module.lessons]

    # An empty module has nothing left to do
    if all(s == LessonStatus.COMPLETED for s in statuses):
        return ModuleStatus.COMPLETED
    if any(s != LessonStatus.NOT_STARTED for s in statuses):
        return ModuleStatus.IN_PROGRESS
    return ModuleStatus.UNLOCKED
