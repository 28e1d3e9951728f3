"""
Course content schemas for CertPath.

Defines Pydantic models for authored course structure:
- Lessons (video, text, quiz, simulation)
- Modules with the content-dripping flag
- Courses as ordered module sequences

Content is read-only while trainees consume it. Ordering is always taken
from order_index, never from list position.
"""

from enum import Enum
from typing import Iterator, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator

from certpath.errors import InvalidQuizDefinition

from .quiz import QuizDefinition


class LessonType(str, Enum):
    VIDEO = "video"
    TEXT = "text"
    QUIZ = "quiz"
    SIMULATION = "simulation"


# Lessons completed simply by being opened
VIEWABLE_LESSON_TYPES = {LessonType.VIDEO, LessonType.TEXT}


class Lesson(BaseModel):
    id: str
    title: str = ""
    type: LessonType
    order_index: int = Field(default=0, ge=0)
    quiz: Optional[QuizDefinition] = None

    @model_validator(mode="after")
    def quiz_matches_type(self):
        if self.type == LessonType.QUIZ and self.quiz is None:
            raise InvalidQuizDefinition(f"Quiz lesson {self.id!r} has no quiz definition")
        if self.type != LessonType.QUIZ and self.quiz is not None:
            raise ValueError(f"Lesson {self.id!r} of type {self.type.value} cannot carry a quiz")
        return self


class Module(BaseModel):
    """
    A course module.

    blocks_next_module replaces the authoring tool's `isPrerequisite` flag.
    It is set on the module that must be finished first, and gates the module
    that follows it, not the module itself. The old names are still accepted
    when loading.
    """
    id: str
    title: str = ""
    description: str = ""
    order_index: int = Field(default=0, ge=0)
    blocks_next_module: bool = Field(
        default=False,
        validation_alias=AliasChoices("blocks_next_module", "is_prerequisite", "isPrerequisite"),
    )
    lessons: list[Lesson] = []

    def ordered_lessons(self) -> list[Lesson]:
        return sorted(self.lessons, key=lambda lesson: lesson.order_index)


class Course(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    is_active: bool = Field(
        default=True,
        validation_alias=AliasChoices("is_active", "isActive"),
    )
    modules: list[Module] = []

    @model_validator(mode="after")
    def ids_unique(self):
        module_ids = [m.id for m in self.modules]
        if len(set(module_ids)) != len(module_ids):
            raise ValueError(f"Course {self.id!r} has duplicate module ids")
        lesson_ids = [lesson.id for m in self.modules for lesson in m.lessons]
        if len(set(lesson_ids)) != len(lesson_ids):
            raise ValueError(f"Course {self.id!r} has duplicate lesson ids")

        # Order decides the prerequisite chain, so it must not tie
        module_order = [m.order_index for m in self.modules]
        if len(set(module_order)) != len(module_order):
            raise ValueError(f"Course {self.id!r} has duplicate module order_index values")
        for module in self.modules:
            lesson_order = [lesson.order_index for lesson in module.lessons]
            if len(set(lesson_order)) != len(lesson_order):
                raise ValueError(f"Module {module.id!r} has duplicate lesson order_index values")
        return self

    def ordered_modules(self) -> list[Module]:
        return sorted(self.modules, key=lambda module: module.order_index)

    def iter_lessons(self) -> Iterator[tuple[Module, Lesson]]:
        """Yield (module, lesson) pairs in course order."""
        for module in self.ordered_modules():
            for lesson in module.ordered_lessons():
                yield module, lesson

    def find_lesson(self, lesson_id: str) -> Optional[tuple[Module, Lesson]]:
        for module, lesson in self.iter_lessons():
            if lesson.id == lesson_id:
                return module, lesson
        return None

    @property
    def total_lessons(self) -> int:
        return sum(len(m.lessons) for m in self.modules)
