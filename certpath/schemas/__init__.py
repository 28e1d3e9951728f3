"""
CertPath Schemas - Pydantic models for the certification training platform.

This module exports all schema classes for:
- Course: courses, modules, lessons
- Quiz: quiz definitions, attempts, results
- Progress: stored lesson state and derived module/course progress
"""

# Quiz schemas
from .quiz import (
    QuestionType,
    Answer,
    Question,
    QuizDefinition,
    QuizAttempt,
    QuizResult,
)

# Course schemas
from .course import (
    LessonType,
    VIEWABLE_LESSON_TYPES,
    Lesson,
    Module,
    Course,
)

# Progress schemas
from .progress import (
    LessonStatus,
    ModuleStatus,
    LessonAvailability,
    CourseStatus,
    SimulationReport,
    LessonState,
    LessonProgress,
    ModuleProgress,
    CourseProgress,
)

__all__ = [
    # Quiz
    'QuestionType',
    'Answer',
    'Question',
    'QuizDefinition',
    'QuizAttempt',
    'QuizResult',
    # Course
    'LessonType',
    'VIEWABLE_LESSON_TYPES',
    'Lesson',
    'Module',
    'Course',
    # Progress
    'LessonStatus',
    'ModuleStatus',
    'LessonAvailability',
    'CourseStatus',
    'SimulationReport',
    'LessonState',
    'LessonProgress',
    'ModuleProgress',
    'CourseProgress',
]
