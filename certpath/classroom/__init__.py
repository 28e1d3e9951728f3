"""
CertPath Classroom - Runtime components for grading and progression.

This module provides:
- grade: Quiz grading
- LessonStateTracker: Per-lesson trainee state
- module_state: Module gating (content dripping)
- compute_progress: Course progress and certification
- ProgressionService: Facade for the application layer
- ContentStore / activity stores: Reference storage adapters
"""

from .grader import grade

from .progress import (
    ActivityStore,
    InMemoryActivityStore,
    SqliteActivityStore,
    merge_lesson_state,
)

from .tracker import LessonStateTracker

from .gate import (
    module_state,
    lesson_status,
    is_locked_by,
)

from .engine import compute_progress

from .certificates import (
    CertificateIssuer,
    CertificationEvent,
    RecordingIssuer,
)

from .loader import (
    ContentStore,
    load_course,
    read_course_file,
)

from .service import ProgressionService

__all__ = [
    # Grader
    "grade",
    # Progress
    "ActivityStore",
    "InMemoryActivityStore",
    "SqliteActivityStore",
    "merge_lesson_state",
    # Tracker
    "LessonStateTracker",
    # Gate
    "module_state",
    "lesson_status",
    "is_locked_by",
    # Engine
    "compute_progress",
    # Certificates
    "CertificateIssuer",
    "CertificationEvent",
    "RecordingIssuer",
    # Loader
    "ContentStore",
    "load_course",
    "read_course_file",
    # Service
    "ProgressionService",
]
