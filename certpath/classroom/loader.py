"""
Course loader - Read authored course definitions from disk.

Course files are YAML (.yaml / .yml) or JSON (.json) documents matching
the Course schema. Quiz integrity is checked while loading, so a broken
quiz is rejected before any trainee can open it.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from certpath.errors import UnknownCourse
from certpath.schemas import Course

logger = logging.getLogger(__name__)

COURSE_SUFFIXES = (".yaml", ".yml", ".json")


def read_course_file(path: str | Path) -> dict[str, Any]:
    """
    Parse a course file without validating it.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the suffix is not a supported course format
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Course file not found: {file_path}")
    if file_path.suffix not in COURSE_SUFFIXES:
        raise ValueError(f"Unsupported course file type: {file_path.suffix}")

    with open(file_path, "r", encoding="utf-8") as f:
        if file_path.suffix == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def load_course(path: str | Path) -> Course:
    """
    Load and validate a course file.

    Raises:
        pydantic.ValidationError: If the document does not match the schema
        InvalidQuizDefinition: If a quiz violates an integrity rule
    """
    course = Course.model_validate(read_course_file(path))
    logger.info(f"Loaded course {course.id} ({len(course.modules)} modules, {course.total_lessons} lessons)")
    return course


class ContentStore:
    """
    Read-only, in-process course registry keyed by course id.
    """

    def __init__(self, courses: Optional[list[Course]] = None):
        self._courses: dict[str, Course] = {}
        for course in courses or []:
            self.add(course)

    def add(self, course: Course):
        if course.id in self._courses:
            logger.warning(f"Replacing course {course.id}")
        self._courses[course.id] = course

    def get_course(self, course_id: str) -> Course:
        course = self._courses.get(course_id)
        if course is None:
            raise UnknownCourse(f"Unknown course {course_id!r}")
        return course

    def list_courses(self, active_only: bool = False) -> list[Course]:
        return [c for c in self._courses.values() if c.is_active or not active_only]

    @classmethod
    def load_directory(cls, content_dir: str | Path) -> "ContentStore":
        """Load every course file in a directory (sorted by file name)."""
        dir_path = Path(content_dir)
        if not dir_path.is_dir():
            raise FileNotFoundError(f"Content directory not found: {dir_path}")

        store = cls()
        for file_path in sorted(dir_path.iterdir()):
            if file_path.suffix in COURSE_SUFFIXES:
                store.add(load_course(file_path))
        return store
