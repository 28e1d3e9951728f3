#!/usr/bin/env python3
"""
report_progress.py - Print a trainee's progress through a course.

Reads a course file and the trainee's lesson state from the progress
database, then prints module status, percentage and the next lesson.

Usage:
  python scripts/report_progress.py --course data/courses/callx_agent_certification.yaml --trainee sarah
  python scripts/report_progress.py --course-id callx-agent --trainee sarah --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from certpath.classroom import (
    ContentStore,
    SqliteActivityStore,
    compute_progress,
    load_course,
)
from certpath.config import load_settings
from certpath.errors import ProgressionError

logger = logging.getLogger(__name__)

STATUS_ICONS = {
    "completed": "✓",
    "in_progress": "→",
    "unlocked": "○",
    "locked": "◌",
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print trainee progress for a course")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--course", type=Path, help="Course file (.yaml/.yml/.json)")
    source.add_argument("--course-id", help="Course id inside the configured content directory")
    parser.add_argument("--trainee", default="default", help="Trainee id")
    parser.add_argument("--db", type=Path, default=None, help="Progress database (overrides CERTPATH_PROGRESS_DB)")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    return parser.parse_args()


def main():
    args = parse_args()
    settings = load_settings(progress_db=args.db)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    try:
        if args.course:
            course = load_course(args.course)
        else:
            course = ContentStore.load_directory(settings.content_dir).get_course(args.course_id)
    except (FileNotFoundError, ValueError, ProgressionError) as e:
        logger.error(f"Failed to load course: {e}")
        sys.exit(1)

    store = SqliteActivityStore(settings.progress_db, trainee_id=args.trainee)
    progress = compute_progress(course, store.all())

    if args.json:
        print(json.dumps(progress.summary(), indent=2, ensure_ascii=False))
        return

    print(f"{course.title or course.id} - {args.trainee}")
    print(f"Progress: {progress.percentage}% ({progress.completed_lessons}/{progress.total_lessons} lessons)")
    for module in progress.modules:
        icon = STATUS_ICONS[module.status.value]
        print(f"  {icon} {module.module_id}: {module.completed_lessons}/{module.total_lessons} ({module.percentage}%)")
    if progress.certified:
        print("Certified")
    elif progress.next_lesson_id:
        print(f"Next lesson: {progress.next_lesson_id}")
    else:
        print("No lesson available")


if __name__ == "__main__":
    main()
