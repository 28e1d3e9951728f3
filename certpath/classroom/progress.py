"""
Activity stores - Per-trainee lesson state storage.

Lesson state is the only mutable data in CertPath. Stores follow
last-writer-wins per lesson with monotonic completion:
- a completed lesson is never written back to an earlier status
- ever_passed is never cleared
- the first started_at / completed_at are kept
- attempt_count never decreases

Stores also hold the certification marker: one claim per course, taken
atomically before the certification event is sent and released again if
sending fails.

Two implementations:
- InMemoryActivityStore: for tests and request-scoped use
- SqliteActivityStore: in ~/.certpath/progress.db by default
"""

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from certpath.config import DEFAULT_PROGRESS_DB
from certpath.schemas import LessonState, LessonStatus, QuizResult, SimulationReport


class ActivityStore(Protocol):
    """Storage boundary for a single trainee's lesson state."""

    def get(self, lesson_id: str) -> LessonState: ...

    def put(self, lesson_id: str, state: LessonState) -> LessonState: ...

    def all(self) -> dict[str, LessonState]: ...

    def claim_certification(self, course_id: str, timestamp: datetime) -> bool: ...

    def release_certification(self, course_id: str) -> None: ...


def merge_lesson_state(current: Optional[LessonState], incoming: LessonState) -> LessonState:
    """Apply an incoming write on top of the stored state without regressing it."""
    if current is None:
        return incoming

    status = incoming.status
    if current.status == LessonStatus.COMPLETED:
        status = LessonStatus.COMPLETED

    return incoming.model_copy(update={
        "status": status,
        "started_at": current.started_at or incoming.started_at,
        "completed_at": current.completed_at or incoming.completed_at,
        "attempt_count": max(current.attempt_count, incoming.attempt_count),
        "ever_passed": current.ever_passed or incoming.ever_passed,
        "latest_quiz_result": incoming.latest_quiz_result or current.latest_quiz_result,
        "latest_simulation_report": incoming.latest_simulation_report or current.latest_simulation_report,
    })


class InMemoryActivityStore:
    """Dictionary-backed store."""

    def __init__(self, states: Optional[dict[str, LessonState]] = None):
        self._states: dict[str, LessonState] = dict(states or {})
        self._certifications: dict[str, datetime] = {}

    def get(self, lesson_id: str) -> LessonState:
        return self._states.get(lesson_id) or LessonState(lesson_id=lesson_id)

    def put(self, lesson_id: str, state: LessonState) -> LessonState:
        merged = merge_lesson_state(self._states.get(lesson_id), state)
        self._states[lesson_id] = merged
        return merged

    def all(self) -> dict[str, LessonState]:
        return dict(self._states)

    def claim_certification(self, course_id: str, timestamp: datetime) -> bool:
        if course_id in self._certifications:
            return False
        self._certifications[course_id] = timestamp
        return True

    def release_certification(self, course_id: str) -> None:
        self._certifications.pop(course_id, None)


class SqliteActivityStore:
    """
    Store lesson state in a SQLite database.

    Each trainee gets their own view (trainee_id), so a single file can hold
    the whole organisation's progress. Monotonic merging happens inside the
    upsert, so concurrent writers from two devices can only promote state.
    """

    def __init__(self, db_path: Optional[Path] = None, trainee_id: str = "default"):
        """
        Initialize store.

        Args:
            db_path: Path to progress.db (default: ~/.certpath/progress.db)
            trainee_id: Trainee whose lesson state this store reads and writes
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_PROGRESS_DB
        self.trainee_id = trainee_id
        self._ensure_database()

    def _ensure_database(self):
        """Create database and tables if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS lesson_state (
                    trainee_id TEXT NOT NULL,
                    lesson_id TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'not_started',
                    started_at TEXT,
                    completed_at TEXT,
                    attempt_count INTEGER NOT NULL DEFAULT 0,
                    ever_passed INTEGER NOT NULL DEFAULT 0,
                    latest_quiz_result JSON,
                    latest_simulation_report JSON,
                    updated_at TEXT,
                    PRIMARY KEY (trainee_id, lesson_id)
                );

                CREATE INDEX IF NOT EXISTS idx_lesson_state_trainee
                ON lesson_state(trainee_id);

                CREATE TABLE IF NOT EXISTS certification (
                    trainee_id TEXT NOT NULL,
                    course_id TEXT NOT NULL,
                    certified_at TEXT NOT NULL,
                    PRIMARY KEY (trainee_id, course_id)
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _row_to_state(row: sqlite3.Row) -> LessonState:
        quiz = row["latest_quiz_result"]
        report = row["latest_simulation_report"]
        return LessonState(
            lesson_id=row["lesson_id"],
            status=LessonStatus(row["status"]),
            started_at=datetime.fromisoformat(row["started_at"]) if row["started_at"] else None,
            completed_at=datetime.fromisoformat(row["completed_at"]) if row["completed_at"] else None,
            attempt_count=row["attempt_count"],
            ever_passed=bool(row["ever_passed"]),
            latest_quiz_result=QuizResult.model_validate_json(quiz) if quiz else None,
            latest_simulation_report=SimulationReport.model_validate(json.loads(report)) if report else None,
        )

    def get(self, lesson_id: str) -> LessonState:
        """Get state for a lesson (not started if never touched)."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                """SELECT * FROM lesson_state
                   WHERE trainee_id = ? AND lesson_id = ?""",
                (self.trainee_id, lesson_id)
            )
            row = cursor.fetchone()
            if not row:
                return LessonState(lesson_id=lesson_id)
            return self._row_to_state(row)
        finally:
            conn.close()

    def all(self) -> dict[str, LessonState]:
        """Get state for every lesson the trainee has touched."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT * FROM lesson_state WHERE trainee_id = ?",
                (self.trainee_id,)
            )
            return {row["lesson_id"]: self._row_to_state(row) for row in cursor.fetchall()}
        finally:
            conn.close()

    def put(self, lesson_id: str, state: LessonState) -> LessonState:
        """Write lesson state and return what is stored afterwards."""
        now = datetime.now().isoformat()
        quiz = state.latest_quiz_result.model_dump_json() if state.latest_quiz_result else None
        report = state.latest_simulation_report.model_dump_json() if state.latest_simulation_report else None

        conn = self._get_connection()
        try:
            conn.execute(
                """INSERT INTO lesson_state (
                       trainee_id, lesson_id, status, started_at, completed_at,
                       attempt_count, ever_passed, latest_quiz_result,
                       latest_simulation_report, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(trainee_id, lesson_id) DO UPDATE SET
                     status = CASE
                       WHEN lesson_state.status = 'completed' THEN 'completed'
                       ELSE excluded.status
                     END,
                     started_at = COALESCE(lesson_state.started_at, excluded.started_at),
                     completed_at = COALESCE(lesson_state.completed_at, excluded.completed_at),
                     attempt_count = MAX(lesson_state.attempt_count, excluded.attempt_count),
                     ever_passed = MAX(lesson_state.ever_passed, excluded.ever_passed),
                     latest_quiz_result = COALESCE(excluded.latest_quiz_result, lesson_state.latest_quiz_result),
                     latest_simulation_report = COALESCE(excluded.latest_simulation_report, lesson_state.latest_simulation_report),
                     updated_at = excluded.updated_at""",
                (
                    self.trainee_id,
                    lesson_id,
                    state.status.value,
                    state.started_at.isoformat() if state.started_at else None,
                    state.completed_at.isoformat() if state.completed_at else None,
                    state.attempt_count,
                    int(state.ever_passed),
                    quiz,
                    report,
                    now,
                )
            )
            conn.commit()
        finally:
            conn.close()
        return self.get(lesson_id)

    def claim_certification(self, course_id: str, timestamp: datetime) -> bool:
        """
        Take the certification marker for a course.

        Returns:
            True if this call created the marker, False if it already existed
        """
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                """INSERT INTO certification (trainee_id, course_id, certified_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(trainee_id, course_id) DO NOTHING""",
                (self.trainee_id, course_id, timestamp.isoformat())
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def release_certification(self, course_id: str) -> None:
        """Drop the certification marker so the event can be sent again."""
        conn = self._get_connection()
        try:
            conn.execute(
                "DELETE FROM certification WHERE trainee_id = ? AND course_id = ?",
                (self.trainee_id, course_id)
            )
            conn.commit()
        finally:
            conn.close()
