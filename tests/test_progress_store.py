"""
Activity store tests: monotonic last-writer-wins for both implementations.
"""

from datetime import datetime

import pytest

from certpath.classroom import (
    InMemoryActivityStore,
    LessonStateTracker,
    SqliteActivityStore,
    merge_lesson_state,
)
from certpath.schemas import LessonState, LessonStatus, QuizAttempt, QuizResult, SimulationReport


T0 = datetime(2024, 1, 1, 10, 0)
T1 = datetime(2024, 1, 1, 10, 30)


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryActivityStore()
    return SqliteActivityStore(tmp_path / "progress.db", trainee_id="sarah")


class TestMergeLessonState:
    """Test merge_lesson_state()."""

    def test_first_write(self):
        incoming = LessonState(lesson_id="l1", status=LessonStatus.IN_PROGRESS)
        assert merge_lesson_state(None, incoming) == incoming

    def test_completed_is_not_reverted(self):
        current = LessonState(lesson_id="l1", status=LessonStatus.COMPLETED, completed_at=T0, ever_passed=True)
        incoming = LessonState(lesson_id="l1", status=LessonStatus.IN_PROGRESS, attempt_count=3)
        merged = merge_lesson_state(current, incoming)
        assert merged.status == LessonStatus.COMPLETED
        assert merged.completed_at == T0
        assert merged.ever_passed
        assert merged.attempt_count == 3

    def test_promotion_allowed(self):
        current = LessonState(lesson_id="l1", status=LessonStatus.IN_PROGRESS, started_at=T0)
        incoming = LessonState(lesson_id="l1", status=LessonStatus.COMPLETED, started_at=T1, completed_at=T1)
        merged = merge_lesson_state(current, incoming)
        assert merged.status == LessonStatus.COMPLETED
        assert merged.started_at == T0
        assert merged.completed_at == T1


class TestActivityStores:
    """Behaviour shared by the in-memory and SQLite stores."""

    def test_missing_lesson_is_not_started(self, any_store):
        state = any_store.get("l1")
        assert state.lesson_id == "l1"
        assert state.status == LessonStatus.NOT_STARTED
        assert any_store.all() == {}

    def test_round_trip(self, any_store):
        result = QuizResult(score=67, passed=False, correct=[True, True, False], passing_grade=80, graded_at=T0)
        state = LessonState(
            lesson_id="quiz",
            status=LessonStatus.IN_PROGRESS,
            started_at=T0,
            attempt_count=1,
            latest_quiz_result=result,
        )
        stored = any_store.put("quiz", state)
        assert stored == state
        assert any_store.get("quiz").latest_quiz_result.score == 67
        assert list(any_store.all()) == ["quiz"]

    def test_simulation_report_extra_fields_kept(self, any_store):
        report = SimulationReport.model_validate({"overall_score": 88, "empathy": 85})
        any_store.put("sim", LessonState(
            lesson_id="sim",
            status=LessonStatus.COMPLETED,
            completed_at=T0,
            latest_simulation_report=report,
        ))
        loaded = any_store.get("sim").latest_simulation_report
        assert loaded.overall_score == 88
        assert loaded.model_dump()["empathy"] == 85

    def test_stale_write_cannot_regress(self, any_store):
        any_store.put("l1", LessonState(
            lesson_id="l1", status=LessonStatus.COMPLETED,
            started_at=T0, completed_at=T0, ever_passed=True, attempt_count=2,
        ))
        # A second device that read the lesson before it was completed
        stored = any_store.put("l1", LessonState(
            lesson_id="l1", status=LessonStatus.IN_PROGRESS, started_at=T1, attempt_count=1,
        ))
        assert stored.status == LessonStatus.COMPLETED
        assert stored.ever_passed
        assert stored.started_at == T0
        assert stored.completed_at == T0
        assert stored.attempt_count == 2

    def test_tracker_over_store(self, any_store, scenario_course, answer_builder):
        tracker = LessonStateTracker(scenario_course, any_store)
        tracker.record_quiz_attempt("l3", QuizAttempt(answer_ids=answer_builder(6, 6)))
        state = tracker.record_quiz_attempt("l3", QuizAttempt(answer_ids=answer_builder(6, 1)))
        assert state.status == LessonStatus.COMPLETED
        assert state.latest_quiz_result.score == 17
        assert state.attempt_count == 2

    def test_certification_claimed_once(self, any_store):
        assert any_store.claim_certification("onboarding", T0)
        assert not any_store.claim_certification("onboarding", T0)
        assert any_store.claim_certification("other-course", T0)

    def test_released_certification_can_be_claimed_again(self, any_store):
        any_store.claim_certification("onboarding", T0)
        any_store.release_certification("onboarding")
        assert any_store.claim_certification("onboarding", T0)


class TestSqliteActivityStore:
    """SQLite specifics."""

    def test_trainees_are_isolated(self, tmp_path):
        db = tmp_path / "progress.db"
        sarah = SqliteActivityStore(db, trainee_id="sarah")
        mike = SqliteActivityStore(db, trainee_id="mike")
        sarah.put("l1", LessonState(lesson_id="l1", status=LessonStatus.COMPLETED, completed_at=T0))
        assert mike.get("l1").status == LessonStatus.NOT_STARTED
        assert mike.all() == {}

    def test_persists_across_instances(self, tmp_path):
        db = tmp_path / "nested" / "progress.db"
        SqliteActivityStore(db, trainee_id="sarah").put(
            "l1", LessonState(lesson_id="l1", status=LessonStatus.IN_PROGRESS, started_at=T0)
        )
        reopened = SqliteActivityStore(db, trainee_id="sarah")
        assert reopened.get("l1").started_at == T0

    def test_certification_marker_shared_by_instances(self, tmp_path):
        db = tmp_path / "progress.db"
        phone = SqliteActivityStore(db, trainee_id="sarah")
        laptop = SqliteActivityStore(db, trainee_id="sarah")
        other = SqliteActivityStore(db, trainee_id="mike")
        assert phone.claim_certification("onboarding", T0)
        assert not laptop.claim_certification("onboarding", T0)
        assert other.claim_certification("onboarding", T0)
