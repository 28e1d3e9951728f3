"""
Shared fixtures for CertPath tests.

Course builders return validated pydantic models; the fixed clock keeps
timestamps deterministic.
"""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from certpath.classroom import InMemoryActivityStore, LessonStateTracker, RecordingIssuer
from certpath.schemas import Answer, Course, Lesson, Module, Question, QuizDefinition

ROOT = Path(__file__).resolve().parents[1]
SAMPLE_COURSE = ROOT / "data" / "courses" / "callx_agent_certification.yaml"


def build_quiz(num_questions: int, passing_grade: int = 80) -> QuizDefinition:
    """Quiz whose correct answer for question qN is 'qN-a'."""
    return QuizDefinition(
        title=f"{num_questions}-question quiz",
        passing_grade=passing_grade,
        questions=[
            Question(
                id=f"q{i}",
                text=f"Question {i}?",
                answers=[
                    Answer(id=f"q{i}-a", text="Right", is_correct=True),
                    Answer(id=f"q{i}-b", text="Wrong"),
                ],
            )
            for i in range(1, num_questions + 1)
        ],
    )


def answers(num_questions: int, num_correct: int) -> list[str]:
    """Attempt answering the first num_correct questions correctly."""
    return [
        f"q{i}-a" if i <= num_correct else f"q{i}-b"
        for i in range(1, num_questions + 1)
    ]


class FixedClock:
    """Clock that advances one minute per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 15, 9, 0)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(minutes=1)
        return current


@pytest.fixture
def sample_course_path() -> Path:
    return SAMPLE_COURSE


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def quiz_builder():
    return build_quiz


@pytest.fixture
def answer_builder():
    return answers


@pytest.fixture
def scenario_course() -> Course:
    """One module: video, text, and a 6-question quiz with an 80% pass mark."""
    return Course(
        id="onboarding",
        title="Onboarding",
        modules=[
            Module(
                id="m1",
                order_index=0,
                lessons=[
                    Lesson(id="l1", type="video", order_index=0),
                    Lesson(id="l2", type="text", order_index=1),
                    Lesson(id="l3", type="quiz", order_index=2, quiz=build_quiz(6, 80)),
                ],
            )
        ],
    )


@pytest.fixture
def gated_course() -> Course:
    """Two modules; the first must be completed before the second unlocks."""
    return Course(
        id="gated",
        modules=[
            Module(
                id="m1",
                order_index=0,
                blocks_next_module=True,
                lessons=[
                    Lesson(id="m1-video", type="video", order_index=0),
                    Lesson(id="m1-quiz", type="quiz", order_index=1, quiz=build_quiz(3, 60)),
                ],
            ),
            Module(
                id="m2",
                order_index=1,
                lessons=[
                    Lesson(id="m2-text", type="text", order_index=0),
                    Lesson(id="m2-sim", type="simulation", order_index=1),
                ],
            ),
        ],
    )


@pytest.fixture
def store():
    return InMemoryActivityStore()


@pytest.fixture
def issuer():
    return RecordingIssuer()


@pytest.fixture
def tracker(scenario_course, store, clock):
    return LessonStateTracker(scenario_course, store, clock=clock)
