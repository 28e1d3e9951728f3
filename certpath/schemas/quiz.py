"""
Quiz schemas for CertPath.

Defines Pydantic models for:
- Quiz definitions (questions, answers, passing grade)
- Trainee submissions (attempts)
- Grading results
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field, model_validator

from certpath.errors import InvalidQuizDefinition


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"


# -----------------------------------------------------------------------------
# Authored content
# -----------------------------------------------------------------------------

class Answer(BaseModel):
    id: str
    text: str
    is_correct: bool = False


class Question(BaseModel):
    """
    A single quiz question.

    Integrity rules are checked when the definition is loaded, so a trainee
    never sees a question that cannot be graded:
    - exactly one answer is marked correct
    - answer ids are unique within the question
    - true/false questions offer exactly two answers
    """
    id: str
    type: QuestionType = QuestionType.MULTIPLE_CHOICE
    text: str
    answers: list[Answer]

    @model_validator(mode="after")
    def check_answers(self):
        correct = [a for a in self.answers if a.is_correct]
        if len(correct) != 1:
            raise InvalidQuizDefinition(
                f"Question {self.id!r} must have exactly one correct answer, found {len(correct)}"
            )
        ids = [a.id for a in self.answers]
        if len(set(ids)) != len(ids):
            raise InvalidQuizDefinition(f"Question {self.id!r} has duplicate answer ids")
        if self.type == QuestionType.TRUE_FALSE and len(self.answers) != 2:
            raise InvalidQuizDefinition(
                f"True/false question {self.id!r} must have exactly two answers"
            )
        return self

    @property
    def correct_answer_id(self) -> str:
        return next(a.id for a in self.answers if a.is_correct)

    def has_answer(self, answer_id: str) -> bool:
        return any(a.id == answer_id for a in self.answers)


class QuizDefinition(BaseModel):
    title: str = ""
    questions: list[Question]
    passing_grade: int = 80  # percent, 0-100

    @model_validator(mode="after")
    def check_definition(self):
        if not self.questions:
            raise InvalidQuizDefinition("Quiz must contain at least one question")
        if not 0 <= self.passing_grade <= 100:
            raise InvalidQuizDefinition(
                f"passing_grade must be between 0 and 100, got {self.passing_grade}"
            )
        ids = [q.id for q in self.questions]
        if len(set(ids)) != len(ids):
            raise InvalidQuizDefinition("Quiz has duplicate question ids")
        return self


# -----------------------------------------------------------------------------
# Trainee submissions and results
# -----------------------------------------------------------------------------

class QuizAttempt(BaseModel):
    """Selected answer ids, one per question, in question order."""
    answer_ids: list[str]


class QuizResult(BaseModel):
    score: int = Field(..., ge=0, le=100)   # rounded percentage
    passed: bool
    correct: list[bool]                      # per question, in question order
    passing_grade: int
    graded_at: Optional[datetime] = None     # set by the tracker

    @computed_field
    @property
    def correct_count(self) -> int:
        return sum(self.correct)

    @computed_field
    @property
    def total_questions(self) -> int:
        return len(self.correct)
