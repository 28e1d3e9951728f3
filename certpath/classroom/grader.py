"""
Quiz grader - Score a submitted attempt against a quiz definition.

Pure function of its inputs: no storage, no clock.
"""

import logging

from certpath.errors import InvalidQuizDefinition, MalformedSubmission
from certpath.schemas import QuizAttempt, QuizDefinition, QuizResult
from certpath.utils import percent

logger = logging.getLogger(__name__)


def grade(definition: QuizDefinition, attempt: QuizAttempt) -> QuizResult:
    """
    Grade a quiz attempt.

    Args:
        definition: Validated quiz definition
        attempt: One selected answer id per question, in question order

    Returns:
        QuizResult with half-up rounded score and pass/fail verdict

    Raises:
        InvalidQuizDefinition: If the quiz has no questions
        MalformedSubmission: If the attempt does not fit the quiz
    """
    questions = definition.questions
    if not questions:
        raise InvalidQuizDefinition("Cannot grade a quiz with no questions")

    if len(attempt.answer_ids) != len(questions):
        raise MalformedSubmission(
            f"Expected {len(questions)} answers, got {len(attempt.answer_ids)}"
        )

    correct = []
    for question, answer_id in zip(questions, attempt.answer_ids):
        if not question.has_answer(answer_id):
            raise MalformedSubmission(
                f"Answer {answer_id!r} is not an option of question {question.id!r}"
            )
        correct.append(answer_id == question.correct_answer_id)

    score = percent(sum(correct), len(questions))
    passed = score >= definition.passing_grade
    logger.debug(f"Graded quiz {definition.title!r}: {score}% (pass mark {definition.passing_grade}%)")

    return QuizResult(
        score=score,
        passed=passed,
        correct=correct,
        passing_grade=definition.passing_grade,
    )
