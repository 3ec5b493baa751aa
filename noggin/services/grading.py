"""
Grading helpers and the seams for external (AI) collaborators.

Grading itself is done elsewhere: a SubmissionGrader turns a pending
submission into one ResponseGrade per response, and ``apply_grades`` folds
those verdicts back into the submission.
"""

from __future__ import annotations

import math
from typing import Protocol

from noggin.core.models import GradedResponse, LetterGrade, NogginModel, Quiz, Submission

PASSING_GRADE = 60


class ResponseGrade(NogginModel):
    """Verdict for one response, as returned by a grader."""

    is_correct: bool
    correct_answer: str
    feedback: str = ""


# =============================================================================
# Collaborators
# =============================================================================


class SubmissionGrader(Protocol):
    async def __call__(self, submission: Submission) -> list[ResponseGrade]: ...


class ContentAnalyzer(Protocol):
    async def __call__(self, sources: list[str]) -> str: ...


class QuizGenerator(Protocol):
    async def __call__(self, sources: list[str], question_count: int) -> Quiz: ...


# =============================================================================
# Grades
# =============================================================================


def letter_grade(grade: int) -> LetterGrade:
    if grade >= 90:
        return "A"
    if grade >= 80:
        return "B"
    if grade >= 70:
        return "C"
    if grade >= PASSING_GRADE:
        return "D"
    return "F"


def is_passing(grade: int) -> bool:
    return grade >= PASSING_GRADE


def apply_grades(submission: Submission, grades: list[ResponseGrade]) -> Submission:
    """
    Return a graded copy of ``submission``.

    The numeric grade is the percentage (rounded half up) of correct responses.
    Grades pair with responses by position.

    Raises:
        ValueError: no grades, or not one grade per response
    """
    if not grades:
        raise ValueError(f"No grades for submission {submission.quiz_id}-{submission.attempt_number}")
    if len(grades) != len(submission.responses):
        raise ValueError(
            f"Expected {len(submission.responses)} grades, got {len(grades)}"
        )

    passed = sum(1 for g in grades if g.is_correct)
    # half-up, so 12.5 rounds to 13
    grade = math.floor(100 * passed / len(grades) + 0.5)

    responses = [
        GradedResponse(
            created_at=response.created_at,
            quiz_id=response.quiz_id,
            submission_id=response.submission_id,
            question=response.question,
            student_answer=response.student_answer,
            correct_answer=result.correct_answer,
            verdict="pass" if result.is_correct else "fail",
            feedback=result.feedback,
        )
        for response, result in zip(submission.responses, grades)
    ]
    return submission.model_copy(
        update={
            "status": "graded",
            "grade": grade,
            "letter_grade": letter_grade(grade),
            "responses": responses,
        }
    )
