"""
Unit tests for grading helpers.
"""

from datetime import datetime, timezone

import pytest

from noggin.core.models import GradedResponse, Quiz, WrittenQuestion
from noggin.services.grading import (
    PASSING_GRADE,
    ResponseGrade,
    apply_grades,
    is_passing,
    letter_grade,
)


def quiz_with(n):
    return Quiz(
        id="quiz-1",
        title="Quiz",
        questions=[WrittenQuestion(question=f"Q{i}") for i in range(n)],
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def grades(*correct):
    return [
        ResponseGrade(is_correct=c, correct_answer=f"answer {i}", feedback="ok" if c else "no")
        for i, c in enumerate(correct)
    ]


class TestLetterGrade:
    @pytest.mark.parametrize(
        "grade,letter",
        [(100, "A"), (90, "A"), (89, "B"), (80, "B"), (79, "C"), (70, "C"), (60, "D"), (59, "F"), (0, "F")],
    )
    def test_boundaries(self, grade, letter):
        assert letter_grade(grade) == letter

    def test_passing_threshold(self):
        assert PASSING_GRADE == 60
        assert is_passing(60)
        assert not is_passing(59)


class TestApplyGrades:
    """Tests for folding grader verdicts into a submission."""

    def test_grade_is_rounded_percentage(self, submission_factory):
        submission = submission_factory(quiz_with(3))

        graded = apply_grades(submission, grades(True, True, False))

        assert graded.status == "graded"
        assert graded.grade == 67
        assert graded.letter_grade == "D"
        assert graded.is_graded

    def test_half_rounds_up(self, submission_factory):
        submission = submission_factory(quiz_with(8))
        graded = apply_grades(submission, grades(True, *[False] * 7))
        assert graded.grade == 13

    def test_responses_carry_verdicts(self, submission_factory):
        submission = submission_factory(quiz_with(2))

        graded = apply_grades(submission, grades(True, False))

        assert all(isinstance(r, GradedResponse) for r in graded.responses)
        assert [r.verdict for r in graded.responses] == ["pass", "fail"]
        assert graded.responses[1].correct_answer == "answer 1"
        assert graded.responses[0].student_answer == "an answer"

    def test_input_submission_untouched(self, submission_factory):
        submission = submission_factory(quiz_with(1))
        apply_grades(submission, grades(True))
        assert submission.status == "pending"

    def test_count_mismatch(self, submission_factory):
        with pytest.raises(ValueError):
            apply_grades(submission_factory(quiz_with(2)), grades(True))

    def test_no_grades(self, submission_factory):
        with pytest.raises(ValueError):
            apply_grades(submission_factory(quiz_with(0)), [])
