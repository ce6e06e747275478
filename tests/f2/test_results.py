"""Tests for the results reader."""

import pytest

from examdesk.core.errors import NotFoundError, ValidationError
from examdesk.core.grading import SubmittedAnswer, start_attempt, submit_attempt
from examdesk.core.results import get_results, summarize
from examdesk.db.attempts_repository import AttemptRecord


def _attempt(total_marks, obtained_marks):
    return AttemptRecord(
        id="att_1",
        test_id="test_1",
        student_id="stud_s1",
        started_at="2025-03-10T09:00:00+00:00",
        submitted_at=None,
        total_marks=total_marks,
        obtained_marks=obtained_marks,
        status="graded",
        created_at="2025-03-10T09:00:00.000",
    )


@pytest.fixture
def graded_mixed(db, mixed_test, mixed_content):
    """Mixed test graded with 7 of 11 marks; the last question unanswered."""
    mcq, short, essay, _ = mixed_content
    attempt = start_attempt(db, mixed_test.id, "stud_s1")
    submit_attempt(
        db,
        attempt.id,
        [
            SubmittedAnswer(essay.id, "wrong"),
            SubmittedAnswer(mcq.id, "B"),
            SubmittedAnswer(short.id, "4"),
        ],
    )
    return attempt


class TestSummarize:
    """Tests for percentage and pass/fail."""

    @pytest.mark.parametrize(
        "total,obtained,percentage,passed",
        [
            (11, 7, 63.6, True),
            (10, 4, 40.0, True),
            (3, 1, 33.3, False),
            (5, 0, 0.0, False),
            (0, 0, 0.0, False),
        ],
    )
    def test_percentage_and_pass(self, total, obtained, percentage, passed):
        summary = summarize(_attempt(total, obtained), [])

        assert summary.percentage == percentage
        assert summary.passed is passed

    def test_custom_pass_percentage(self):
        summary = summarize(_attempt(10, 4), [], pass_percentage=50)
        assert summary.passed is False


class TestGetResults:
    """Tests for get_results."""

    def test_report_for_graded_attempt(self, db, graded_mixed):
        report = get_results(db, graded_mixed.id)

        assert report.attempt.status == "graded"
        assert report.attempt.obtained_marks == 7
        assert report.attempt.total_marks == 11
        assert report.summary.percentage == 63.6
        assert report.summary.passed is True
        assert report.summary.correct_count == 2
        assert report.summary.answered_count == 3

    def test_answers_follow_test_order(self, db, graded_mixed, mixed_content):
        """Answers come back in test order, not submission order."""
        report = get_results(db, graded_mixed.id)

        assert [a.question_id for a in report.answers] == [q.id for q in mixed_content[:3]]

    def test_answers_carry_question_fields(self, db, graded_mixed):
        mcq_answer = get_results(db, graded_mixed.id).answers[0]

        assert mcq_answer.question_text == "Which letter comes second?"
        assert mcq_answer.correct_answer == "B"
        assert mcq_answer.marks == 5
        assert mcq_answer.student_answer == "B"
        assert mcq_answer.is_correct is True
        assert mcq_answer.marks_obtained == 5

    def test_blank_answers_not_counted_as_answered(self, db, mixed_test, mixed_content):
        mcq, short, essay, _ = mixed_content
        attempt = start_attempt(db, mixed_test.id, "stud_s1")
        submit_attempt(
            db,
            attempt.id,
            [
                SubmittedAnswer(mcq.id, "B"),
                SubmittedAnswer(short.id, "   "),
                SubmittedAnswer(essay.id, ""),
            ],
        )

        summary = get_results(db, attempt.id).summary

        assert summary.answered_count == 1
        assert summary.correct_count == 1

    def test_answers_outside_test_listed_last(self, db, math_test, math_content, mixed_content):
        attempt = start_attempt(db, math_test.id, "stud_s1")
        submit_attempt(
            db,
            attempt.id,
            [
                SubmittedAnswer(mixed_content[1].id, "4"),
                SubmittedAnswer(math_content["question"].id, "B"),
            ],
        )

        answers = get_results(db, attempt.id).answers

        assert [a.question_id for a in answers] == [
            math_content["question"].id,
            mixed_content[1].id,
        ]
        assert answers[1].is_correct is None

    def test_in_progress_attempt_has_no_answers(self, db, math_test):
        attempt = start_attempt(db, math_test.id, "stud_s1")

        report = get_results(db, attempt.id)

        assert report.attempt.status == "in_progress"
        assert report.answers == []
        assert report.summary.percentage == 0.0

    def test_reading_is_pure(self, db, graded_mixed):
        first = get_results(db, graded_mixed.id).to_dict()
        second = get_results(db, graded_mixed.id).to_dict()

        assert first == second

    def test_unknown_attempt(self, db):
        with pytest.raises(NotFoundError, match="Attempt not found"):
            get_results(db, "att_missing")

    def test_missing_id(self, db):
        with pytest.raises(ValidationError):
            get_results(db, "")
