"""Attempt lifecycle and grading.

States: in_progress -> submitted -> graded. Submission records the answers
(submitted) and grades them (graded) inside one transaction, so other
readers only ever see an attempt fully in progress or fully graded.

Grading rules:
- A question is correct iff the student's answer equals correct_answer
  exactly: case, whitespace and punctuation all count. Every question type
  is graded this way.
- Correct answers earn the question's marks, anything else earns 0.
- Questions without an answer count as incorrect.
- When several answer rows exist for a question, the latest inserted wins.
- Every submitted answer is stored; rows for questions outside the test
  are kept but never graded.

Re-submission policy: an attempt that is no longer in progress cannot be
submitted again (StateError).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import structlog

from examdesk.core.errors import NotFoundError, StateError, ValidationError
from examdesk.core.exam_clock import ExamClock, utc_now
from examdesk.db.attempts_repository import (
    AttemptRecord,
    finalize_attempt,
    get_attempt_by_id,
    get_latest_answer,
    insert_answer,
    insert_attempt,
    list_attempts_by_student,
    update_answer_grade,
    update_attempt_status,
)
from examdesk.db.content_repository import QuestionRecord, get_question_marks
from examdesk.db.database import Database
from examdesk.db.tests_repository import get_test_by_id, get_test_questions
from examdesk.utils.ids import generate_id
from examdesk.utils.validators import is_missing, require_fields

logger = structlog.get_logger(__name__)


class AttemptStatus(str, Enum):
    """Lifecycle states of a student attempt."""

    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    GRADED = "graded"


_ALLOWED_TRANSITIONS: dict[AttemptStatus, set[AttemptStatus]] = {
    AttemptStatus.IN_PROGRESS: {AttemptStatus.SUBMITTED},
    AttemptStatus.SUBMITTED: {AttemptStatus.GRADED},
    AttemptStatus.GRADED: set(),
}


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class SubmittedAnswer:
    """One answer as sent by the client."""

    question_id: str
    answer: str


@dataclass
class QuestionGrade:
    """Grading outcome for one test question."""

    question_id: str
    is_correct: bool
    marks_obtained: int
    answer_id: str | None = None


@dataclass
class SubmissionResult:
    """Result of submitting and grading an attempt."""

    attempt_id: str
    obtained_marks: int
    total_marks: int
    grades: list[QuestionGrade] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"attemptId": self.attempt_id, "obtainedMarks": self.obtained_marks}


# =============================================================================
# GRADING RULES
# =============================================================================


def is_answer_correct(given: str | None, expected: str) -> bool:
    """Verbatim comparison, no normalization of any kind."""
    return given is not None and given == expected


def grade_question(question: QuestionRecord, given: str | None) -> tuple[bool, int]:
    """Return (is_correct, marks_obtained) for one question."""
    if is_answer_correct(given, question.correct_answer):
        return True, question.marks
    return False, 0


def check_transition(current: str, target: AttemptStatus) -> None:
    """Raise StateError unless current -> target is an allowed hop."""
    current_status = AttemptStatus(current)
    if target not in _ALLOWED_TRANSITIONS[current_status]:
        raise StateError(
            f"Cannot move attempt from {current_status.value} to {target.value}"
        )


# =============================================================================
# OPERATIONS
# =============================================================================


def start_attempt(
    db: Database,
    test_id: str | None,
    student_id: str | None,
    now: datetime | None = None,
) -> AttemptRecord:
    """Open a new in-progress attempt.

    The test is not required to exist and several open attempts for the
    same student and test are allowed. total_marks is copied from the test
    when it exists, 0 otherwise.

    Raises:
        ValidationError: If test_id or student_id is missing
    """
    require_fields("Test ID and Student ID required", test_id=test_id, student_id=student_id)

    started_at = (now or utc_now()).isoformat()
    attempt_id = generate_id("att")

    with db.transaction() as conn:
        test = get_test_by_id(conn, test_id)
        total_marks = test.total_marks if test is not None else 0

        insert_attempt(
            conn,
            attempt_id,
            test_id,
            student_id,
            started_at,
            total_marks,
            AttemptStatus.IN_PROGRESS.value,
        )
        attempt = get_attempt_by_id(conn, attempt_id)

    logger.info(
        "attempts.started",
        attempt_id=attempt_id,
        test_id=test_id,
        student_id=student_id,
        test_found=test is not None,
    )
    return attempt


def submit_attempt(
    db: Database,
    attempt_id: str | None,
    answers: list[SubmittedAnswer] | None,
    now: datetime | None = None,
    enforce_duration: bool = False,
    grace_seconds: int = 0,
) -> SubmissionResult:
    """Record a student's answers and grade the attempt.

    Args:
        db: Open database
        attempt_id: Attempt to submit
        answers: One entry per answered question; text stored verbatim
        now: Submission instant (defaults to current UTC time)
        enforce_duration: Reject submissions after the test's time limit
        grace_seconds: Extra time allowed when enforce_duration is on

    Returns:
        SubmissionResult with obtained marks and per-question grades

    Raises:
        ValidationError: Missing fields or malformed answers
        NotFoundError: If the attempt or an answered question does not exist
        StateError: If the attempt was already graded or time is up
    """
    if is_missing(attempt_id) or answers is None:
        raise ValidationError("Attempt ID and answers required")

    _validate_answers(answers)

    submitted_at = now or utc_now()

    with db.transaction() as conn:
        attempt = get_attempt_by_id(conn, attempt_id)
        if attempt is None:
            raise NotFoundError("Attempt not found")

        if attempt.status != AttemptStatus.IN_PROGRESS.value:
            logger.warning(
                "attempts.resubmission_rejected",
                attempt_id=attempt_id,
                status=attempt.status,
            )
            raise StateError("Attempt already graded")

        if enforce_duration:
            _check_time_limit(conn, attempt, submitted_at, grace_seconds)

        answered_ids = list(dict.fromkeys(a.question_id for a in answers))
        known_ids = get_question_marks(conn, answered_ids)
        unknown = [qid for qid in answered_ids if qid not in known_ids]
        if unknown:
            raise NotFoundError(f"Questions not found: {', '.join(unknown)}")

        questions = get_test_questions(conn, attempt.test_id, with_options=False)

        for answer in answers:
            insert_answer(conn, generate_id("ans"), attempt_id, answer.question_id, answer.answer)

        check_transition(attempt.status, AttemptStatus.SUBMITTED)
        update_attempt_status(conn, attempt_id, AttemptStatus.SUBMITTED.value)

        grades: list[QuestionGrade] = []
        for question in questions:
            latest = get_latest_answer(conn, attempt_id, question.id)
            given = latest.student_answer if latest is not None else None
            is_correct, marks_obtained = grade_question(question, given)

            if latest is not None:
                update_answer_grade(conn, latest.id, is_correct, marks_obtained)

            grades.append(
                QuestionGrade(
                    question_id=question.id,
                    is_correct=is_correct,
                    marks_obtained=marks_obtained,
                    answer_id=latest.id if latest is not None else None,
                )
            )

        obtained_marks = sum(g.marks_obtained for g in grades)

        check_transition(AttemptStatus.SUBMITTED.value, AttemptStatus.GRADED)
        finalize_attempt(
            conn,
            attempt_id,
            submitted_at.isoformat(),
            obtained_marks,
            AttemptStatus.GRADED.value,
        )

    logger.info(
        "attempts.graded",
        attempt_id=attempt_id,
        answers_count=len(answers),
        correct_count=sum(1 for g in grades if g.is_correct),
        obtained_marks=obtained_marks,
        total_marks=attempt.total_marks,
    )

    return SubmissionResult(
        attempt_id=attempt_id,
        obtained_marks=obtained_marks,
        total_marks=attempt.total_marks,
        grades=grades,
    )


def get_attempt(db: Database, attempt_id: str | None) -> AttemptRecord:
    """Load one attempt.

    Raises:
        NotFoundError: If the attempt does not exist
    """
    require_fields("Attempt ID required", attempt_id=attempt_id)

    with db.snapshot() as conn:
        attempt = get_attempt_by_id(conn, attempt_id)

    if attempt is None:
        raise NotFoundError("Attempt not found")
    return attempt


def describe_attempt(
    db: Database,
    attempt_id: str | None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Attempt fields plus the state of its exam clock.

    Clock fields are None when the attempt's test does not exist.
    """
    require_fields("Attempt ID required", attempt_id=attempt_id)

    with db.snapshot() as conn:
        attempt = get_attempt_by_id(conn, attempt_id)
        if attempt is None:
            raise NotFoundError("Attempt not found")
        test = get_test_by_id(conn, attempt.test_id)

    result = attempt.to_dict()
    result.update(
        {
            "duration_minutes": None,
            "deadline": None,
            "remaining_seconds": None,
            "time_remaining": None,
            "time_warning": False,
            "expired": False,
        }
    )

    if test is not None:
        clock = ExamClock.for_attempt(attempt.started_at, test.duration_minutes)
        in_progress = attempt.status == AttemptStatus.IN_PROGRESS.value
        result.update(
            {
                "duration_minutes": test.duration_minutes,
                "deadline": clock.deadline.isoformat(),
                "remaining_seconds": clock.remaining_seconds(now) if in_progress else 0,
                "time_remaining": clock.format_remaining(now) if in_progress else "00:00",
                "time_warning": in_progress and clock.is_warning(now),
                "expired": in_progress and clock.is_expired(now),
            }
        )

    return result


def list_attempts(db: Database, student_id: str | None) -> list[AttemptRecord]:
    """Attempts of a student, newest first."""
    require_fields("Student ID required", student_id=student_id)

    with db.snapshot() as conn:
        return list_attempts_by_student(conn, student_id)


# =============================================================================
# HELPERS
# =============================================================================


def _validate_answers(answers: Any) -> None:
    """Check the answers payload shape."""
    if not isinstance(answers, list):
        raise ValidationError("answers must be a list")

    for answer in answers:
        if not isinstance(answer, SubmittedAnswer) or is_missing(answer.question_id):
            raise ValidationError("Each answer needs a questionId")
        if not isinstance(answer.answer, str):
            raise ValidationError("Each answer must be a string")


def _check_time_limit(conn, attempt: AttemptRecord, now: datetime, grace_seconds: int) -> None:
    test = get_test_by_id(conn, attempt.test_id)
    if test is None:
        return

    clock = ExamClock.for_attempt(attempt.started_at, test.duration_minutes)
    if clock.is_expired(now, grace_seconds=grace_seconds):
        logger.warning(
            "attempts.time_limit_exceeded",
            attempt_id=attempt.id,
            deadline=clock.deadline.isoformat(),
        )
        raise StateError("Time limit exceeded")
