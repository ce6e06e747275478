"""Test assembly.

A test is a frozen snapshot: the question set, their order and the total
marks are fixed when the test is created. Later edits to a question's marks
do not change total_marks.

Policy for repeated question ids: the request is rejected, so every
(test, question) pair is unique.
"""

from __future__ import annotations

from typing import Any

import structlog

from examdesk.core.errors import NotFoundError, ValidationError
from examdesk.db.content_repository import get_question_marks
from examdesk.db.database import Database
from examdesk.db.tests_repository import (
    TestRecord,
    get_test_by_id,
    get_test_questions,
    insert_test,
    insert_test_question,
    list_tests_by_teacher,
)
from examdesk.utils.ids import generate_id
from examdesk.utils.validators import is_missing, parse_positive_int, require_fields

logger = structlog.get_logger(__name__)


def create_test(
    db: Database,
    teacher_id: str | None,
    title: str | None,
    duration_minutes: Any,
    question_ids: list[str] | None,
    description: str | None = None,
) -> TestRecord:
    """Create a test from an ordered list of question ids.

    Args:
        db: Open database
        teacher_id: Owning teacher
        title: Test title
        duration_minutes: Time limit, positive integer
        question_ids: Questions in display order
        description: Optional description

    Returns:
        The stored TestRecord (without questions)

    Raises:
        ValidationError: Missing fields, bad duration or repeated question ids
        NotFoundError: If any question id does not exist
    """
    require_fields(
        "Missing required fields",
        teacher_id=teacher_id,
        title=title,
        duration_minutes=duration_minutes,
        question_ids=question_ids,
    )

    duration = parse_positive_int(duration_minutes, "durationMinutes")
    ordered_ids = _validate_question_ids(question_ids)

    test_id = generate_id("test")
    with db.transaction() as conn:
        marks_by_id = get_question_marks(conn, ordered_ids)

        unknown = [qid for qid in ordered_ids if qid not in marks_by_id]
        if unknown:
            raise NotFoundError(f"Questions not found: {', '.join(unknown)}")

        total_marks = sum(marks_by_id[qid] for qid in ordered_ids)

        insert_test(conn, test_id, teacher_id, title, description or None, duration, total_marks)
        for index, question_id in enumerate(ordered_ids):
            insert_test_question(conn, generate_id("testq"), test_id, question_id, index)

        test = get_test_by_id(conn, test_id)

    logger.info(
        "tests.created",
        test_id=test_id,
        teacher_id=teacher_id,
        questions_count=len(ordered_ids),
        total_marks=total_marks,
    )
    return test


def get_test(db: Database, test_id: str | None) -> TestRecord:
    """Load a test with its questions and options in test order.

    Raises:
        ValidationError: If test_id is missing
        NotFoundError: If the test does not exist
    """
    require_fields("Test ID required", test_id=test_id)

    with db.snapshot() as conn:
        test = get_test_by_id(conn, test_id)
        if test is None:
            raise NotFoundError("Test not found")
        test.questions = get_test_questions(conn, test_id)

    return test


def list_tests(db: Database, teacher_id: str | None) -> list[TestRecord]:
    """Tests of a teacher, newest first, without questions."""
    require_fields("Teacher ID required", teacher_id=teacher_id)

    with db.snapshot() as conn:
        return list_tests_by_teacher(conn, teacher_id)


def _validate_question_ids(question_ids: Any) -> list[str]:
    """Check the id list shape and reject repeats."""
    if not isinstance(question_ids, list):
        raise ValidationError("questionIds must be a list")

    seen: set[str] = set()
    for question_id in question_ids:
        if not isinstance(question_id, str) or is_missing(question_id):
            raise ValidationError("questionIds must contain non-empty strings")
        if question_id in seen:
            raise ValidationError(f"Duplicate question id: {question_id}")
        seen.add(question_id)

    return list(question_ids)
