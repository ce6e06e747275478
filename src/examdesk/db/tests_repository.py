"""Repository functions for tests and test_questions tables."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any

import structlog

from examdesk.db.content_repository import QuestionRecord, _row_to_question, list_options

logger = structlog.get_logger(__name__)


@dataclass
class TestRecord:
    """Test record; questions are only loaded by get_test_questions."""

    __test__ = False

    id: str
    teacher_id: str
    title: str
    description: str | None
    duration_minutes: int
    total_marks: int
    created_at: str
    questions: list[QuestionRecord] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "id": self.id,
            "teacher_id": self.teacher_id,
            "title": self.title,
            "description": self.description,
            "duration_minutes": self.duration_minutes,
            "total_marks": self.total_marks,
            "created_at": self.created_at,
        }
        if self.questions is not None:
            result["questions"] = [q.to_dict() for q in self.questions]
        return result


def insert_test(
    conn: sqlite3.Connection,
    test_id: str,
    teacher_id: str,
    title: str,
    description: str | None,
    duration_minutes: int,
    total_marks: int,
) -> None:
    conn.execute(
        """
        INSERT INTO tests (id, teacher_id, title, description, duration_minutes, total_marks)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (test_id, teacher_id, title, description, duration_minutes, total_marks),
    )
    logger.debug("tests.inserted", test_id=test_id, total_marks=total_marks)


def insert_test_question(
    conn: sqlite3.Connection,
    link_id: str,
    test_id: str,
    question_id: str,
    order_index: int,
) -> None:
    """Link a question to a test.

    Raises:
        sqlite3.IntegrityError: If the question is already part of the test
    """
    conn.execute(
        "INSERT INTO test_questions (id, test_id, question_id, order_index) VALUES (?, ?, ?, ?)",
        (link_id, test_id, question_id, order_index),
    )


def get_test_by_id(conn: sqlite3.Connection, test_id: str) -> TestRecord | None:
    row = conn.execute("SELECT * FROM tests WHERE id = ?", (test_id,)).fetchone()
    if row is None:
        return None
    return _row_to_record(row)


def list_tests_by_teacher(conn: sqlite3.Connection, teacher_id: str) -> list[TestRecord]:
    """Tests created by a teacher, newest first (no questions)."""
    rows = conn.execute(
        "SELECT * FROM tests WHERE teacher_id = ? ORDER BY created_at DESC, rowid DESC",
        (teacher_id,),
    ).fetchall()
    return [_row_to_record(row) for row in rows]


def get_test_questions(
    conn: sqlite3.Connection,
    test_id: str,
    with_options: bool = True,
) -> list[QuestionRecord]:
    """Questions of a test in test order.

    Each QuestionRecord carries its position in the test as order_index.

    Args:
        conn: Open connection
        test_id: Test identifier
        with_options: Also load each question's options
    """
    rows = conn.execute(
        """
        SELECT q.*, tq.order_index AS test_order
        FROM test_questions tq
        JOIN questions q ON tq.question_id = q.id
        WHERE tq.test_id = ?
        ORDER BY tq.order_index ASC
        """,
        (test_id,),
    ).fetchall()

    questions = [_row_to_question(row) for row in rows]
    if with_options:
        for question in questions:
            question.options = list_options(conn, question.id)
    return questions


def _row_to_record(row) -> TestRecord:
    """Convert database row to TestRecord."""
    return TestRecord(
        id=row["id"],
        teacher_id=row["teacher_id"],
        title=row["title"],
        description=row["description"],
        duration_minutes=row["duration_minutes"],
        total_marks=row["total_marks"],
        created_at=row["created_at"],
    )
