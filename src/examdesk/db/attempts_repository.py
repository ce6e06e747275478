"""Repository functions for student_attempts and student_answers tables."""

from __future__ import annotations

import sqlite3
from dataclasses import asdict, dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class AttemptRecord:
    """Student attempt record from database."""

    id: str
    test_id: str
    student_id: str
    started_at: str
    submitted_at: str | None
    total_marks: int
    obtained_marks: int
    status: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class AnswerRecord:
    """Student answer record.

    question_text, correct_answer and marks are filled when the answer is
    loaded together with its question (results view).
    """

    id: str
    attempt_id: str
    question_id: str
    student_answer: str
    is_correct: bool | None
    marks_obtained: int
    created_at: str
    question_text: str | None = None
    correct_answer: str | None = None
    marks: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# ATTEMPTS
# =============================================================================


def insert_attempt(
    conn: sqlite3.Connection,
    attempt_id: str,
    test_id: str,
    student_id: str,
    started_at: str,
    total_marks: int,
    status: str,
) -> None:
    conn.execute(
        """
        INSERT INTO student_attempts (id, test_id, student_id, started_at, total_marks, status)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (attempt_id, test_id, student_id, started_at, total_marks, status),
    )
    logger.debug("attempts.inserted", attempt_id=attempt_id, test_id=test_id)


def get_attempt_by_id(conn: sqlite3.Connection, attempt_id: str) -> AttemptRecord | None:
    row = conn.execute(
        "SELECT * FROM student_attempts WHERE id = ?", (attempt_id,)
    ).fetchone()
    if row is None:
        return None
    return _row_to_attempt(row)


def list_attempts_by_student(conn: sqlite3.Connection, student_id: str) -> list[AttemptRecord]:
    rows = conn.execute(
        "SELECT * FROM student_attempts WHERE student_id = ? ORDER BY created_at DESC, rowid DESC",
        (student_id,),
    ).fetchall()
    return [_row_to_attempt(row) for row in rows]


def update_attempt_status(conn: sqlite3.Connection, attempt_id: str, status: str) -> None:
    conn.execute(
        "UPDATE student_attempts SET status = ? WHERE id = ?",
        (status, attempt_id),
    )


def finalize_attempt(
    conn: sqlite3.Connection,
    attempt_id: str,
    submitted_at: str,
    obtained_marks: int,
    status: str,
) -> None:
    """Record the grading outcome on the attempt row."""
    conn.execute(
        """
        UPDATE student_attempts
        SET submitted_at = ?, obtained_marks = ?, status = ?
        WHERE id = ?
        """,
        (submitted_at, obtained_marks, status, attempt_id),
    )


# =============================================================================
# ANSWERS
# =============================================================================


def insert_answer(
    conn: sqlite3.Connection,
    answer_id: str,
    attempt_id: str,
    question_id: str,
    student_answer: str,
) -> None:
    conn.execute(
        """
        INSERT INTO student_answers (id, attempt_id, question_id, student_answer)
        VALUES (?, ?, ?, ?)
        """,
        (answer_id, attempt_id, question_id, student_answer),
    )


def get_latest_answer(
    conn: sqlite3.Connection,
    attempt_id: str,
    question_id: str,
) -> AnswerRecord | None:
    """Most recently inserted answer for (attempt, question), by rowid."""
    row = conn.execute(
        """
        SELECT * FROM student_answers
        WHERE attempt_id = ? AND question_id = ?
        ORDER BY rowid DESC
        LIMIT 1
        """,
        (attempt_id, question_id),
    ).fetchone()
    if row is None:
        return None
    return _row_to_answer(row)


def update_answer_grade(
    conn: sqlite3.Connection,
    answer_id: str,
    is_correct: bool,
    marks_obtained: int,
) -> None:
    conn.execute(
        "UPDATE student_answers SET is_correct = ?, marks_obtained = ? WHERE id = ?",
        (1 if is_correct else 0, marks_obtained, answer_id),
    )


def list_answers_with_questions(
    conn: sqlite3.Connection,
    attempt_id: str,
) -> list[AnswerRecord]:
    """Answers of an attempt joined with their questions.

    Ordered by the question's position in the attempt's test, then by
    insertion. Answers to questions outside the test come last.
    """
    rows = conn.execute(
        """
        SELECT sa.*, q.question_text, q.correct_answer, q.marks
        FROM student_answers sa
        JOIN questions q ON sa.question_id = q.id
        JOIN student_attempts a ON sa.attempt_id = a.id
        LEFT JOIN test_questions tq
            ON tq.test_id = a.test_id AND tq.question_id = sa.question_id
        WHERE sa.attempt_id = ?
        ORDER BY tq.order_index IS NULL, tq.order_index ASC, sa.rowid ASC
        """,
        (attempt_id,),
    ).fetchall()
    return [_row_to_answer(row) for row in rows]


def _row_to_attempt(row) -> AttemptRecord:
    return AttemptRecord(
        id=row["id"],
        test_id=row["test_id"],
        student_id=row["student_id"],
        started_at=row["started_at"],
        submitted_at=row["submitted_at"],
        total_marks=row["total_marks"],
        obtained_marks=row["obtained_marks"],
        status=row["status"],
        created_at=row["created_at"],
    )


def _row_to_answer(row) -> AnswerRecord:
    """Convert database row to AnswerRecord."""
    keys = row.keys()
    is_correct = row["is_correct"]
    return AnswerRecord(
        id=row["id"],
        attempt_id=row["attempt_id"],
        question_id=row["question_id"],
        student_answer=row["student_answer"],
        is_correct=None if is_correct is None else bool(is_correct),
        marks_obtained=row["marks_obtained"],
        created_at=row["created_at"],
        question_text=row["question_text"] if "question_text" in keys else None,
        correct_answer=row["correct_answer"] if "correct_answer" in keys else None,
        marks=row["marks"] if "marks" in keys else None,
    )
