"""Repository functions for the content hierarchy.

Tables: subjects, chapters, questions, options.
"""

from __future__ import annotations

import sqlite3
from dataclasses import asdict, dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class SubjectRecord:
    """Subject record from database."""

    id: str
    name: str
    description: str | None
    teacher_id: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ChapterRecord:
    """Chapter record from database."""

    id: str
    subject_id: str
    name: str
    description: str | None
    order_index: int
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class OptionRecord:
    """Option record from database."""

    id: str
    option_text: str
    order_index: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class QuestionRecord:
    """Question record, optionally enriched with options.

    order_index is only set when the question was loaded through a test,
    where it is the question's position in that test.
    """

    id: str
    chapter_id: str
    question_text: str
    question_type: str
    marks: int
    correct_answer: str
    explanation: str | None
    created_at: str
    options: list[OptionRecord] = field(default_factory=list)
    order_index: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "id": self.id,
            "chapter_id": self.chapter_id,
            "question_text": self.question_text,
            "question_type": self.question_type,
            "marks": self.marks,
            "correct_answer": self.correct_answer,
            "explanation": self.explanation,
            "created_at": self.created_at,
            "options": [o.to_dict() for o in self.options],
        }
        if self.order_index is not None:
            result["order_index"] = self.order_index
        return result


# =============================================================================
# SUBJECTS
# =============================================================================


def insert_subject(
    conn: sqlite3.Connection,
    subject_id: str,
    name: str,
    description: str | None,
    teacher_id: str,
) -> None:
    conn.execute(
        "INSERT INTO subjects (id, name, description, teacher_id) VALUES (?, ?, ?, ?)",
        (subject_id, name, description, teacher_id),
    )
    logger.debug("subjects.inserted", subject_id=subject_id)


def get_subject_by_id(conn: sqlite3.Connection, subject_id: str) -> SubjectRecord | None:
    row = conn.execute("SELECT * FROM subjects WHERE id = ?", (subject_id,)).fetchone()
    if row is None:
        return None
    return _row_to_subject(row)


def list_subjects_by_teacher(conn: sqlite3.Connection, teacher_id: str) -> list[SubjectRecord]:
    """Subjects owned by a teacher, newest first."""
    rows = conn.execute(
        "SELECT * FROM subjects WHERE teacher_id = ? ORDER BY created_at DESC, rowid DESC",
        (teacher_id,),
    ).fetchall()
    return [_row_to_subject(row) for row in rows]


# =============================================================================
# CHAPTERS
# =============================================================================


def next_chapter_order(conn: sqlite3.Connection, subject_id: str) -> int:
    """Order index for a new chapter: 1 + current maximum (first chapter is 1)."""
    row = conn.execute(
        "SELECT COALESCE(MAX(order_index), 0) AS max_order FROM chapters WHERE subject_id = ?",
        (subject_id,),
    ).fetchone()
    return row["max_order"] + 1


def insert_chapter(
    conn: sqlite3.Connection,
    chapter_id: str,
    subject_id: str,
    name: str,
    description: str | None,
    order_index: int,
) -> None:
    conn.execute(
        """
        INSERT INTO chapters (id, subject_id, name, description, order_index)
        VALUES (?, ?, ?, ?, ?)
        """,
        (chapter_id, subject_id, name, description, order_index),
    )
    logger.debug("chapters.inserted", chapter_id=chapter_id, order_index=order_index)


def get_chapter_by_id(conn: sqlite3.Connection, chapter_id: str) -> ChapterRecord | None:
    row = conn.execute("SELECT * FROM chapters WHERE id = ?", (chapter_id,)).fetchone()
    if row is None:
        return None
    return _row_to_chapter(row)


def list_chapters_by_subject(conn: sqlite3.Connection, subject_id: str) -> list[ChapterRecord]:
    rows = conn.execute(
        "SELECT * FROM chapters WHERE subject_id = ? ORDER BY order_index ASC",
        (subject_id,),
    ).fetchall()
    return [_row_to_chapter(row) for row in rows]


# =============================================================================
# QUESTIONS AND OPTIONS
# =============================================================================


def insert_question(
    conn: sqlite3.Connection,
    question_id: str,
    chapter_id: str,
    question_text: str,
    question_type: str,
    marks: int,
    correct_answer: str,
    explanation: str | None,
) -> None:
    conn.execute(
        """
        INSERT INTO questions (
            id, chapter_id, question_text, question_type,
            marks, correct_answer, explanation
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            question_id,
            chapter_id,
            question_text,
            question_type,
            marks,
            correct_answer,
            explanation,
        ),
    )
    logger.debug("questions.inserted", question_id=question_id, question_type=question_type)


def insert_option(
    conn: sqlite3.Connection,
    option_id: str,
    question_id: str,
    option_text: str,
    order_index: int,
) -> None:
    conn.execute(
        "INSERT INTO options (id, question_id, option_text, order_index) VALUES (?, ?, ?, ?)",
        (option_id, question_id, option_text, order_index),
    )


def get_question_by_id(conn: sqlite3.Connection, question_id: str) -> QuestionRecord | None:
    """Get a question with its options."""
    row = conn.execute("SELECT * FROM questions WHERE id = ?", (question_id,)).fetchone()
    if row is None:
        return None
    question = _row_to_question(row)
    question.options = list_options(conn, question.id)
    return question


def list_questions_by_chapter(conn: sqlite3.Connection, chapter_id: str) -> list[QuestionRecord]:
    """Questions of a chapter, newest first, each with its options."""
    rows = conn.execute(
        "SELECT * FROM questions WHERE chapter_id = ? ORDER BY created_at DESC, rowid DESC",
        (chapter_id,),
    ).fetchall()

    questions = [_row_to_question(row) for row in rows]
    for question in questions:
        question.options = list_options(conn, question.id)
    return questions


def get_question_marks(conn: sqlite3.Connection, question_ids: list[str]) -> dict[str, int]:
    """Map question id -> marks for the ids that exist."""
    if not question_ids:
        return {}

    placeholders = ",".join("?" for _ in question_ids)
    rows = conn.execute(
        f"SELECT id, marks FROM questions WHERE id IN ({placeholders})",
        list(question_ids),
    ).fetchall()
    return {row["id"]: row["marks"] for row in rows}


def list_options(conn: sqlite3.Connection, question_id: str) -> list[OptionRecord]:
    rows = conn.execute(
        "SELECT id, option_text, order_index FROM options WHERE question_id = ? ORDER BY order_index ASC",
        (question_id,),
    ).fetchall()
    return [
        OptionRecord(id=row["id"], option_text=row["option_text"], order_index=row["order_index"])
        for row in rows
    ]


def _row_to_subject(row) -> SubjectRecord:
    return SubjectRecord(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        teacher_id=row["teacher_id"],
        created_at=row["created_at"],
    )


def _row_to_chapter(row) -> ChapterRecord:
    return ChapterRecord(
        id=row["id"],
        subject_id=row["subject_id"],
        name=row["name"],
        description=row["description"],
        order_index=row["order_index"],
        created_at=row["created_at"],
    )


def _row_to_question(row) -> QuestionRecord:
    """Convert database row to QuestionRecord (options not loaded)."""
    keys = row.keys()
    return QuestionRecord(
        id=row["id"],
        chapter_id=row["chapter_id"],
        question_text=row["question_text"],
        question_type=row["question_type"],
        marks=row["marks"],
        correct_answer=row["correct_answer"],
        explanation=row["explanation"],
        created_at=row["created_at"],
        order_index=row["test_order"] if "test_order" in keys else None,
    )
