"""Content hierarchy: subjects, chapters and questions with options.

Chapters are ordered within their subject by order_index, assigned as
1 + the current maximum. Questions keep their options in the order given.
"""

from __future__ import annotations

from typing import Any

import structlog

from examdesk.core.errors import NotFoundError, ValidationError
from examdesk.db.content_repository import (
    ChapterRecord,
    QuestionRecord,
    SubjectRecord,
    get_chapter_by_id,
    get_question_by_id,
    get_subject_by_id,
    insert_chapter,
    insert_option,
    insert_question,
    insert_subject,
    list_chapters_by_subject,
    list_questions_by_chapter,
    list_subjects_by_teacher,
    next_chapter_order,
)
from examdesk.db.database import Database
from examdesk.utils.ids import generate_id
from examdesk.utils.validators import is_missing, parse_positive_int, require_fields

logger = structlog.get_logger(__name__)

QUESTION_TYPES = ("mcq", "short_answer", "essay")

DEFAULT_MARKS = 1


# =============================================================================
# SUBJECTS
# =============================================================================


def create_subject(
    db: Database,
    name: str | None,
    teacher_id: str | None,
    description: str | None = None,
) -> SubjectRecord:
    """Create a subject owned by a teacher.

    Raises:
        ValidationError: If name or teacher_id is missing
    """
    require_fields("Name and teacherId required", name=name, teacher_id=teacher_id)

    subject_id = generate_id("subj")
    with db.transaction() as conn:
        insert_subject(conn, subject_id, name, description or None, teacher_id)
        subject = get_subject_by_id(conn, subject_id)

    logger.info("content.subject_created", subject_id=subject_id, teacher_id=teacher_id)
    return subject


def list_subjects(db: Database, teacher_id: str | None) -> list[SubjectRecord]:
    """Subjects of a teacher, newest first."""
    require_fields("Teacher ID required", teacher_id=teacher_id)

    with db.snapshot() as conn:
        return list_subjects_by_teacher(conn, teacher_id)


# =============================================================================
# CHAPTERS
# =============================================================================


def create_chapter(
    db: Database,
    subject_id: str | None,
    name: str | None,
    description: str | None = None,
) -> ChapterRecord:
    """Append a chapter to a subject.

    Raises:
        ValidationError: If subject_id or name is missing
        NotFoundError: If the subject does not exist
    """
    require_fields("Subject ID and name required", subject_id=subject_id, name=name)

    chapter_id = generate_id("chap")
    with db.transaction() as conn:
        if get_subject_by_id(conn, subject_id) is None:
            raise NotFoundError("Subject not found")

        order_index = next_chapter_order(conn, subject_id)
        insert_chapter(conn, chapter_id, subject_id, name, description or None, order_index)
        chapter = get_chapter_by_id(conn, chapter_id)

    logger.info(
        "content.chapter_created",
        chapter_id=chapter_id,
        subject_id=subject_id,
        order_index=order_index,
    )
    return chapter


def list_chapters(db: Database, subject_id: str | None) -> list[ChapterRecord]:
    """Chapters of a subject by order_index."""
    require_fields("Subject ID required", subject_id=subject_id)

    with db.snapshot() as conn:
        return list_chapters_by_subject(conn, subject_id)


# =============================================================================
# QUESTIONS
# =============================================================================


def create_question(
    db: Database,
    chapter_id: str | None,
    question_text: str | None,
    question_type: str | None,
    correct_answer: str | None,
    marks: Any = None,
    explanation: str | None = None,
    options: list[str] | None = None,
) -> QuestionRecord:
    """Create a question and its options in one transaction.

    For mcq questions the correct answer is not checked against the
    options; that is left to the caller.

    Args:
        db: Open database
        chapter_id: Owning chapter
        question_text: Prompt shown to students
        question_type: One of mcq, short_answer, essay
        correct_answer: Text a student answer must equal exactly
        marks: Marks awarded when correct (default 1)
        explanation: Optional explanation shown with results
        options: Option texts; order_index is the list position

    Raises:
        ValidationError: Missing fields, unknown type, bad marks or options
        NotFoundError: If the chapter does not exist
    """
    require_fields(
        "Missing required fields",
        chapter_id=chapter_id,
        question_text=question_text,
        question_type=question_type,
        correct_answer=correct_answer,
    )

    if question_type not in QUESTION_TYPES:
        raise ValidationError(
            f"Invalid question type: {question_type}. Expected one of {', '.join(QUESTION_TYPES)}"
        )

    marks_value = DEFAULT_MARKS if is_missing(marks) else parse_positive_int(marks, "marks")

    option_texts = _normalize_options(options)

    question_id = generate_id("ques")
    with db.transaction() as conn:
        if get_chapter_by_id(conn, chapter_id) is None:
            raise NotFoundError("Chapter not found")

        insert_question(
            conn,
            question_id,
            chapter_id,
            question_text,
            question_type,
            marks_value,
            correct_answer,
            explanation or None,
        )
        for index, text in enumerate(option_texts):
            insert_option(conn, generate_id("opt"), question_id, text, index)

        question = get_question_by_id(conn, question_id)

    logger.info(
        "content.question_created",
        question_id=question_id,
        chapter_id=chapter_id,
        question_type=question_type,
        options_count=len(option_texts),
    )
    return question


def list_questions(db: Database, chapter_id: str | None) -> list[QuestionRecord]:
    """Questions of a chapter, newest first, with options."""
    require_fields("Chapter ID required", chapter_id=chapter_id)

    with db.snapshot() as conn:
        return list_questions_by_chapter(conn, chapter_id)


def _normalize_options(options: Any) -> list[str]:
    """Validate the options payload. None means no options."""
    if options is None:
        return []
    if not isinstance(options, list):
        raise ValidationError("options must be a list of strings")

    for option in options:
        if not isinstance(option, str):
            raise ValidationError("options must be a list of strings")
    return list(options)
