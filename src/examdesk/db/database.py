"""SQLite database connection and schema management.

Provides the Database object shared by every repository and core module:
one connection per process, explicit open/close, and transaction scopes
that commit on success and roll back on any failure.
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

from examdesk.core.errors import StorageError

logger = structlog.get_logger(__name__)

MEMORY_PATH = ":memory:"


class Database:
    """Handle on the examdesk SQLite file.

    The connection is shared by all callers and guarded by a lock, so
    FastAPI's worker threads can use it one transaction at a time.

    Example:
        with Database(Path("data/examdesk.db")) as db:
            with db.transaction() as conn:
                conn.execute("INSERT INTO subjects ...")
    """

    def __init__(self, path: Path | str):
        self.path = path if str(path) == MEMORY_PATH else Path(path)
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> Database:
        """Open the connection and create the schema if needed."""
        if self._conn is not None:
            return self

        if isinstance(self.path, Path):
            self.path.parent.mkdir(parents=True, exist_ok=True)

        try:
            conn = sqlite3.connect(
                str(self.path),
                check_same_thread=False,
                isolation_level=None,
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute("PRAGMA journal_mode = WAL")
            _create_schema(conn)
        except sqlite3.Error as e:
            logger.exception("database.open_failed", path=str(self.path))
            raise StorageError("Could not open database") from e

        self._conn = conn
        logger.info("database.opened", path=str(self.path))
        return self

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None
        logger.info("database.closed", path=str(self.path))

    def __enter__(self) -> Database:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Write scope: BEGIN IMMEDIATE, commit on success, rollback on error."""
        with self._scope("BEGIN IMMEDIATE") as conn:
            yield conn

    @contextmanager
    def snapshot(self) -> Generator[sqlite3.Connection, None, None]:
        """Read scope giving several SELECTs one consistent view."""
        with self._scope("BEGIN DEFERRED") as conn:
            yield conn

    @contextmanager
    def _scope(self, begin: str) -> Generator[sqlite3.Connection, None, None]:
        with self._lock:
            if self._conn is None:
                raise StorageError("Database is not open")
            conn = self._conn

            try:
                conn.execute(begin)
            except sqlite3.Error as e:
                logger.exception("database.begin_failed")
                raise StorageError("Database operation failed") from e

            try:
                yield conn
            except sqlite3.Error as e:
                conn.rollback()
                logger.exception("database.rolled_back")
                raise StorageError("Database operation failed") from e
            except BaseException:
                conn.rollback()
                raise

            try:
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                logger.exception("database.commit_failed")
                raise StorageError("Database operation failed") from e


@contextmanager
def open_database(path: Path | str) -> Generator[Database, None, None]:
    """Open a Database for the duration of a block and always close it."""
    db = Database(path).open()
    try:
        yield db
    finally:
        db.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency. User ids and the attempt's test id
    are plain columns: attempts may reference tests that do not exist.
    """
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT UNIQUE NOT NULL,
            password TEXT NOT NULL,
            role TEXT NOT NULL CHECK(role IN ('teacher', 'student')),
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
        );

        CREATE TABLE IF NOT EXISTS subjects (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT,
            teacher_id TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
        );

        CREATE TABLE IF NOT EXISTS chapters (
            id TEXT PRIMARY KEY,
            subject_id TEXT NOT NULL REFERENCES subjects(id),
            name TEXT NOT NULL,
            description TEXT,
            order_index INTEGER NOT NULL,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
        );

        CREATE TABLE IF NOT EXISTS questions (
            id TEXT PRIMARY KEY,
            chapter_id TEXT NOT NULL REFERENCES chapters(id),
            question_text TEXT NOT NULL,
            question_type TEXT NOT NULL CHECK(question_type IN ('mcq', 'short_answer', 'essay')),
            marks INTEGER NOT NULL DEFAULT 1 CHECK(marks >= 1),
            correct_answer TEXT NOT NULL,
            explanation TEXT,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
        );

        CREATE TABLE IF NOT EXISTS options (
            id TEXT PRIMARY KEY,
            question_id TEXT NOT NULL REFERENCES questions(id),
            option_text TEXT NOT NULL,
            order_index INTEGER NOT NULL,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
        );

        CREATE TABLE IF NOT EXISTS tests (
            id TEXT PRIMARY KEY,
            teacher_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT,
            duration_minutes INTEGER NOT NULL CHECK(duration_minutes > 0),
            total_marks INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
        );

        -- A question appears at most once per test
        CREATE TABLE IF NOT EXISTS test_questions (
            id TEXT PRIMARY KEY,
            test_id TEXT NOT NULL REFERENCES tests(id),
            question_id TEXT NOT NULL REFERENCES questions(id),
            order_index INTEGER NOT NULL,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now')),
            UNIQUE(test_id, question_id)
        );

        CREATE TABLE IF NOT EXISTS student_attempts (
            id TEXT PRIMARY KEY,
            test_id TEXT NOT NULL,
            student_id TEXT NOT NULL,
            started_at TEXT NOT NULL,
            submitted_at TEXT,
            total_marks INTEGER NOT NULL DEFAULT 0,
            obtained_marks INTEGER NOT NULL DEFAULT 0,
            status TEXT NOT NULL CHECK(status IN ('in_progress', 'submitted', 'graded')),
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
        );

        CREATE TABLE IF NOT EXISTS student_answers (
            id TEXT PRIMARY KEY,
            attempt_id TEXT NOT NULL REFERENCES student_attempts(id),
            question_id TEXT NOT NULL REFERENCES questions(id),
            student_answer TEXT NOT NULL,
            is_correct INTEGER,
            marks_obtained INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
        );

        -- Indexes
        CREATE INDEX IF NOT EXISTS idx_subjects_teacher ON subjects(teacher_id);
        CREATE INDEX IF NOT EXISTS idx_chapters_subject ON chapters(subject_id);
        CREATE INDEX IF NOT EXISTS idx_questions_chapter ON questions(chapter_id);
        CREATE INDEX IF NOT EXISTS idx_options_question ON options(question_id);
        CREATE INDEX IF NOT EXISTS idx_tests_teacher ON tests(teacher_id);
        CREATE INDEX IF NOT EXISTS idx_test_questions_test ON test_questions(test_id);
        CREATE INDEX IF NOT EXISTS idx_attempts_student ON student_attempts(student_id);
        CREATE INDEX IF NOT EXISTS idx_answers_attempt ON student_answers(attempt_id, question_id);
        """
    )
