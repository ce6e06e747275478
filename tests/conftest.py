"""Pytest configuration for phased testing.

Tests are organized by phase:
- f1: store, configuration, identity and content hierarchy
- f2: test assembly, attempts, grading and results
- f3: Web API and CLI

Tests for phases beyond CURRENT_PHASE are skipped.
"""

from datetime import datetime, timezone

import pytest

from examdesk.config.app_config import clear_config_cache
from examdesk.core.assembler import create_test
from examdesk.core.content import create_chapter, create_question, create_subject
from examdesk.db.database import Database

# Current implementation phase
CURRENT_PHASE = 3


def pytest_collection_modifyitems(config, items):
    """Skip tests from phases that haven't been implemented yet."""
    for item in items:
        # Extract phase from path (tests/f2/... -> 2)
        parts = item.fspath.strpath.split("/")
        for part in parts:
            if part.startswith("f") and part[1:].isdigit():
                test_phase = int(part[1:])
                if test_phase > CURRENT_PHASE:
                    item.add_marker(
                        pytest.mark.skip(
                            reason=f"Phase F{test_phase} not yet implemented (current: F{CURRENT_PHASE})"
                        )
                    )
                break


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Never read the developer's config file or database."""
    monkeypatch.setenv("EXAMDESK_CONFIG", str(tmp_path / "missing-config.yaml"))
    monkeypatch.setenv("EXAMDESK_DB_PATH", str(tmp_path / "default" / "examdesk.db"))
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "db" / "examdesk.db"


@pytest.fixture
def db(db_path):
    """Open database in a temporary directory."""
    with Database(db_path) as database:
        yield database


@pytest.fixture
def started_at():
    """Fixed attempt start time."""
    return datetime(2025, 3, 10, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def math_content(db):
    """Math subject with Algebra and Geometry chapters and one mcq question.

    The question is worth 5 marks, options A, B, C, correct answer "B".
    """
    subject = create_subject(db, "Math", "teach_t1", "Numbers and shapes")
    algebra = create_chapter(db, subject.id, "Algebra")
    geometry = create_chapter(db, subject.id, "Geometry")
    question = create_question(
        db,
        chapter_id=algebra.id,
        question_text="Which letter comes second?",
        question_type="mcq",
        correct_answer="B",
        marks=5,
        options=["A", "B", "C"],
    )
    return {
        "subject": subject,
        "algebra": algebra,
        "geometry": geometry,
        "question": question,
    }


@pytest.fixture
def math_test(db, math_content):
    """30-minute test containing the single mcq question."""
    return create_test(
        db,
        teacher_id="teach_t1",
        title="Algebra quiz",
        duration_minutes=30,
        question_ids=[math_content["question"].id],
    )


@pytest.fixture
def mixed_content(db, math_content):
    """Three more questions of every type in the Algebra chapter.

    Returns the questions in creation order:
    mcq (5 marks), short_answer (2 marks), essay (3 marks), short_answer (1 mark).
    """
    chapter_id = math_content["algebra"].id
    short = create_question(
        db,
        chapter_id=chapter_id,
        question_text="What is 2 + 2?",
        question_type="short_answer",
        correct_answer="4",
        marks=2,
    )
    essay = create_question(
        db,
        chapter_id=chapter_id,
        question_text="Define a variable.",
        question_type="essay",
        correct_answer="A symbol that stands for a value",
        marks=3,
        explanation="Variables name unknown quantities.",
    )
    default_marks = create_question(
        db,
        chapter_id=chapter_id,
        question_text="Solve x + 1 = 3",
        question_type="short_answer",
        correct_answer="x = 2",
    )
    return [math_content["question"], short, essay, default_marks]


@pytest.fixture
def mixed_test(db, mixed_content):
    """Test over all mixed_content questions; total 11 marks."""
    return create_test(
        db,
        teacher_id="teach_t1",
        title="Mixed quiz",
        duration_minutes=45,
        question_ids=[q.id for q in mixed_content],
        description="Every question type",
    )
