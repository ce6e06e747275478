"""Fixtures for Web API and CLI tests (F3)."""

import pytest
from fastapi.testclient import TestClient

from examdesk.config.app_config import AppConfig, AttemptsConfig, DatabaseConfig
from examdesk.web.api import create_app


@pytest.fixture
def app_config(db_path):
    return AppConfig(database=DatabaseConfig(path=db_path))


@pytest.fixture
def client(db, app_config):
    """Test client serving the shared test database."""
    app = create_app(config=app_config, database=db)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def strict_client(db, db_path):
    """Test client that rejects submissions past the time limit."""
    config = AppConfig(
        database=DatabaseConfig(path=db_path),
        attempts=AttemptsConfig(enforce_duration=True, grace_seconds=0),
    )
    app = create_app(config=config, database=db)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def teacher(client):
    """Registered teacher, as returned by the API."""
    response = client.post(
        "/auth/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "s3cret", "role": "teacher"},
    )
    return response.json()


@pytest.fixture
def api_test(client, teacher):
    """Subject, chapter, two questions and a test built through the API.

    Returns a dict with the created ids; the test is worth 7 marks.
    """
    teacher_id = teacher["userId"]
    subject = client.post("/subjects", json={"name": "Math", "teacherId": teacher_id}).json()
    chapter = client.post("/chapters", json={"subjectId": subject["id"], "name": "Algebra"}).json()
    mcq = client.post(
        "/questions",
        json={
            "chapterId": chapter["id"],
            "questionText": "Which letter comes second?",
            "questionType": "mcq",
            "marks": 5,
            "correctAnswer": "B",
            "options": ["A", "B", "C"],
        },
    ).json()
    short = client.post(
        "/questions",
        json={
            "chapterId": chapter["id"],
            "questionText": "What is 2 + 2?",
            "questionType": "short_answer",
            "marks": 2,
            "correctAnswer": "4",
        },
    ).json()
    test = client.post(
        "/tests",
        json={
            "teacherId": teacher_id,
            "title": "Algebra quiz",
            "durationMinutes": 30,
            "questionIds": [mcq["id"], short["id"]],
        },
    ).json()
    return {
        "teacher_id": teacher_id,
        "subject_id": subject["id"],
        "chapter_id": chapter["id"],
        "mcq_id": mcq["id"],
        "short_id": short["id"],
        "test_id": test["id"],
    }
