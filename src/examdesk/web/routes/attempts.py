"""Attempt endpoints: open, submit (grades immediately) and inspect."""

from fastapi import APIRouter, Depends, Query, status

from examdesk.config.app_config import AppConfig
from examdesk.core.errors import ValidationError
from examdesk.core.grading import (
    SubmittedAnswer,
    describe_attempt,
    list_attempts,
    start_attempt,
    submit_attempt,
)
from examdesk.db.database import Database
from examdesk.web.deps import get_config, get_database
from examdesk.web.schemas import (
    AttemptResponse,
    AttemptStartRequest,
    AttemptStartResponse,
    AttemptStatusResponse,
    AttemptSubmitRequest,
    AttemptSubmitResponse,
)

router = APIRouter(prefix="/attempts", tags=["attempts"])


@router.post("", response_model=AttemptStartResponse, status_code=status.HTTP_201_CREATED)
def post_attempt(
    body: AttemptStartRequest,
    db: Database = Depends(get_database),
) -> AttemptStartResponse:
    """Open an attempt for a student on a test."""
    attempt = start_attempt(db, body.test_id, body.student_id)
    return AttemptStartResponse(attempt_id=attempt.id)


@router.put("", response_model=AttemptSubmitResponse)
def put_attempt(
    body: AttemptSubmitRequest,
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
) -> AttemptSubmitResponse:
    """Submit answers and grade the attempt."""
    answers = None
    if body.answers is not None:
        answers = [
            SubmittedAnswer(
                question_id=a.question_id or "",
                answer=a.answer if a.answer is not None else "",
            )
            for a in body.answers
        ]

    result = submit_attempt(
        db,
        body.attempt_id,
        answers,
        enforce_duration=config.attempts.enforce_duration,
        grace_seconds=config.attempts.grace_seconds,
    )
    return AttemptSubmitResponse(attempt_id=result.attempt_id, obtained_marks=result.obtained_marks)


@router.get("", response_model=AttemptStatusResponse | list[AttemptResponse])
def get_attempts(
    attempt_id: str | None = Query(default=None, alias="attemptId"),
    student_id: str | None = Query(default=None, alias="studentId"),
    db: Database = Depends(get_database),
) -> AttemptStatusResponse | list[AttemptResponse]:
    """One attempt with its clock (attemptId wins) or a student's attempts."""
    if attempt_id:
        return AttemptStatusResponse.model_validate(describe_attempt(db, attempt_id))

    if not student_id:
        raise ValidationError("Attempt ID or Student ID required")

    return [AttemptResponse.model_validate(a) for a in list_attempts(db, student_id)]
