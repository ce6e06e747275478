"""Pydantic schemas for Web API.

Request bodies use camelCase keys. Entity responses mirror the stored rows
(snake_case); the auth and attempt endpoints answer with camelCase keys.

Request fields are optional at this layer: missing values are reported by
the core modules as 400 ValidationError, not as 422.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from examdesk import __version__


class CamelModel(BaseModel):
    """Base for bodies exchanged with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# AUTH SCHEMAS
# =============================================================================


class RegisterRequest(CamelModel):
    """Request body for registering a user."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None


class LoginRequest(CamelModel):
    """Request body for logging in."""

    email: str | None = None
    password: str | None = None


class UserResponse(CamelModel):
    """Public view of a user."""

    user_id: str
    name: str
    email: str
    role: str


# =============================================================================
# CONTENT SCHEMAS
# =============================================================================


class SubjectCreate(CamelModel):
    """Request body for creating a subject."""

    name: str | None = None
    description: str | None = None
    teacher_id: str | None = None


class SubjectResponse(BaseModel):
    """Response for a subject."""

    id: str
    name: str
    description: str | None
    teacher_id: str
    created_at: str

    model_config = {"from_attributes": True}


class ChapterCreate(CamelModel):
    """Request body for creating a chapter."""

    subject_id: str | None = None
    name: str | None = None
    description: str | None = None


class ChapterResponse(BaseModel):
    """Response for a chapter."""

    id: str
    subject_id: str
    name: str
    description: str | None
    order_index: int
    created_at: str

    model_config = {"from_attributes": True}


class QuestionCreate(CamelModel):
    """Request body for creating a question."""

    chapter_id: str | None = None
    question_text: str | None = None
    question_type: str | None = None
    marks: int | None = None
    correct_answer: str | None = None
    explanation: str | None = None
    options: list[str] | None = None


class OptionResponse(BaseModel):
    """Response for an option."""

    id: str
    option_text: str
    order_index: int

    model_config = {"from_attributes": True}


class QuestionResponse(BaseModel):
    """Response for a question with its options."""

    id: str
    chapter_id: str
    question_text: str
    question_type: str
    marks: int
    correct_answer: str
    explanation: str | None
    created_at: str
    options: list[OptionResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class TestQuestionResponse(QuestionResponse):
    """A question as placed in a test."""

    __test__ = False

    order_index: int


# =============================================================================
# TEST SCHEMAS
# =============================================================================


class TestCreate(CamelModel):
    """Request body for creating a test."""

    __test__ = False

    teacher_id: str | None = None
    title: str | None = None
    description: str | None = None
    duration_minutes: int | None = None
    question_ids: list[str] | None = None


class TestResponse(BaseModel):
    """Summary of a test."""

    __test__ = False

    id: str
    teacher_id: str
    title: str
    description: str | None
    duration_minutes: int
    total_marks: int
    created_at: str

    model_config = {"from_attributes": True}


class TestDetailResponse(TestResponse):
    """A test with its questions in test order."""

    questions: list[TestQuestionResponse]


# =============================================================================
# ATTEMPT SCHEMAS
# =============================================================================


class AttemptStartRequest(CamelModel):
    """Request body for opening an attempt."""

    test_id: str | None = None
    student_id: str | None = None


class AttemptStartResponse(CamelModel):
    """Identifier of the opened attempt."""

    attempt_id: str


class AnswerIn(CamelModel):
    """One submitted answer."""

    question_id: str | None = None
    answer: str | None = None


class AttemptSubmitRequest(CamelModel):
    """Request body for submitting an attempt."""

    attempt_id: str | None = None
    answers: list[AnswerIn] | None = None


class AttemptSubmitResponse(CamelModel):
    """Grading outcome."""

    attempt_id: str
    obtained_marks: int


class AttemptResponse(BaseModel):
    """Response for an attempt."""

    id: str
    test_id: str
    student_id: str
    started_at: str
    submitted_at: str | None
    total_marks: int
    obtained_marks: int
    status: str
    created_at: str

    model_config = {"from_attributes": True}


class AttemptStatusResponse(AttemptResponse):
    """Attempt with the state of its exam clock."""

    duration_minutes: int | None = None
    deadline: str | None = None
    remaining_seconds: int | None = None
    time_remaining: str | None = None
    time_warning: bool = False
    expired: bool = False


# =============================================================================
# RESULTS SCHEMAS
# =============================================================================


class AnswerResponse(BaseModel):
    """A graded answer joined with its question."""

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

    model_config = {"from_attributes": True}


class ResultsSummaryResponse(BaseModel):
    """Score summary."""

    total_marks: int
    obtained_marks: int
    percentage: float
    passed: bool
    correct_count: int
    answered_count: int

    model_config = {"from_attributes": True}


class ResultsResponse(BaseModel):
    """Attempt, answers and summary."""

    attempt: AttemptResponse
    answers: list[AnswerResponse]
    summary: ResultsSummaryResponse

    model_config = {"from_attributes": True}


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = __version__
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
