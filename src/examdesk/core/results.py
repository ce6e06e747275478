"""Results reader.

Joins an attempt with its graded answers and summarizes the score the way
the results page shows it (percentage and pass/fail).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from examdesk.core.errors import NotFoundError
from examdesk.db.attempts_repository import (
    AnswerRecord,
    AttemptRecord,
    get_attempt_by_id,
    list_answers_with_questions,
)
from examdesk.db.database import Database
from examdesk.utils.validators import require_fields

DEFAULT_PASS_PERCENTAGE = 40.0


@dataclass
class ResultsSummary:
    """Score summary for one attempt."""

    total_marks: int
    obtained_marks: int
    percentage: float
    passed: bool
    correct_count: int
    answered_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_marks": self.total_marks,
            "obtained_marks": self.obtained_marks,
            "percentage": self.percentage,
            "passed": self.passed,
            "correct_count": self.correct_count,
            "answered_count": self.answered_count,
        }


@dataclass
class ResultsReport:
    """An attempt with its answers and summary."""

    attempt: AttemptRecord
    answers: list[AnswerRecord] = field(default_factory=list)
    summary: ResultsSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempt": self.attempt.to_dict(),
            "answers": [a.to_dict() for a in self.answers],
            "summary": self.summary.to_dict() if self.summary else None,
        }


def summarize(
    attempt: AttemptRecord,
    answers: list[AnswerRecord],
    pass_percentage: float = DEFAULT_PASS_PERCENTAGE,
) -> ResultsSummary:
    """Compute percentage (one decimal) and pass/fail.

    An attempt with no marks available scores 0.0%.
    """
    if attempt.total_marks > 0:
        percentage = round(attempt.obtained_marks / attempt.total_marks * 100, 1)
    else:
        percentage = 0.0

    return ResultsSummary(
        total_marks=attempt.total_marks,
        obtained_marks=attempt.obtained_marks,
        percentage=percentage,
        passed=percentage >= pass_percentage,
        correct_count=sum(1 for a in answers if a.is_correct),
        answered_count=sum(1 for a in answers if a.student_answer.strip()),
    )


def get_results(
    db: Database,
    attempt_id: str | None,
    pass_percentage: float = DEFAULT_PASS_PERCENTAGE,
) -> ResultsReport:
    """Load an attempt with its answers. Pure read.

    Raises:
        ValidationError: If attempt_id is missing
        NotFoundError: If the attempt does not exist
    """
    require_fields("Attempt ID required", attempt_id=attempt_id)

    with db.snapshot() as conn:
        attempt = get_attempt_by_id(conn, attempt_id)
        if attempt is None:
            raise NotFoundError("Attempt not found")
        answers = list_answers_with_questions(conn, attempt_id)

    return ResultsReport(
        attempt=attempt,
        answers=answers,
        summary=summarize(attempt, answers, pass_percentage),
    )
