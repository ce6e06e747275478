"""Question endpoints."""

from fastapi import APIRouter, Depends, Query, status

from examdesk.core.content import create_question, list_questions
from examdesk.db.database import Database
from examdesk.web.deps import get_database
from examdesk.web.schemas import QuestionCreate, QuestionResponse

router = APIRouter(prefix="/questions", tags=["questions"])


@router.get("", response_model=list[QuestionResponse])
def get_questions(
    chapter_id: str | None = Query(default=None, alias="chapterId"),
    db: Database = Depends(get_database),
) -> list[QuestionResponse]:
    """List a chapter's questions with options, newest first."""
    questions = list_questions(db, chapter_id)
    return [QuestionResponse.model_validate(q) for q in questions]


@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
def post_question(body: QuestionCreate, db: Database = Depends(get_database)) -> QuestionResponse:
    """Create a question, with options for mcq."""
    question = create_question(
        db,
        chapter_id=body.chapter_id,
        question_text=body.question_text,
        question_type=body.question_type,
        correct_answer=body.correct_answer,
        marks=body.marks,
        explanation=body.explanation,
        options=body.options,
    )
    return QuestionResponse.model_validate(question)
