"""Chapter endpoints."""

from fastapi import APIRouter, Depends, Query, status

from examdesk.core.content import create_chapter, list_chapters
from examdesk.db.database import Database
from examdesk.web.deps import get_database
from examdesk.web.schemas import ChapterCreate, ChapterResponse

router = APIRouter(prefix="/chapters", tags=["chapters"])


@router.get("", response_model=list[ChapterResponse])
def get_chapters(
    subject_id: str | None = Query(default=None, alias="subjectId"),
    db: Database = Depends(get_database),
) -> list[ChapterResponse]:
    """List a subject's chapters in order."""
    chapters = list_chapters(db, subject_id)
    return [ChapterResponse.model_validate(c) for c in chapters]


@router.post("", response_model=ChapterResponse, status_code=status.HTTP_201_CREATED)
def post_chapter(body: ChapterCreate, db: Database = Depends(get_database)) -> ChapterResponse:
    """Append a chapter to a subject."""
    chapter = create_chapter(db, body.subject_id, body.name, body.description)
    return ChapterResponse.model_validate(chapter)
