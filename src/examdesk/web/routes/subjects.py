"""Subject endpoints."""

from fastapi import APIRouter, Depends, Query, status

from examdesk.core.content import create_subject, list_subjects
from examdesk.db.database import Database
from examdesk.web.deps import get_database
from examdesk.web.schemas import SubjectCreate, SubjectResponse

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.get("", response_model=list[SubjectResponse])
def get_subjects(
    teacher_id: str | None = Query(default=None, alias="teacherId"),
    db: Database = Depends(get_database),
) -> list[SubjectResponse]:
    """List a teacher's subjects, newest first."""
    subjects = list_subjects(db, teacher_id)
    return [SubjectResponse.model_validate(s) for s in subjects]


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
def post_subject(body: SubjectCreate, db: Database = Depends(get_database)) -> SubjectResponse:
    """Create a subject."""
    subject = create_subject(db, body.name, body.teacher_id, body.description)
    return SubjectResponse.model_validate(subject)
