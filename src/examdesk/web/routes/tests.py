"""Test endpoints.

GET /tests?testId=... returns one test with its questions;
GET /tests?teacherId=... lists a teacher's tests.
"""

from fastapi import APIRouter, Depends, Query, status

from examdesk.core.assembler import create_test, get_test, list_tests
from examdesk.db.database import Database
from examdesk.web.deps import get_database
from examdesk.web.schemas import TestCreate, TestDetailResponse, TestResponse

router = APIRouter(prefix="/tests", tags=["tests"])


@router.get("", response_model=TestDetailResponse | list[TestResponse])
def get_tests(
    test_id: str | None = Query(default=None, alias="testId"),
    teacher_id: str | None = Query(default=None, alias="teacherId"),
    db: Database = Depends(get_database),
) -> TestDetailResponse | list[TestResponse]:
    """Fetch one test (testId wins) or list a teacher's tests."""
    if test_id:
        return TestDetailResponse.model_validate(get_test(db, test_id))

    tests = list_tests(db, teacher_id)
    return [TestResponse.model_validate(t) for t in tests]


@router.post("", response_model=TestResponse, status_code=status.HTTP_201_CREATED)
def post_test(body: TestCreate, db: Database = Depends(get_database)) -> TestResponse:
    """Create a test from an ordered list of questions."""
    test = create_test(
        db,
        teacher_id=body.teacher_id,
        title=body.title,
        duration_minutes=body.duration_minutes,
        question_ids=body.question_ids,
        description=body.description,
    )
    return TestResponse.model_validate(test)
