"""Results endpoint."""

from fastapi import APIRouter, Depends, Query

from examdesk.config.app_config import AppConfig
from examdesk.core.results import get_results
from examdesk.db.database import Database
from examdesk.web.deps import get_config, get_database
from examdesk.web.schemas import ResultsResponse

router = APIRouter(prefix="/results", tags=["results"])


@router.get("", response_model=ResultsResponse)
def get_attempt_results(
    attempt_id: str | None = Query(default=None, alias="attemptId"),
    db: Database = Depends(get_database),
    config: AppConfig = Depends(get_config),
) -> ResultsResponse:
    """Graded attempt with answers and score summary."""
    report = get_results(db, attempt_id, pass_percentage=config.results.pass_percentage)
    return ResultsResponse.model_validate(report, from_attributes=True)
