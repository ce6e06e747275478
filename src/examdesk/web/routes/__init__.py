"""Route handlers for Web API."""

from examdesk.web.routes.health import router as health_router
from examdesk.web.routes.auth import router as auth_router
from examdesk.web.routes.subjects import router as subjects_router
from examdesk.web.routes.chapters import router as chapters_router
from examdesk.web.routes.questions import router as questions_router
from examdesk.web.routes.tests import router as tests_router
from examdesk.web.routes.attempts import router as attempts_router
from examdesk.web.routes.results import router as results_router

__all__ = [
    "health_router",
    "auth_router",
    "subjects_router",
    "chapters_router",
    "questions_router",
    "tests_router",
    "attempts_router",
    "results_router",
]
