"""FastAPI application factory.

Main entry point for the examdesk Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from examdesk import __version__
from examdesk.config.app_config import AppConfig, load_app_config
from examdesk.db.database import Database
from examdesk.web.errors import install_error_handlers
from examdesk.web.routes import (
    attempts_router,
    auth_router,
    chapters_router,
    health_router,
    questions_router,
    results_router,
    subjects_router,
    tests_router,
)

logger = structlog.get_logger(__name__)


def create_app(
    config: AppConfig | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings; loaded from config/examdesk.yaml when omitted
        database: Already-open Database to serve from. When omitted the
            lifespan opens one at config.database.path and closes it on
            shutdown.

    Returns:
        Configured FastAPI app instance
    """
    config = config or load_app_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Own the Database for the lifetime of the app unless one was injected."""
        owned = database is None
        db = Database(config.database.path) if owned else database
        if owned:
            db.open()

        app.state.db = db
        logger.info(
            "api_startup",
            db_path=str(db.path),
            enforce_duration=config.attempts.enforce_duration,
        )
        try:
            yield
        finally:
            if owned:
                db.close()
            logger.info("api_shutdown")

    app = FastAPI(
        title="examdesk API",
        description="Test authoring and auto-graded test taking",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config
    if database is not None:
        app.state.db = database

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(subjects_router)
    app.include_router(chapters_router)
    app.include_router(questions_router)
    app.include_router(tests_router)
    app.include_router(attempts_router)
    app.include_router(results_router)

    return app
