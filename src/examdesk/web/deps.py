"""Request dependencies: the app's Database and configuration."""

from fastapi import Request

from examdesk.config.app_config import AppConfig
from examdesk.db.database import Database


def get_database(request: Request) -> Database:
    """Database opened by the application lifespan."""
    return request.app.state.db


def get_config(request: Request) -> AppConfig:
    return request.app.state.config
