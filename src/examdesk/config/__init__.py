"""Configuration package for examdesk."""

from examdesk.config.app_config import (
    AppConfig,
    AttemptsConfig,
    DatabaseConfig,
    ResultsConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "AttemptsConfig",
    "DatabaseConfig",
    "ResultsConfig",
    "clear_config_cache",
    "load_app_config",
]
