"""Application configuration loader.

Loads configuration from config/examdesk.yaml (or the file named by
EXAMDESK_CONFIG), falling back to built-in defaults.

Usage:
    from examdesk.config.app_config import load_app_config

    config = load_app_config()
    db_path = config.database.path
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("config/examdesk.yaml")
CONFIG_ENV = "EXAMDESK_CONFIG"
DB_PATH_ENV = "EXAMDESK_DB_PATH"


@dataclass
class DatabaseConfig:
    """Location of the SQLite file."""

    path: Path = Path("data/examdesk.db")


@dataclass
class AttemptsConfig:
    """Attempt lifecycle settings."""

    enforce_duration: bool = False
    grace_seconds: int = 30


@dataclass
class ResultsConfig:
    """Result summary settings."""

    pass_percentage: float = 40.0


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    attempts: AttemptsConfig = field(default_factory=AttemptsConfig)
    results: ResultsConfig = field(default_factory=ResultsConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {
            "path": "data/examdesk.db",
        },
        "attempts": {
            "enforce_duration": False,
            "grace_seconds": 30,
        },
        "results": {
            "pass_percentage": 40,
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    db_data = {**defaults["database"], **(data.get("database") or {})}
    attempts_data = {**defaults["attempts"], **(data.get("attempts") or {})}
    results_data = {**defaults["results"], **(data.get("results") or {})}

    db_path = os.environ.get(DB_PATH_ENV) or db_data["path"]

    return AppConfig(
        database=DatabaseConfig(path=Path(db_path)),
        attempts=AttemptsConfig(
            enforce_duration=bool(attempts_data["enforce_duration"]),
            grace_seconds=int(attempts_data["grace_seconds"]),
        ),
        results=ResultsConfig(
            pass_percentage=float(results_data["pass_percentage"]),
        ),
    )


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    config_file = Path(os.environ.get(CONFIG_ENV) or CONFIG_FILE)

    data: dict[str, Any]
    if config_file.exists():
        logger.debug("loading_app_config", source=str(config_file))
        data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
