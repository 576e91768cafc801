"""Configuration for eventcraft.

Settings live in ~/.eventcraft/config.json (the directory can be moved with
EVENTCRAFT_HOME). Environment variables override the file:

    EVENTCRAFT_DATA_FILE    JSON snapshot the store persists to
    EVENTCRAFT_LOG_LEVEL    DEBUG, INFO, WARNING, ...
    EVENTCRAFT_WEBHOOK_URL  Also POST domain events to this URL
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, field_validator

from eventcraft.domain.shared import Err, Ok, Result
from eventcraft.infrastructure.notifications import (
    CompositeDispatcher,
    LoggingDispatcher,
    NotificationDispatcher,
    WebhookDispatcher,
)
from eventcraft.infrastructure.storage import Database

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """User settings."""

    data_file: Optional[Path] = None
    log_level: str = "WARNING"
    webhook_url: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value}")
        return value


def get_config_dir() -> Path:
    """Get the eventcraft config directory."""
    home = os.environ.get("EVENTCRAFT_HOME")
    config_dir = Path(home) if home else Path.home() / ".eventcraft"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def load_settings() -> Settings:
    """Load settings from the config file, then apply env overrides."""
    data: dict = {}
    config_file = get_config_dir() / "config.json"
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable {config_file}: {e}")

    overrides = {
        "data_file": os.environ.get("EVENTCRAFT_DATA_FILE"),
        "log_level": os.environ.get("EVENTCRAFT_LOG_LEVEL"),
        "webhook_url": os.environ.get("EVENTCRAFT_WEBHOOK_URL"),
    }
    data.update({key: value for key, value in overrides.items() if value})
    return Settings(**data)


def save_settings(settings: Settings) -> None:
    """Save settings to the config file."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(settings.model_dump(mode="json"), indent=2),
        encoding="utf-8",
    )


def configure_logging(level: str = "WARNING") -> None:
    """Send eventcraft logs to stderr at ``level``.

    Safe to call more than once; the handler is installed only once.
    """
    package_logger = logging.getLogger("eventcraft")
    package_logger.setLevel(level.upper())
    if not any(getattr(h, "_eventcraft", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._eventcraft = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)


def open_database(settings: Settings) -> Result[Database, str]:
    """Open the store described by ``settings``.

    Without a data file the store is in-memory only.
    """
    if settings.data_file is None:
        return Ok(Database())
    result = Database.open(settings.data_file)
    if isinstance(result, Err):
        logger.error(result.error)
    return result


def build_dispatcher(settings: Settings) -> NotificationDispatcher:
    """Logging dispatcher, plus a webhook when one is configured."""
    if settings.webhook_url:
        return CompositeDispatcher([LoggingDispatcher(), WebhookDispatcher(settings.webhook_url)])
    return LoggingDispatcher()
