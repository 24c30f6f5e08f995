# exercise_tracker/config.py

import logging
import os
from dataclasses import dataclass, field


def env(key: str, default: str) -> str:
    """Fetch an env var with a default, treat empty as missing."""
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


@dataclass
class Settings:
    database_url: str = field(
        default_factory=lambda: env("DATABASE_URL", "sqlite:///exercise-tracker.sqlite")
    )
    host: str = field(default_factory=lambda: env("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(env("PORT", "3000")))
    timezone: str = field(default_factory=lambda: env("TIMEZONE", "UTC"))
    log_level: str = field(default_factory=lambda: env("LOG_LEVEL", "INFO").upper())


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
