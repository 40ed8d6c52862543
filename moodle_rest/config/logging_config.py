"""Logging configuration using Loguru.

The library itself only emits records; it stays disabled until an
application calls :func:`configure_logging` (or ``logger.enable``).
``configure_logging`` removes the default Loguru handler, adds a console
sink and, when ``MOODLE_LOG_FILE`` is set, a rotating file sink.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


class LoggingConfig(BaseSettings):
    """Log sink settings read from ``MOODLE_LOG_LEVEL`` and ``MOODLE_LOG_FILE``."""

    level: str = Field("INFO")
    file: Optional[str] = Field(None)

    model_config = SettingsConfigDict(env_prefix="MOODLE_LOG_", env_file=".env", extra="ignore")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("MOODLE_LOG_LEVEL must be a valid Loguru level")
        return level


@lru_cache()
def get_logging_config() -> LoggingConfig:
    """Return a cached logging configuration instance."""

    return LoggingConfig()


def configure_logging(config: LoggingConfig | None = None, level: str | None = None) -> None:
    """Install Loguru sinks and enable the ``moodle_rest`` records.

    Parameters
    ----------
    config: LoggingConfig, optional
        Sink settings; loaded from the environment when omitted.
    level: str, optional
        Overrides ``config.level``, e.g. ``"TRACE"`` for ``-vv`` on the CLI.
    """
    config = config or get_logging_config()
    sink_level = (level or config.level).upper()

    logger.remove()
    logger.add(sys.stderr, level=sink_level, format=LOG_FORMAT, colorize=True, backtrace=True)

    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            config.file,
            level=sink_level,
            format=LOG_FORMAT,
            rotation="10 MB",
            retention="10 days",
            compression="zip",
            enqueue=True,
        )

    logger.enable("moodle_rest")
    logger.debug("Logging configured at level {}", sink_level)
