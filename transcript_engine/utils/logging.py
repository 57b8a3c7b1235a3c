"""
Logging helpers for the transcript engine.

Modules log through logging.getLogger(__name__); hosts call setup_logging()
once at startup to route everything under "transcript_engine" to stdout.
"""

import logging
import os
import sys
from typing import Literal

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Root of the engine's logger hierarchy
ENGINE_LOGGER = "transcript_engine"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logging(
    name: str | None = ENGINE_LOGGER,
    level: LogLevel | None = None,
    format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Configure logging and return the engine logger.

    Args:
        name: Logger name. Defaults to the engine root; None for the root logger.
        level: Log level. Defaults to the LOG_LEVEL env var or INFO.
        format: Log format string.

    Returns:
        Configured logger instance.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()

    log_level = getattr(logging, level, logging.INFO)

    logging.basicConfig(level=log_level, format=format, stream=sys.stdout)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger by name. Assumes setup_logging() ran at startup."""
    return logging.getLogger(name)


def set_log_level(level: LogLevel, name: str | None = ENGINE_LOGGER) -> None:
    """Change the engine log level at runtime."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.getLogger(name).setLevel(log_level)


def preview(text: str, limit: int = 50) -> str:
    """Shorten transcript text for log lines."""
    return text if len(text) <= limit else f"{text[:limit]}..."
