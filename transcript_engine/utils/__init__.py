"""Utility helpers for the transcript engine."""

from .logging import get_logger, preview, set_log_level, setup_logging

__all__ = ["get_logger", "preview", "set_log_level", "setup_logging"]
