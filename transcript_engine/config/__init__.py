"""
Engine Configuration Module

Environment-driven settings for the transcription service and recognizer.
"""

from .settings import (
    EXPORT_FILENAME,
    PROGRESS_CAP,
    PROGRESS_STEP,
    RECOGNIZER_HOST,
    RECOGNIZER_PORT,
    TRANSCRIPTION_URL,
    EngineConfig,
)

__all__ = [
    "EXPORT_FILENAME",
    "PROGRESS_CAP",
    "PROGRESS_STEP",
    "RECOGNIZER_HOST",
    "RECOGNIZER_PORT",
    "TRANSCRIPTION_URL",
    "EngineConfig",
]
