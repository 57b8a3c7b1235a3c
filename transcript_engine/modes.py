"""Capture mode tag shared by sources, the probe and the session."""

from enum import Enum


class CaptureMode(Enum):
    """Where recognition events come from."""

    LIVE = "live"
    FILE_UPLOAD = "file_upload"
