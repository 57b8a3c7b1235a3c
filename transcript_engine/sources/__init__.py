"""Capture sources: live recognizer and file upload."""

from ..client.transcription_client import UploadedFile
from .base import CaptureMode, CaptureSource
from .live import LiveSource, Recognizer
from .upload import ACCEPTED_MIME_PREFIXES, FileUploadSource, ProgressPolicy, validate_upload

__all__ = [
    "ACCEPTED_MIME_PREFIXES",
    "CaptureMode",
    "CaptureSource",
    "FileUploadSource",
    "LiveSource",
    "ProgressPolicy",
    "Recognizer",
    "UploadedFile",
    "validate_upload",
]
