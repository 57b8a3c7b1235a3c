"""
Transcript Engine

Aggregates live and file-based speech recognition into one transcript:
- client: SegmentStore, event types, transcription and recognizer clients
- sources: LiveSource and FileUploadSource capture sources
- session: SessionController state machine
- export: transcript -> text artifact
- probe: live recognition capability detection

Usage:
    from transcript_engine import CaptureMode, SessionController, UploadedFile, export_snapshot
    from transcript_engine.utils import setup_logging

    setup_logging()
    async with SessionController() as controller:
        await controller.start(CaptureMode.FILE_UPLOAD, UploadedFile.from_path("talk.mp3"))
        await controller.wait_closed()
        artifact = export_snapshot(controller)
"""

from .client import SegmentEvent, SegmentStore, TranscriptSegment, UploadedFile
from .config import EngineConfig
from .errors import (
    EmptyTranscript,
    InvalidInput,
    NetworkError,
    StartError,
    StreamReadError,
    TranscriptEngineError,
    UnsupportedCapability,
)
from .export import ExportArtifact, export_snapshot, save_artifact
from .modes import CaptureMode
from .probe import LiveCapability, available_modes, probe_live_capability
from .session import SessionController, SessionSnapshot, SessionState
from .sources import FileUploadSource, LiveSource, ProgressPolicy
from .utils import setup_logging

__all__ = [
    "CaptureMode",
    "EmptyTranscript",
    "EngineConfig",
    "ExportArtifact",
    "FileUploadSource",
    "InvalidInput",
    "LiveCapability",
    "LiveSource",
    "NetworkError",
    "ProgressPolicy",
    "SegmentEvent",
    "SegmentStore",
    "SessionController",
    "SessionSnapshot",
    "SessionState",
    "StartError",
    "StreamReadError",
    "TranscriptEngineError",
    "TranscriptSegment",
    "UnsupportedCapability",
    "UploadedFile",
    "available_modes",
    "export_snapshot",
    "probe_live_capability",
    "save_artifact",
    "setup_logging",
]

__version__ = "1.0.0"
