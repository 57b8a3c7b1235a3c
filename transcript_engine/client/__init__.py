"""
Transcript Client Module

- SegmentStore: index-keyed segments with interim -> final revision
- SegmentEvent / SourceCompleted / SourceFailed: capture source events
- TranscriptionClient: HTTP upload to the transcription service
- RecognizerClient: WebSocket link to the live recognizer

Usage:
    from transcript_engine.client import SegmentStore

    store = SegmentStore()
    store.on_change = lambda: render(store.snapshot_text())
    store.apply_interim(0, "Hel")
    store.apply_final(0, "Hello.")
"""

from .recognizer import RecognizerClient
from .result import (
    RecognitionResult,
    SegmentEvent,
    SourceCompleted,
    SourceEvent,
    SourceFailed,
    parse_recognizer_message,
)
from .transcript import SegmentStore, TranscriptSegment
from .transcription_client import TranscriptionClient, TranscriptionResponse, UploadedFile

__all__ = [
    "RecognitionResult",
    "RecognizerClient",
    "SegmentEvent",
    "SegmentStore",
    "SourceCompleted",
    "SourceEvent",
    "SourceFailed",
    "TranscriptSegment",
    "TranscriptionClient",
    "TranscriptionResponse",
    "UploadedFile",
    "parse_recognizer_message",
]
