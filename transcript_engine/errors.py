"""
Error kinds raised by the transcript engine.

start() raises these synchronously; mid-session failures are reported
through the FAILED session state with the error attached.
"""


class TranscriptEngineError(Exception):
    """Base class for all engine errors."""


class UnsupportedCapability(TranscriptEngineError):
    """Live recognition is not available in this environment."""


class InvalidInput(TranscriptEngineError):
    """The capture source was started without usable input (e.g. no file)."""


class StartError(TranscriptEngineError):
    """The capture source failed to initialize."""


class NetworkError(TranscriptEngineError):
    """Transport failure or non-2xx response from the transcription service."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StreamReadError(TranscriptEngineError):
    """Reading the response stream or recognizer results failed."""


class EmptyTranscript(TranscriptEngineError):
    """Export attempted while the transcript is empty."""


__all__ = [
    "EmptyTranscript",
    "InvalidInput",
    "NetworkError",
    "StartError",
    "StreamReadError",
    "TranscriptEngineError",
    "UnsupportedCapability",
]
