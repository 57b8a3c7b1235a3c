"""
Engine configuration.

Values come from environment variables so the same code runs locally and in
Docker. EngineConfig bundles them for code that wants explicit settings.
"""

import os
from dataclasses import dataclass

# Remote transcription service (file upload)
TRANSCRIPTION_URL = os.getenv("TRANSCRIPTION_URL", "http://localhost:8000")
TRANSCRIBE_ENDPOINT = os.getenv("TRANSCRIBE_ENDPOINT", "/api/transcribe")
TRANSCRIPTION_TIMEOUT = float(os.getenv("TRANSCRIPTION_TIMEOUT", "300.0"))

# On-device recognizer (live)
RECOGNIZER_HOST = os.getenv("RECOGNIZER_HOST", "localhost")
RECOGNIZER_PORT = int(os.getenv("RECOGNIZER_PORT", "8001"))
RECOGNIZER_ENDPOINT = os.getenv("RECOGNIZER_ENDPOINT", "/stream")
RECOGNIZER_CHUNK_MS = int(os.getenv("RECOGNIZER_CHUNK_MS", "200"))

# Streaming progress heuristic: +STEP per chunk, never above CAP until done
PROGRESS_STEP = int(os.getenv("PROGRESS_STEP", "10"))
PROGRESS_CAP = int(os.getenv("PROGRESS_CAP", "99"))

EXPORT_FILENAME = os.getenv("EXPORT_FILENAME", "transcription.txt")


@dataclass
class EngineConfig:
    """Settings for one SessionController."""

    transcription_url: str = TRANSCRIPTION_URL
    transcribe_endpoint: str = TRANSCRIBE_ENDPOINT
    transcription_timeout: float = TRANSCRIPTION_TIMEOUT
    recognizer_host: str = RECOGNIZER_HOST
    recognizer_port: int = RECOGNIZER_PORT
    recognizer_endpoint: str = RECOGNIZER_ENDPOINT
    recognizer_chunk_ms: int = RECOGNIZER_CHUNK_MS
    progress_step: int = PROGRESS_STEP
    progress_cap: int = PROGRESS_CAP
    export_filename: str = EXPORT_FILENAME

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from the current environment (re-reads os.environ)."""
        return cls(
            transcription_url=os.getenv("TRANSCRIPTION_URL", "http://localhost:8000"),
            transcribe_endpoint=os.getenv("TRANSCRIBE_ENDPOINT", "/api/transcribe"),
            transcription_timeout=float(os.getenv("TRANSCRIPTION_TIMEOUT", "300.0")),
            recognizer_host=os.getenv("RECOGNIZER_HOST", "localhost"),
            recognizer_port=int(os.getenv("RECOGNIZER_PORT", "8001")),
            recognizer_endpoint=os.getenv("RECOGNIZER_ENDPOINT", "/stream"),
            recognizer_chunk_ms=int(os.getenv("RECOGNIZER_CHUNK_MS", "200")),
            progress_step=int(os.getenv("PROGRESS_STEP", "10")),
            progress_cap=int(os.getenv("PROGRESS_CAP", "99")),
            export_filename=os.getenv("EXPORT_FILENAME", "transcription.txt"),
        )

    @property
    def transcribe_url(self) -> str:
        """Full URL of the upload endpoint."""
        return f"{self.transcription_url.rstrip('/')}{self.transcribe_endpoint}"

    @property
    def recognizer_uri(self) -> str:
        """WebSocket URI of the recognizer."""
        return f"ws://{self.recognizer_host}:{self.recognizer_port}{self.recognizer_endpoint}"
