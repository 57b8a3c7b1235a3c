"""
Export Adapter

Turns the current transcript into a downloadable text artifact.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .config.settings import EXPORT_FILENAME
from .errors import EmptyTranscript

logger = logging.getLogger(__name__)

EXPORT_MIME_TYPE = "text/plain"


class TextSnapshotSource(Protocol):
    def snapshot_text(self) -> str: ...


@dataclass(frozen=True)
class ExportArtifact:
    """A transcript ready to hand to the user."""

    filename: str
    mime_type: str
    data: str

    def encode(self, encoding: str = "utf-8") -> bytes:
        return self.data.encode(encoding)


def export_snapshot(source: TextSnapshotSource, filename: str = EXPORT_FILENAME) -> ExportArtifact:
    """
    Capture the transcript text as it is right now.

    Args:
        source: SessionController, SessionSnapshot or SegmentStore
        filename: Name for the downloaded file

    Raises:
        EmptyTranscript: nothing has been transcribed yet
    """
    text = source.snapshot_text()
    if not text:
        raise EmptyTranscript("Nothing to export: transcript is empty")
    return ExportArtifact(filename=filename, mime_type=EXPORT_MIME_TYPE, data=text)


def save_artifact(artifact: ExportArtifact, directory: str | Path, overwrite: bool = False) -> Path:
    """
    Write an artifact into directory and return the file path.

    Raises:
        FileExistsError: the file exists and overwrite is False
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / artifact.filename
    if path.exists() and not overwrite:
        raise FileExistsError(f"Export target already exists: {path}")

    path.write_bytes(artifact.encode())
    logger.info(f"Transcript exported: {path} ({len(artifact.data)} chars)")
    return path
