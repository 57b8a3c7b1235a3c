"""File upload capture source backed by the remote transcription service."""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

from ..client.result import SegmentEvent, SourceCompleted, SourceEvent, SourceFailed
from ..client.transcription_client import TranscriptionClient, UploadedFile
from ..errors import InvalidInput, NetworkError, StreamReadError
from .base import CaptureMode, CaptureSource

logger = logging.getLogger(__name__)

# Services accept audio, and video containers for their audio track
ACCEPTED_MIME_PREFIXES = ("audio/", "video/")


@dataclass(frozen=True)
class ProgressPolicy:
    """
    Progress estimate for streamed responses.

    The service gives no length signal, so each chunk advances progress by
    `step`, never past `cap` until the stream ends.
    """

    step: int = 10
    cap: int = 99

    def __post_init__(self):
        if self.step < 0:
            raise ValueError(f"step must be >= 0, got {self.step}")
        if not 0 <= self.cap <= 100:
            raise ValueError(f"cap must be within [0, 100], got {self.cap}")

    def advance(self, current: int) -> int:
        return min(current + self.step, self.cap)


def validate_upload(file: UploadedFile | None) -> UploadedFile:
    """
    Check the selected file before anything is sent.

    Raises:
        InvalidInput: no file, empty file or non-audio mime type
    """
    if file is None:
        raise InvalidInput("No file selected")
    if file.byte_size <= 0:
        raise InvalidInput(f"File is empty: {file.name}")
    if not file.mime_type.lower().startswith(ACCEPTED_MIME_PREFIXES):
        raise InvalidInput(f"Not an audio file: {file.name} ({file.mime_type})")
    return file


class FileUploadSource(CaptureSource):
    """
    Transcribe a recorded file through the transcription service.

    Streaming responses: chunk k becomes an interim segment at index k,
    except the last chunk, which is final. Single-shot JSON responses become
    one final segment at index 0.
    """

    def __init__(
        self,
        file: UploadedFile | None,
        client: TranscriptionClient,
        policy: ProgressPolicy | None = None,
    ):
        super().__init__()
        self.file = file
        self.client = client
        self.policy = policy or ProgressPolicy()
        self._stopped = False

    @property
    def mode(self) -> CaptureMode:
        return CaptureMode.FILE_UPLOAD

    @property
    def source_name(self) -> str:
        return f"File ({self.file.name})" if self.file else "File (none)"

    async def start(self) -> None:
        validate_upload(self.file)
        self.running = True

    async def events(self) -> AsyncIterator[SourceEvent]:
        if not self.running or self._stopped:
            return

        try:
            async with self.client.transcribe(self.file) as response:
                if response.is_single_shot:
                    text = await response.read_text()
                    yield SegmentEvent.committed(0, text, progress=100)
                else:
                    async for event in self._stream_events(response.chunks()):
                        yield event
            logger.info(f"Transcription complete: {self.file.name}")
            yield SourceCompleted()
        except (NetworkError, StreamReadError) as e:
            logger.error(f"Transcription error: {e}")
            if not self._stopped:
                yield SourceFailed(e)
        finally:
            self.running = False

    async def _stream_events(self, chunks: AsyncIterator[str]) -> AsyncIterator[SegmentEvent]:
        # Hold one chunk back: only end-of-stream tells us which one is last
        progress = 0
        index = 0
        pending: str | None = None
        try:
            async for chunk in chunks:
                if pending is not None:
                    progress = self.policy.advance(progress)
                    yield SegmentEvent.interim(index, pending, progress=progress)
                    index += 1
                pending = chunk
        except StreamReadError:
            # The held chunk was read before the failure; keep it
            if pending is not None and not self._stopped:
                progress = self.policy.advance(progress)
                yield SegmentEvent.interim(index, pending, progress=progress)
            raise

        if pending is not None:
            yield SegmentEvent.committed(index, pending, progress=100)

    async def stop(self) -> None:
        self._stopped = True
        self.running = False
