"""Live capture source backed by the on-device recognizer."""

import logging
from collections.abc import AsyncIterator, Callable
from typing import Protocol

from ..client.result import RecognitionResult, SourceEvent, SourceFailed
from ..errors import StartError, StreamReadError, TranscriptEngineError
from ..probe import LiveCapability, probe_live_capability, require_live_capability
from .base import CaptureMode, CaptureSource

logger = logging.getLogger(__name__)


class Recognizer(Protocol):
    """What LiveSource needs from a continuous recognizer."""

    async def open(self) -> None: ...

    def results(self) -> AsyncIterator[RecognitionResult]: ...

    async def close(self) -> None: ...


class LiveSource(CaptureSource):
    """
    Continuous recognition from the microphone.

    Each recognizer result slot maps to one segment index. Interim results
    for a slot may repeat before the slot turns final.
    """

    def __init__(
        self,
        recognizer_factory: Callable[[], Recognizer],
        probe: Callable[[], LiveCapability] = probe_live_capability,
    ):
        """
        Initialize live source.

        Args:
            recognizer_factory: Builds the recognizer on start()
            probe: Capability probe consulted before anything is opened
        """
        super().__init__()
        self.recognizer_factory = recognizer_factory
        self.probe = probe
        self.recognizer: Recognizer | None = None
        self._stopped = False
        self._device_name = "Microphone"

    @property
    def mode(self) -> CaptureMode:
        return CaptureMode.LIVE

    @property
    def source_name(self) -> str:
        return f"Live ({self._device_name})"

    async def start(self) -> None:
        capability = self.probe()
        require_live_capability(capability)
        if capability.device_name:
            self._device_name = capability.device_name

        self.recognizer = self.recognizer_factory()
        try:
            await self.recognizer.open()
        except TranscriptEngineError:
            raise
        except Exception as e:
            raise StartError(f"Recognizer failed to start: {e}") from e

        self.running = True
        logger.info(f"Live recognition started: {self.source_name}")

    async def events(self) -> AsyncIterator[SourceEvent]:
        if self.recognizer is None or self._stopped:
            return

        try:
            async for result in self.recognizer.results():
                if self._stopped:
                    break
                event = result.to_event()
                if event is None:
                    logger.debug(f"Result {result.result_index} has no alternatives, skipped")
                    continue
                yield event

            if not self._stopped:
                yield SourceFailed(StreamReadError("Recognizer ended the session unexpectedly"))
        except StreamReadError as e:
            if not self._stopped:
                logger.error(f"Live recognition failed: {e}")
                yield SourceFailed(e)
        finally:
            self.running = False
            await self.recognizer.close()

    async def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        self.running = False
        if self.recognizer is not None:
            await self.recognizer.close()
        logger.info("Live recognition stopped")
