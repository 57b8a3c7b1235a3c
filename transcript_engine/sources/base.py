"""Capture source contract shared by the Live and FileUpload variants."""

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from ..client.result import SourceEvent
from ..modes import CaptureMode

logger = logging.getLogger(__name__)


class CaptureSource(ABC):
    """
    Abstract capture source.

    Lifecycle: start() once, iterate events() once, stop() any time after
    start (including before the first event). events() yields SegmentEvent
    items and ends with at most one SourceCompleted / SourceFailed.
    """

    def __init__(self):
        self.running = False

    @property
    @abstractmethod
    def mode(self) -> CaptureMode:
        """Variant tag."""

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Human-readable source name."""

    @abstractmethod
    async def start(self) -> None:
        """
        Prepare the source.

        Raises:
            UnsupportedCapability, InvalidInput or StartError
        """

    @abstractmethod
    def events(self) -> AsyncIterator[SourceEvent]:
        """Async iterator of segment events and the terminal signal."""

    @abstractmethod
    async def stop(self) -> None:
        """Halt emission and release resources. Safe to call repeatedly."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source_name}, running={self.running})"
