"""
Session State Machine

Drives one transcription session at a time:

  IDLE --start--> ACTIVE --stop--> IDLE
                  ACTIVE --completed--> COMPLETED
                  ACTIVE --failed--> FAILED

start() is allowed from every state. Starting while ACTIVE abandons the
running source first. Each start bumps a generation counter; events from an
older generation are dropped.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any
from uuid import uuid4

from ..audio.capture import MicrophoneCapture
from ..client.recognizer import RecognizerClient
from ..client.result import SegmentEvent, SourceCompleted, SourceFailed
from ..client.transcript import SegmentStore
from ..client.transcription_client import TranscriptionClient, UploadedFile
from ..config.settings import EngineConfig
from ..errors import StartError, StreamReadError, TranscriptEngineError
from ..export import ExportArtifact, export_snapshot
from ..modes import CaptureMode
from ..probe import LiveCapability, probe_live_capability
from ..sources.base import CaptureSource
from ..sources.live import LiveSource
from ..sources.upload import FileUploadSource, ProgressPolicy
from ..utils.logging import preview
from .state import SessionSnapshot, SessionState

logger = logging.getLogger(__name__)

SourceFactory = Callable[[CaptureMode, Any], CaptureSource]
SnapshotCallback = Callable[[SessionSnapshot], None]


class SessionController:
    """
    Owns the active session, its segment store and its capture source.

    Usage:
        controller = SessionController()
        controller.subscribe(lambda snap: render(snap.text, snap.progress_percent))

        await controller.start(CaptureMode.FILE_UPLOAD, UploadedFile.from_path("talk.mp3"))
        await controller.wait_closed()
        artifact = controller.export()
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        source_factory: SourceFactory | None = None,
        probe: Callable[[], LiveCapability] = probe_live_capability,
        client: TranscriptionClient | None = None,
    ):
        """
        Initialize session controller.

        Args:
            config: Engine settings (defaults to the environment)
            source_factory: Builds a capture source for (mode, input);
                defaults to LiveSource / FileUploadSource
            probe: Capability probe for live recognition
            client: Transcription client shared by file uploads
        """
        self.config = config or EngineConfig()
        self.probe = probe
        self._source_factory = source_factory or self._build_source
        self._client = client
        self._owns_client = client is None

        self.store = SegmentStore()
        self._state = SessionState.IDLE
        self._mode: CaptureMode | None = None
        self._session_id: str | None = None
        self._progress = 0
        self._error: TranscriptEngineError | None = None
        self._generation = 0
        self._source: CaptureSource | None = None
        self._pending: CaptureSource | None = None
        self._task: asyncio.Task | None = None
        self._selected_file: UploadedFile | None = None
        self._observers: list[SnapshotCallback] = []
        self._snapshot = SessionSnapshot()

    # ------------------------------------------------------------------
    # Source construction
    # ------------------------------------------------------------------

    def _build_source(self, mode: CaptureMode, input: Any) -> CaptureSource:
        if mode is CaptureMode.LIVE:
            return LiveSource(recognizer_factory=self._build_recognizer, probe=self.probe)
        if mode is CaptureMode.FILE_UPLOAD:
            policy = ProgressPolicy(step=self.config.progress_step, cap=self.config.progress_cap)
            return FileUploadSource(input, self._get_client(), policy)
        raise ValueError(f"Unknown capture mode: {mode}")

    def _build_recognizer(self) -> RecognizerClient:
        return RecognizerClient.from_config(self.config, capture=MicrophoneCapture())

    def _get_client(self) -> TranscriptionClient:
        if self._client is None:
            self._client = TranscriptionClient.from_config(self.config)
        return self._client

    # ------------------------------------------------------------------
    # Host operations
    # ------------------------------------------------------------------

    async def start(self, mode: CaptureMode, input: Any = None) -> SessionSnapshot:
        """
        Start a new session, abandoning any active one.

        Args:
            mode: Capture mode
            input: UploadedFile for FILE_UPLOAD (defaults to the selected
                file); ignored for LIVE

        Returns:
            Snapshot of the new ACTIVE session, or an IDLE snapshot if
            stop() ran while the source was starting

        Raises:
            UnsupportedCapability, InvalidInput or StartError; the session
            is left IDLE
        """
        if mode is CaptureMode.FILE_UPLOAD and input is None:
            input = self._selected_file

        await self._abandon()

        self._generation += 1
        generation = self._generation
        self.store = SegmentStore()
        self._progress = 0
        self._error = None
        self._mode = mode
        self._session_id = uuid4().hex
        self._state = SessionState.IDLE
        self._publish()

        source = self._source_factory(mode, input)
        logger.info(f"Starting session {self._session_id} ({mode.value})")
        self._pending = source
        try:
            await source.start()
        except Exception as e:
            cancelled = self._pending is not source
            if not cancelled:
                self._pending = None
            await source.stop()
            if cancelled and generation == self._generation:
                logger.info(f"Session {self._session_id} stopped while starting")
                return self._snapshot
            if isinstance(e, TranscriptEngineError):
                logger.warning(f"Session start failed: {e}")
                raise
            logger.error(f"Session start failed: {e}")
            raise StartError(f"Capture source failed to start: {e}") from e

        if self._pending is not source:
            # stop() or a newer start() ran while this one was negotiating
            await source.stop()
            if generation != self._generation:
                raise StartError("Session was superseded by a newer start")
            logger.info(f"Session {self._session_id} stopped while starting")
            return self._snapshot

        self._pending = None
        self._source = source
        self._state = SessionState.ACTIVE
        self._publish()
        self._task = asyncio.create_task(
            self._consume(source, generation), name=f"session-{self._session_id}"
        )
        return self._snapshot

    async def stop(self) -> SessionSnapshot:
        """
        Stop the active session. Segments and progress are kept.

        A start() still negotiating with its source is cancelled and
        returns an IDLE snapshot. Otherwise a no-op unless a session is ACTIVE.
        """
        if self._pending is not None:
            source, self._pending = self._pending, None
            logger.info(f"Cancelling session {self._session_id} during start")
            await source.stop()
            self._state = SessionState.IDLE
            self._publish()
            return self._snapshot

        if self._state is not SessionState.ACTIVE:
            return self._snapshot

        logger.info(f"Stopping session {self._session_id}")
        await self._halt()
        self._state = SessionState.IDLE
        self._publish()
        return self._snapshot

    def select_file(self, file: UploadedFile | None) -> None:
        """
        Remember the file for the next FILE_UPLOAD start.

        Clears the previous transcript unless a session is running.
        """
        self._selected_file = file
        if self._state is SessionState.ACTIVE:
            return
        self.store = SegmentStore()
        self._progress = 0
        self._error = None
        self._state = SessionState.IDLE
        self._publish()

    async def wait_closed(self) -> None:
        """Wait until the current source has stopped emitting."""
        task = self._task
        if task is not None and task is not asyncio.current_task():
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def aclose(self) -> None:
        """Stop any active session and release the HTTP client."""
        await self.stop()
        if self._client is not None and self._owns_client:
            await self._client.close()
            self._client = None

    def export(self) -> ExportArtifact:
        """Export the current transcript under the configured filename."""
        return export_snapshot(self, filename=self.config.export_filename)

    async def __aenter__(self) -> "SessionController":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Event consumption
    # ------------------------------------------------------------------

    async def _consume(self, source: CaptureSource, generation: int) -> None:
        try:
            async with contextlib.aclosing(source.events()) as events:
                async for event in events:
                    if generation != self._generation:
                        logger.debug(f"Dropping event from abandoned source: {event}")
                        return
                    if isinstance(event, SegmentEvent):
                        self._on_event(event)
                    elif isinstance(event, SourceCompleted):
                        self._on_completed()
                        return
                    elif isinstance(event, SourceFailed):
                        self._on_failed(event.error)
                        return
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"Capture source crashed: {e}")
            if generation == self._generation and self._state is SessionState.ACTIVE:
                error = e if isinstance(e, TranscriptEngineError) else StreamReadError(str(e))
                self._on_failed(error)
            return

        if generation == self._generation and self._state is SessionState.ACTIVE:
            logger.warning(f"{source.source_name} ended without a terminal signal")
            self._state = SessionState.IDLE
            self._publish()

    def _on_event(self, event: SegmentEvent) -> None:
        if event.final:
            self.store.apply_final(event.index, event.text)
        else:
            self.store.apply_interim(event.index, event.text)

        if event.progress is not None:
            self._progress = max(self._progress, min(event.progress, 100))

        logger.debug(f"Applied {event}; progress {self._progress}%")
        self._publish()

    def _on_completed(self) -> None:
        self._source = None
        self._progress = 100
        self._state = SessionState.COMPLETED
        logger.info(
            f"Session {self._session_id} completed: '{preview(self.store.snapshot_text())}'"
        )
        self._publish()

    def _on_failed(self, error: TranscriptEngineError) -> None:
        self._source = None
        self._error = error
        self._state = SessionState.FAILED
        logger.error(f"Session {self._session_id} failed: {error}")
        self._publish()

    async def _abandon(self) -> None:
        if self._state is SessionState.ACTIVE:
            logger.info(f"Abandoning session {self._session_id}")
        await self._halt()

    async def _halt(self) -> None:
        source, task, pending = self._source, self._task, self._pending
        self._source = None
        self._task = None
        self._pending = None

        # Cancel the consumer before the source ends its stream under it
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if source is not None:
            await source.stop()
        if pending is not None:
            await pending.stop()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """
        Register an observer for snapshot updates.

        Returns:
            Function that removes the observer
        """
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _publish(self) -> None:
        self._snapshot = SessionSnapshot(
            session_id=self._session_id,
            mode=self._mode,
            state=self._state,
            progress_percent=self._progress,
            text=self.store.snapshot_text(),
            error=self._error,
            generation=self._generation,
        )
        for callback in list(self._observers):
            try:
                callback(self._snapshot)
            except Exception as e:
                logger.error(f"Snapshot callback error: {e}")

    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    def snapshot_text(self) -> str:
        return self.store.snapshot_text()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def mode(self) -> CaptureMode | None:
        return self._mode

    @property
    def session_id(self) -> str | None:
        return self._session_id

    @property
    def progress_percent(self) -> int:
        return self._progress

    @property
    def error(self) -> TranscriptEngineError | None:
        return self._error

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def selected_file(self) -> UploadedFile | None:
        return self._selected_file

    @property
    def is_busy(self) -> bool:
        return self._state is SessionState.ACTIVE

    def __repr__(self) -> str:
        return f"SessionController({self._state.value}, {self._progress}%, {len(self.store)} segments)"
