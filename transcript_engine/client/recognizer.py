"""
Live Recognizer Client

Streams microphone audio to the on-device recognizer over WebSocket and
yields its notifications as RecognitionResult objects.

Protocol:
1. Connect to the WebSocket endpoint
2. Send config JSON: {"chunk_ms": X, "sample_rate": 16000}
3. Stream raw audio bytes
4. Receive JSON notifications (see parse_recognizer_message)
"""

import asyncio
import contextlib
import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from ..audio.capture import TARGET_SAMPLE_RATE, MicrophoneCapture
from ..config.settings import EngineConfig
from ..errors import StartError, StreamReadError
from .result import RecognitionResult, parse_recognizer_message

logger = logging.getLogger(__name__)


class RecognizerClient:
    """
    WebSocket client for the live recognizer.

    Usage:
        recognizer = RecognizerClient(uri, capture=MicrophoneCapture())
        await recognizer.open()
        try:
            async for result in recognizer.results():
                ...
        finally:
            await recognizer.close()
    """

    def __init__(
        self,
        uri: str,
        capture: MicrophoneCapture | None = None,
        chunk_ms: int = 200,
        sample_rate: int = TARGET_SAMPLE_RATE,
        open_timeout: float = 10.0,
    ):
        """
        Initialize recognizer client.

        Args:
            uri: Recognizer WebSocket URI
            capture: Microphone feeding the recognizer (None if the
                recognizer owns its own audio input)
            chunk_ms: Chunk duration announced in the config message
            sample_rate: Sample rate announced in the config message
            open_timeout: Connection timeout in seconds
        """
        self.uri = uri
        self.capture = capture
        self.chunk_ms = chunk_ms
        self.sample_rate = sample_rate
        self.open_timeout = open_timeout
        self._ws: Any = None
        self._send_task: asyncio.Task | None = None

    @classmethod
    def from_config(cls, config: EngineConfig, capture: MicrophoneCapture | None = None) -> "RecognizerClient":
        return cls(config.recognizer_uri, capture=capture, chunk_ms=config.recognizer_chunk_ms)

    @property
    def connected(self) -> bool:
        return self._ws is not None

    async def open(self) -> None:
        """
        Connect, send config and start streaming audio.

        Raises:
            StartError: connection or microphone failure
        """
        import websockets
        from websockets.exceptions import WebSocketException

        logger.info(f"Connecting to recognizer: {self.uri}")
        try:
            self._ws = await websockets.connect(self.uri, open_timeout=self.open_timeout)
            config = {"chunk_ms": self.chunk_ms, "sample_rate": self.sample_rate}
            await self._ws.send(json.dumps(config))
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            await self.close()
            raise StartError(f"Recognizer connection failed: {e}") from e

        if self.capture is not None:
            if not self.capture.start():
                await self.close()
                raise StartError("Microphone could not be opened")
            self._send_task = asyncio.create_task(self._send_audio())

    async def _send_audio(self):
        """Forward captured audio to the recognizer."""
        try:
            async for chunk in self.capture.frames():
                await self._ws.send(chunk)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Send error: {e}")

    async def results(self) -> AsyncIterator[RecognitionResult]:
        """
        Yield recognizer notifications until the connection closes.

        Raises:
            StreamReadError: the connection dropped abnormally
        """
        from websockets.exceptions import ConnectionClosedError

        if self._ws is None:
            return

        next_slot = 0
        try:
            async for message in self._ws:
                result = parse_recognizer_message(message, next_slot)
                if result is None:
                    continue
                if result.is_final:
                    next_slot = max(next_slot, result.result_index + 1)
                yield result
        except ConnectionClosedError as e:
            raise StreamReadError(f"Recognizer connection lost: {e}") from e

    async def close(self) -> None:
        """Stop audio, cancel the sender and close the socket. Idempotent."""
        if self.capture is not None:
            self.capture.stop()

        if self._send_task is not None:
            self._send_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._send_task
            self._send_task = None

        if self._ws is not None:
            ws, self._ws = self._ws, None
            try:
                await ws.close()
            except Exception as e:
                logger.debug(f"Recognizer close failed: {e}")
