"""Microphone capture feeding the live recognizer."""

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Optional

logger = logging.getLogger(__name__)

# Recognizer input format: 16-bit PCM, mono
TARGET_SAMPLE_RATE = 16000
CHUNK_DURATION_MS = 100


def calculate_chunk_size(sample_rate: int, chunk_ms: int = CHUNK_DURATION_MS) -> int:
    """Frames per buffer for the given rate and chunk duration."""
    return int(sample_rate * chunk_ms / 1000)


class MicrophoneCapture:
    """
    Capture microphone audio with PyAudio and expose it as an async stream.

    PyAudio invokes the stream callback on its own thread; frames are handed
    to the event loop with call_soon_threadsafe.
    """

    def __init__(
        self,
        device_index: Optional[int] = None,
        sample_rate: int = TARGET_SAMPLE_RATE,
        chunk_ms: int = CHUNK_DURATION_MS,
        max_queued_chunks: int = 100,
    ):
        """
        Initialize microphone capture.

        Args:
            device_index: Specific input device index, or None for default
            sample_rate: Capture rate in Hz
            chunk_ms: Duration of each delivered chunk
            max_queued_chunks: Chunks buffered before new audio is dropped
        """
        self.device_index = device_index
        self.sample_rate = sample_rate
        self.chunk_ms = chunk_ms
        self.running = False
        self.pyaudio_instance = None
        self.stream = None
        self._device_name = "Microphone"
        self._max_queued = max_queued_chunks
        self._queue: asyncio.Queue | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def source_name(self) -> str:
        return self._device_name

    def start(self) -> bool:
        """Open the input stream. Returns True on success."""
        try:
            import pyaudio

            self._loop = asyncio.get_running_loop()
            self._queue = asyncio.Queue(maxsize=self._max_queued)
            self.pyaudio_instance = pyaudio.PyAudio()

            if self.device_index is not None:
                device_info = self.pyaudio_instance.get_device_info_by_index(self.device_index)
            else:
                device_info = self.pyaudio_instance.get_default_input_device_info()
            self._device_name = device_info["name"]

            logger.info(f"Microphone: {self._device_name} @ {self.sample_rate}Hz")

            self.stream = self.pyaudio_instance.open(
                format=pyaudio.paInt16,
                channels=1,
                rate=self.sample_rate,
                input=True,
                input_device_index=self.device_index,
                frames_per_buffer=calculate_chunk_size(self.sample_rate, self.chunk_ms),
                stream_callback=self._audio_callback,
            )
            self.stream.start_stream()
            self.running = True
            logger.info("Microphone capture started")
            return True

        except Exception as e:
            logger.error(f"Microphone start failed: {e}")
            self._release()
            return False

    def _audio_callback(self, in_data, frame_count, time_info, status):
        import pyaudio

        if not self.running:
            return (None, pyaudio.paComplete)

        if self._loop is not None:
            self._loop.call_soon_threadsafe(self._enqueue, in_data)
        return (None, pyaudio.paContinue)

    def _enqueue(self, data: bytes | None) -> None:
        if self._queue is None:
            return
        try:
            self._queue.put_nowait(data)
        except asyncio.QueueFull:
            logger.warning("Audio queue full, dropping audio chunk")

    async def frames(self) -> AsyncIterator[bytes]:
        """Yield captured PCM chunks until the capture stops."""
        if self._queue is None:
            return
        while True:
            data = await self._queue.get()
            if data is None:
                return
            yield data

    def stop(self):
        """Stop capturing and release the device."""
        was_running = self.running
        self.running = False
        self._release()
        if self._queue is not None:
            # Wake any reader; drop audio still queued if the queue is full
            while self._queue.full():
                self._queue.get_nowait()
            self._queue.put_nowait(None)
        if was_running:
            logger.info("Microphone capture stopped")

    def _release(self):
        if self.stream:
            try:
                self.stream.stop_stream()
                self.stream.close()
            except Exception as e:
                logger.debug(f"Closing input stream failed: {e}")
            self.stream = None

        if self.pyaudio_instance:
            try:
                self.pyaudio_instance.terminate()
            except Exception as e:
                logger.debug(f"PyAudio terminate failed: {e}")
            self.pyaudio_instance = None
