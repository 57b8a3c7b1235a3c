"""Audio capture for live recognition."""

from .capture import CHUNK_DURATION_MS, TARGET_SAMPLE_RATE, MicrophoneCapture, calculate_chunk_size

__all__ = [
    "CHUNK_DURATION_MS",
    "TARGET_SAMPLE_RATE",
    "MicrophoneCapture",
    "calculate_chunk_size",
]
