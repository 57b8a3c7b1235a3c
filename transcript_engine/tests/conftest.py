"""Pytest fixtures for transcript_engine tests."""

import pytest

from transcript_engine.client.transcription_client import UploadedFile
from transcript_engine.probe import LiveCapability


@pytest.fixture
def audio_file():
    """Small in-memory WAV upload."""
    return UploadedFile.from_bytes("meeting.wav", b"RIFF....WAVEfmt ", "audio/wav")


@pytest.fixture
def live_available():
    """Probe reporting a working microphone."""
    return lambda: LiveCapability(True, device_name="Test Mic")


@pytest.fixture
def live_unavailable():
    """Probe reporting no live recognition."""
    return lambda: LiveCapability(False, reason="pyaudio not installed")
