"""
Unit tests for transcript_engine.config.settings module.
"""

import os
from unittest.mock import patch

from transcript_engine.config.settings import EngineConfig


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults_from_env(self):
        with patch.dict(os.environ, {}, clear=True):
            config = EngineConfig.from_env()
        assert config.transcription_url == "http://localhost:8000"
        assert config.transcribe_url == "http://localhost:8000/api/transcribe"
        assert config.recognizer_uri == "ws://localhost:8001/stream"
        assert config.progress_step == 10
        assert config.progress_cap == 99
        assert config.export_filename == "transcription.txt"

    def test_env_overrides(self):
        env = {
            "TRANSCRIPTION_URL": "http://asr:9000/",
            "TRANSCRIBE_ENDPOINT": "/transcribe",
            "RECOGNIZER_HOST": "vosk",
            "RECOGNIZER_PORT": "2700",
            "PROGRESS_STEP": "5",
            "PROGRESS_CAP": "90",
            "TRANSCRIPTION_TIMEOUT": "30",
        }
        with patch.dict(os.environ, env, clear=True):
            config = EngineConfig.from_env()
        assert config.transcribe_url == "http://asr:9000/transcribe"
        assert config.recognizer_uri == "ws://vosk:2700/stream"
        assert config.progress_step == 5
        assert config.progress_cap == 90
        assert config.transcription_timeout == 30.0

    def test_explicit_values(self):
        config = EngineConfig(recognizer_host="127.0.0.1", recognizer_endpoint="/ws")
        assert config.recognizer_uri == "ws://127.0.0.1:8001/ws"
