"""
Unit tests for transcript_engine.client.recognizer module.

The websockets connection is replaced by an in-memory fake.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from websockets.exceptions import ConnectionClosedError

from transcript_engine.client.recognizer import RecognizerClient
from transcript_engine.client.result import RecognitionResult
from transcript_engine.config.settings import EngineConfig
from transcript_engine.errors import StartError, StreamReadError


class FakeWebSocket:
    """Minimal async-iterable WebSocket connection."""

    def __init__(self, messages=(), error=None):
        self.messages = list(messages)
        self.error = error
        self.send = AsyncMock()
        self.close = AsyncMock()

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self.messages:
            yield message
        if self.error is not None:
            raise self.error


class TestRecognizerClientInit:
    """Tests for RecognizerClient initialization."""

    def test_default_values(self):
        client = RecognizerClient("ws://localhost:8001/stream")
        assert client.uri == "ws://localhost:8001/stream"
        assert client.capture is None
        assert client.chunk_ms == 200
        assert client.sample_rate == 16000
        assert client.connected is False

    def test_from_config(self):
        config = EngineConfig(recognizer_host="asr", recognizer_port=9001, recognizer_chunk_ms=300)
        client = RecognizerClient.from_config(config)
        assert client.uri == "ws://asr:9001/stream"
        assert client.chunk_ms == 300


class TestRecognizerClientOpen:
    """Tests for open()."""

    @pytest.mark.asyncio
    async def test_open_sends_config(self):
        ws = FakeWebSocket()
        with patch("websockets.connect", AsyncMock(return_value=ws)) as connect:
            client = RecognizerClient("ws://localhost:8001/stream", chunk_ms=300)
            await client.open()

        connect.assert_awaited_once()
        assert connect.call_args.args[0] == "ws://localhost:8001/stream"
        ws.send.assert_awaited_once_with(json.dumps({"chunk_ms": 300, "sample_rate": 16000}))
        assert client.connected

    @pytest.mark.asyncio
    async def test_connection_refused_is_start_error(self):
        with patch("websockets.connect", AsyncMock(side_effect=ConnectionRefusedError("refused"))):
            client = RecognizerClient("ws://localhost:8001/stream")
            with pytest.raises(StartError, match="refused"):
                await client.open()
        assert not client.connected

    @pytest.mark.asyncio
    async def test_microphone_failure_is_start_error(self):
        ws = FakeWebSocket()
        capture = MagicMock()
        capture.start.return_value = False
        with patch("websockets.connect", AsyncMock(return_value=ws)):
            client = RecognizerClient("ws://localhost:8001/stream", capture=capture)
            with pytest.raises(StartError, match="Microphone"):
                await client.open()
        ws.close.assert_awaited_once()
        capture.stop.assert_called()

    @pytest.mark.asyncio
    async def test_audio_forwarded(self):
        ws = FakeWebSocket()

        async def frames():
            yield b"\x00\x01"
            yield b"\x02\x03"

        capture = MagicMock()
        capture.start.return_value = True
        capture.frames = frames
        with patch("websockets.connect", AsyncMock(return_value=ws)):
            client = RecognizerClient("ws://localhost:8001/stream", capture=capture)
            await client.open()
            await asyncio.sleep(0.01)
            await client.close()

        sent = [call.args[0] for call in ws.send.await_args_list]
        assert sent[1:] == [b"\x00\x01", b"\x02\x03"]


class TestRecognizerClientResults:
    """Tests for results()."""

    @pytest.mark.asyncio
    async def test_results_parsed_in_order(self):
        ws = FakeWebSocket(
            [
                json.dumps({"partial": "hel"}),
                json.dumps({"text": "hello"}),
                json.dumps({"partial": "wor"}),
                json.dumps({"status": "ignored"}),
            ]
        )
        with patch("websockets.connect", AsyncMock(return_value=ws)):
            client = RecognizerClient("ws://localhost:8001/stream")
            await client.open()
            results = [r async for r in client.results()]

        assert results == [
            RecognitionResult(0, ["hel"], False),
            RecognitionResult(0, ["hello"], True),
            RecognitionResult(1, ["wor"], False),
        ]

    @pytest.mark.asyncio
    async def test_results_before_open(self):
        client = RecognizerClient("ws://localhost:8001/stream")
        assert [r async for r in client.results()] == []

    @pytest.mark.asyncio
    async def test_abnormal_close_is_stream_read_error(self):
        ws = FakeWebSocket(
            [json.dumps({"partial": "hel"})], error=ConnectionClosedError(None, None)
        )
        with patch("websockets.connect", AsyncMock(return_value=ws)):
            client = RecognizerClient("ws://localhost:8001/stream")
            await client.open()
            with pytest.raises(StreamReadError):
                async for _ in client.results():
                    pass

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        ws = FakeWebSocket()
        with patch("websockets.connect", AsyncMock(return_value=ws)):
            client = RecognizerClient("ws://localhost:8001/stream")
            await client.open()
            await client.close()
            await client.close()
        ws.close.assert_awaited_once()
        assert not client.connected
