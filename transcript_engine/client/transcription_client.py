"""Async HTTP client for the remote transcription service."""

import logging
import mimetypes
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from ..config.settings import TRANSCRIPTION_TIMEOUT, EngineConfig
from ..errors import NetworkError, StreamReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    """
    Read-only descriptor of an audio file chosen by the user.

    The payload is either in-memory content or a path read at upload time.
    """

    name: str
    byte_size: int
    mime_type: str
    content: bytes | None = None
    path: Path | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadedFile":
        """Describe a file on disk."""
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            byte_size=path.stat().st_size,
            mime_type=mime_type or "application/octet-stream",
            path=path,
        )

    @classmethod
    def from_bytes(cls, name: str, content: bytes, mime_type: str | None = None) -> "UploadedFile":
        """Describe an in-memory upload."""
        if mime_type is None:
            mime_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        return cls(name=name, byte_size=len(content), mime_type=mime_type, content=content)

    def read(self) -> bytes:
        """Return the payload bytes."""
        if self.content is not None:
            return self.content
        if self.path is not None:
            return self.path.read_bytes()
        return b""


class TranscriptionResponse:
    """An open response from the transcription service."""

    def __init__(self, response: httpx.Response):
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def content_type(self) -> str:
        return self._response.headers.get("content-type", "")

    @property
    def is_single_shot(self) -> bool:
        """JSON responses carry the whole transcript in one payload."""
        return self.content_type.split(";")[0].strip().lower() == "application/json"

    async def chunks(self) -> AsyncIterator[str]:
        """Yield decoded text chunks as they arrive. Empty chunks are skipped."""
        try:
            async for text in self._response.aiter_text():
                if text:
                    yield text
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise StreamReadError(f"Stream read failed: {e}") from e

    async def read_text(self) -> str:
        """Read a single-shot payload and return its text field."""
        try:
            await self._response.aread()
            data = self._response.json()
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise StreamReadError(f"Response read failed: {e}") from e
        except ValueError as e:
            raise StreamReadError(f"Invalid JSON payload: {e}") from e

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise StreamReadError("Response payload has no 'text' field")
        return text


class TranscriptionClient:
    """Async HTTP client for file transcription with connection pooling."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float = TRANSCRIPTION_TIMEOUT,
        http: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize transcription client.

        Args:
            url: Full upload URL (defaults to the configured service)
            timeout: Request timeout in seconds
            http: Pre-built httpx client (its lifecycle stays with the caller)
        """
        self.url = url or EngineConfig().transcribe_url
        self.timeout = timeout
        self._http = http
        self._owns_http = http is None

    @classmethod
    def from_config(cls, config: EngineConfig) -> "TranscriptionClient":
        return cls(url=config.transcribe_url, timeout=config.transcription_timeout)

    async def _get_http(self) -> httpx.AsyncClient:
        """Lazy-init HTTP client with connection pooling."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.timeout)
        return self._http

    @asynccontextmanager
    async def transcribe(self, upload: UploadedFile) -> AsyncIterator[TranscriptionResponse]:
        """
        POST the file and hold the response open for reading.

        Usage:
            async with client.transcribe(upload) as response:
                async for chunk in response.chunks():
                    ...

        Raises:
            NetworkError: transport failure or non-2xx status
        """
        http = await self._get_http()
        files = {"file": (upload.name, upload.read(), upload.mime_type)}
        logger.info(f"Uploading {upload.name} ({upload.byte_size} bytes) to {self.url}")

        async with AsyncExitStack() as stack:
            try:
                response = await stack.enter_async_context(
                    http.stream("POST", self.url, files=files)
                )
            except httpx.TimeoutException as e:
                raise NetworkError(f"Transcription request timed out: {e}") from e
            except httpx.HTTPError as e:
                raise NetworkError(f"Transcription request failed: {e}") from e

            if not response.is_success:
                logger.error(f"Transcription failed: {response.status_code}")
                raise NetworkError(
                    f"Transcription service returned {response.status_code}",
                    status_code=response.status_code,
                )

            yield TranscriptionResponse(response)

    async def close(self):
        """Close HTTP client."""
        if self._http and self._owns_http:
            await self._http.aclose()
            self._http = None
