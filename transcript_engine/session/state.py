"""Session states and the read-only snapshot handed to observers."""

from dataclasses import dataclass
from enum import Enum

from ..errors import TranscriptEngineError
from ..modes import CaptureMode


class SessionState(Enum):
    """State of the transcription session."""

    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.FAILED)


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of a session after the last applied change."""

    session_id: str | None = None
    mode: CaptureMode | None = None
    state: SessionState = SessionState.IDLE
    progress_percent: int = 0
    text: str = ""
    error: TranscriptEngineError | None = None
    generation: int = 0

    @property
    def has_text(self) -> bool:
        return bool(self.text)

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def snapshot_text(self) -> str:
        return self.text
