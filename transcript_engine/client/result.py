"""
Capture Source Event Types

Everything a capture source can hand to the session:
- SegmentEvent: interim or final text for one segment index
- SourceCompleted / SourceFailed: the terminal signal, emitted at most once

RecognitionResult is the raw recognizer notification before it is mapped
onto a SegmentEvent.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Union

from ..errors import TranscriptEngineError


@dataclass(frozen=True)
class SegmentEvent:
    """
    Text for one segment position.

    Attributes:
        index: Position in the source's emission order
        text: Recognized text for that position
        final: True once the source commits to this text
        progress: Source progress estimate (0-100) after this event, if known
    """

    index: int
    text: str
    final: bool = False
    progress: int | None = None

    @classmethod
    def interim(cls, index: int, text: str, progress: int | None = None) -> "SegmentEvent":
        """Create an interim event."""
        return cls(index=index, text=text, final=False, progress=progress)

    @classmethod
    def committed(cls, index: int, text: str, progress: int | None = None) -> "SegmentEvent":
        """Create a final event."""
        return cls(index=index, text=text, final=True, progress=progress)

    def __str__(self) -> str:
        status = "final" if self.final else "interim"
        text = f"{self.text[:50]}..." if len(self.text) > 50 else self.text
        return f"SegmentEvent({self.index} {status}: {text})"


@dataclass(frozen=True)
class SourceCompleted:
    """The source finished naturally."""


@dataclass(frozen=True)
class SourceFailed:
    """The source hit an unrecoverable error."""

    error: TranscriptEngineError

    @property
    def reason(self) -> str:
        return str(self.error)


SourceEvent = Union[SegmentEvent, SourceCompleted, SourceFailed]


@dataclass(frozen=True)
class RecognitionResult:
    """
    One notification from the live recognizer.

    Only the first alternative's text and is_final are used downstream.
    """

    result_index: int
    alternatives: list[str] = field(default_factory=list)
    is_final: bool = False

    @property
    def text(self) -> str | None:
        """First alternative, or None when the recognizer sent none."""
        return self.alternatives[0] if self.alternatives else None

    def to_event(self) -> SegmentEvent | None:
        """Map onto the segment event contract."""
        if self.text is None:
            return None
        return SegmentEvent(index=self.result_index, text=self.text, final=self.is_final)


def parse_recognizer_message(message: str | bytes, next_slot: int) -> RecognitionResult | None:
    """
    Parse a recognizer message into a RecognitionResult.

    Supported shapes:
    - {"resultIndex": 0, "alternatives": [{"transcript": "..."}], "isFinal": false}
    - {"id": "s3", "text": "...", "final": true}   (index taken from the id)
    - {"partial": "..."} / {"text": "..."}          (index is next_slot)

    Args:
        message: Raw WebSocket message
        next_slot: Index of the slot that is still open (used by the
            id-less shapes)

    Returns:
        RecognitionResult, or None for messages that carry no result
    """
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")

    try:
        data: Any = json.loads(message)
    except json.JSONDecodeError:
        # Plain text fallback
        if message.strip():
            return RecognitionResult(next_slot, [message.strip()], is_final=True)
        return None

    if not isinstance(data, dict):
        return None

    if "resultIndex" in data:
        alternatives = []
        for alt in data.get("alternatives") or []:
            if isinstance(alt, dict):
                alternatives.append(str(alt.get("transcript", "")))
            else:
                alternatives.append(str(alt))
        return RecognitionResult(
            result_index=int(data["resultIndex"]),
            alternatives=alternatives,
            is_final=bool(data.get("isFinal", False)),
        )

    if "id" in data:
        index = _slot_from_id(str(data["id"]))
        if index is None:
            return None
        return RecognitionResult(index, [data.get("text", "")], is_final=bool(data.get("final", False)))

    if "partial" in data:
        return RecognitionResult(next_slot, [data["partial"]], is_final=False)

    if "text" in data:
        return RecognitionResult(next_slot, [data["text"]], is_final=True)

    return None


def _slot_from_id(segment_id: str) -> int | None:
    """Extract the number from segment IDs like 's5' -> 5."""
    if segment_id.startswith("s") and segment_id[1:].isdigit():
        return int(segment_id[1:])
    if segment_id.isdigit():
        return int(segment_id)
    return None
