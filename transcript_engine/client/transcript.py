"""
Segment Store

Index-keyed transcript segments with one-way interim -> final revision.

  store.apply_interim(0, "Hel")     # new interim segment
  store.apply_interim(0, "Hello")   # replaces the interim
  store.apply_final(0, "Hello.")    # commits segment 0
  store.apply_interim(0, "Hellx")   # ignored: segment 0 is final
  store.apply_interim(1, "Wor")

  store.snapshot_text()  # "Hello.Wor"

Segments are joined in index order with no separator; sources are
responsible for their own spacing. Missing indices render as empty text.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..utils.logging import preview

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptSegment:
    """One unit of recognized text at a stable position."""

    index: int
    text: str
    final: bool = False


class SegmentStore:
    """
    Ordered mapping of index -> TranscriptSegment.

    Callbacks:
        store.on_change = lambda: render(store.snapshot_text())
    """

    def __init__(self):
        self._segments: dict[int, TranscriptSegment] = {}
        self._full_text = ""

        # Callback when the transcript changes
        self.on_change: Callable[[], None] | None = None

    def apply_interim(self, index: int, text: str) -> bool:
        """
        Insert or replace the segment at index as interim.

        Returns:
            True if applied, False if the segment is already final
        """
        return self._apply(TranscriptSegment(index, text, final=False))

    def apply_final(self, index: int, text: str) -> bool:
        """
        Insert or replace the segment at index as final.

        Re-applying the same final text is a silent no-op.

        Returns:
            True if applied, False if the segment was already final
        """
        return self._apply(TranscriptSegment(index, text, final=True))

    def _apply(self, segment: TranscriptSegment) -> bool:
        if segment.index < 0:
            raise ValueError(f"Segment index must be >= 0, got {segment.index}")

        existing = self._segments.get(segment.index)
        if existing is not None and existing.final:
            if segment.final and segment.text == existing.text:
                return False
            kind = "final" if segment.final else "interim"
            logger.warning(
                f"[REJECT] {kind} for committed segment {segment.index}: "
                f"'{preview(segment.text)}' (kept '{preview(existing.text)}')"
            )
            return False

        action = "REPLACE" if existing is not None else "APPEND"
        status = "final" if segment.final else "interim"
        logger.debug(f"[{action}] {segment.index} {status} = '{preview(segment.text)}'")

        self._segments[segment.index] = segment
        self._full_text = self._render()
        self._notify()
        return True

    def _render(self) -> str:
        # Holes in the index range contribute nothing
        return "".join(self._segments[i].text for i in sorted(self._segments))

    def _notify(self) -> None:
        if self.on_change:
            try:
                self.on_change()
            except Exception as e:
                logger.error(f"Transcript change callback failed: {e}")

    def snapshot_text(self) -> str:
        """Concatenated text of all segments in index order."""
        return self._full_text

    @property
    def full_text(self) -> str:
        return self._full_text

    def reset(self) -> None:
        """Clear all segments."""
        self._segments.clear()
        self._full_text = ""
        self._notify()

    def get_segment(self, index: int) -> TranscriptSegment | None:
        """Get the segment at a specific index."""
        return self._segments.get(index)

    def segments(self) -> list[TranscriptSegment]:
        """All segments in index order."""
        return [self._segments[i] for i in sorted(self._segments)]

    @property
    def segment_count(self) -> int:
        return len(self._segments)

    @property
    def is_empty(self) -> bool:
        return not self._segments

    def __len__(self) -> int:
        return self.segment_count

    def __repr__(self) -> str:
        return f"SegmentStore({self.segment_count} segments)"
