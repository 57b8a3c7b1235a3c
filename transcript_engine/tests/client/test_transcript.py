"""
Unit tests for transcript_engine.client.transcript module.
"""

import logging
from unittest.mock import Mock

import pytest

from transcript_engine.client.transcript import SegmentStore, TranscriptSegment


class TestSegmentStoreBasics:
    """Tests for inserting and reading segments."""

    def test_init_empty(self):
        """Store initializes empty."""
        store = SegmentStore()
        assert store.is_empty
        assert store.segment_count == 0
        assert len(store) == 0
        assert store.snapshot_text() == ""

    def test_apply_interim_appends(self):
        """Interim for a new index inserts a non-final segment."""
        store = SegmentStore()
        assert store.apply_interim(0, "Hel") is True
        assert store.get_segment(0) == TranscriptSegment(0, "Hel", final=False)
        assert store.snapshot_text() == "Hel"

    def test_interim_replaces_interim(self):
        """Later interim for the same index wins."""
        store = SegmentStore()
        store.apply_interim(0, "Hel")
        store.apply_interim(0, "Hello")
        assert store.segment_count == 1
        assert store.snapshot_text() == "Hello"

    def test_segments_join_without_separator(self):
        """Segments concatenate in index order with no separator."""
        store = SegmentStore()
        store.apply_final(0, "Hello ")
        store.apply_interim(1, "world")
        assert store.snapshot_text() == "Hello world"

    def test_order_follows_index_not_calls(self):
        """Application order across indices does not affect the text."""
        first = SegmentStore()
        first.apply_final(0, "a")
        first.apply_final(1, "b")
        first.apply_interim(2, "c")

        second = SegmentStore()
        second.apply_interim(2, "c")
        second.apply_final(1, "b")
        second.apply_final(0, "a")

        assert first.snapshot_text() == second.snapshot_text() == "abc"

    def test_sparse_indices_render_as_empty(self):
        """Holes in the index range contribute nothing."""
        store = SegmentStore()
        store.apply_final(0, "one ")
        store.apply_final(3, "four")
        assert store.snapshot_text() == "one four"
        assert store.get_segment(1) is None

    def test_segments_in_index_order(self):
        """segments() lists by index."""
        store = SegmentStore()
        store.apply_interim(2, "c")
        store.apply_final(0, "a")
        assert [s.index for s in store.segments()] == [0, 2]

    def test_negative_index_rejected(self):
        """Negative indices are a programming error."""
        store = SegmentStore()
        with pytest.raises(ValueError):
            store.apply_interim(-1, "x")

    def test_reset(self):
        """reset() clears all segments."""
        store = SegmentStore()
        store.apply_final(0, "hello")
        store.apply_interim(1, "world")
        store.reset()
        assert store.is_empty
        assert store.snapshot_text() == ""
        assert store.apply_interim(0, "again") is True

    def test_repr(self):
        store = SegmentStore()
        store.apply_interim(0, "x")
        assert repr(store) == "SegmentStore(1 segments)"


class TestSegmentStoreFinality:
    """Tests for the no-regression guard on final segments."""

    def test_final_after_interims(self):
        """Final text replaces interim text."""
        store = SegmentStore()
        store.apply_interim(0, "Hel")
        store.apply_interim(0, "Hello")
        assert store.apply_final(0, "Hello.") is True
        assert store.get_segment(0) == TranscriptSegment(0, "Hello.", final=True)

    def test_interim_after_final_ignored(self):
        """Late interim never regresses a committed segment."""
        store = SegmentStore()
        store.apply_final(0, "Hello.")
        assert store.apply_interim(0, "Hellx") is False
        assert store.snapshot_text() == "Hello."
        assert store.get_segment(0).final is True

    def test_duplicate_final_is_noop(self):
        """Re-applying the same final text is silent."""
        store = SegmentStore()
        store.apply_final(0, "Hello.")
        assert store.apply_final(0, "Hello.") is False
        assert store.snapshot_text() == "Hello."

    def test_differing_final_rejected_and_logged(self, caplog):
        """A second, different final is logged as an anomaly."""
        store = SegmentStore()
        store.apply_final(0, "Hello.")
        with caplog.at_level(logging.WARNING, logger="transcript_engine.client.transcript"):
            assert store.apply_final(0, "Hello!!") is False
        assert store.snapshot_text() == "Hello."
        assert "REJECT" in caplog.text

    def test_live_example_scenario(self):
        """Interim/final sequence from a live recognizer."""
        store = SegmentStore()
        store.apply_interim(0, "Hel")
        store.apply_interim(0, "Hello")
        store.apply_final(0, "Hello.")
        store.apply_interim(1, "Wor")
        assert store.snapshot_text() == "Hello.Wor"

        store.apply_final(0, "Hello!!")
        assert store.snapshot_text() == "Hello.Wor"

    def test_replay_is_deterministic(self):
        """Replaying the same events yields the same text."""
        events = [
            ("interim", 0, "Hel"),
            ("interim", 1, "wo"),
            ("final", 0, "Hello "),
            ("interim", 0, "nope"),
            ("final", 1, "world"),
        ]

        def replay():
            store = SegmentStore()
            for kind, index, text in events:
                if kind == "final":
                    store.apply_final(index, text)
                else:
                    store.apply_interim(index, text)
            return store.snapshot_text()

        assert replay() == replay() == "Hello world"


class TestSegmentStoreCallbacks:
    """Tests for the on_change callback."""

    def test_on_change_fires_on_apply(self):
        store = SegmentStore()
        store.on_change = Mock()
        store.apply_interim(0, "a")
        store.apply_final(0, "b")
        assert store.on_change.call_count == 2

    def test_on_change_not_fired_for_rejected(self):
        store = SegmentStore()
        store.apply_final(0, "a")
        store.on_change = Mock()
        store.apply_interim(0, "b")
        store.on_change.assert_not_called()

    def test_on_change_fires_on_reset(self):
        store = SegmentStore()
        store.on_change = Mock()
        store.reset()
        store.on_change.assert_called_once()

    def test_callback_error_does_not_break_store(self):
        """Callback exceptions are logged, not raised."""
        store = SegmentStore()
        store.on_change = Mock(side_effect=RuntimeError("boom"))
        assert store.apply_interim(0, "a") is True
        assert store.snapshot_text() == "a"
