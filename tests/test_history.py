"""
Unit tests for the activation history recorder.
"""

import pytest
from spreadgraph.network import HistoryRecorder


def rows(value):
    return [{"id": "a", "label": "A", "category": None, "activation": value}]


class TestHistoryRecorder:
    """Test HistoryRecorder."""

    def test_record_and_slice(self):
        """Test that entries are appended in order and sliced by round."""
        history = HistoryRecorder()
        for r in range(5):
            history.record(r, 1000.0 + r, rows(r / 10))

        window = history.slice(1, 2)

        assert [e["round"] for e in window] == [1, 2]
        assert window[0]["activations"][0]["activation"] == pytest.approx(0.1)
        assert set(window[0]) == {"round", "timestamp", "activations"}

    def test_slice_past_end(self):
        """Test that slicing beyond the last round returns nothing."""
        history = HistoryRecorder()
        history.record(0, 0.0, rows(0.0))

        assert history.slice(5, 10) == []
        assert history.slice(0, 0) == []

    def test_clear(self):
        """Test that clear empties the log."""
        history = HistoryRecorder()
        history.record(0, 0.0, rows(0.0))
        history.clear()

        assert len(history) == 0
        assert history.latest() is None

    def test_cap_drops_oldest(self):
        """Test that a capped history keeps the newest rounds without renumbering."""
        history = HistoryRecorder(max_entries=3)
        for r in range(6):
            history.record(r, float(r), rows(0.5))

        assert len(history) == 3
        assert [e["round"] for e in history.slice(0, 10)] == [3, 4, 5]
        assert history.evicted == 3

    def test_shrinking_cap_keeps_newest(self):
        """Test that lowering the cap keeps the most recent entries."""
        history = HistoryRecorder()
        for r in range(4):
            history.record(r, float(r), rows(0.5))

        history.set_max_entries(2)

        assert [e.round for e in history] == [2, 3]

    def test_entries_are_snapshots(self):
        """Test that recorded rows are not affected by later changes to the source."""
        history = HistoryRecorder()
        source = rows(0.3)
        history.record(0, 0.0, source)
        source.append({"id": "b", "label": "B", "category": None, "activation": 1.0})

        assert len(history.latest().activations) == 1
