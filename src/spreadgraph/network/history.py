"""
Activation history: append-only log of per-round activation snapshots.
"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional, Tuple

from loguru import logger


@dataclass(frozen=True)
class HistoryEntry:
    """
    Snapshot of every concept's activation after one round.

    Attributes:
        round: Round index (0 is the seeded state)
        timestamp: Wall-clock time of the recording (time.time())
        activations: (id, label, category, activation) rows in graph order
    """
    round: int
    timestamp: float
    activations: Tuple[Dict[str, Any], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'round': self.round,
            'timestamp': self.timestamp,
            'activations': [dict(row) for row in self.activations],
        }


class HistoryRecorder:
    """
    Append-only activation history with an optional retention cap.

    With max_entries set, the oldest entries are dropped first; round
    indices are never renumbered.
    """

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries
        self._entries: Deque[HistoryEntry] = deque(maxlen=max_entries)
        self._evicted = 0

    def record(self, round: int, timestamp: float, snapshot) -> HistoryEntry:
        """
        Append an entry.

        Args:
            round: Round index being recorded
            timestamp: Recording time
            snapshot: Iterable of per-concept rows

        Returns:
            The stored entry
        """
        entry = HistoryEntry(round=round, timestamp=timestamp, activations=tuple(snapshot))
        if self.max_entries is not None and len(self._entries) == self.max_entries:
            if self._evicted == 0:
                logger.warning(
                    f"Activation history reached its cap of {self.max_entries} entries; "
                    f"dropping oldest rounds"
                )
            self._evicted += 1
        self._entries.append(entry)
        return entry

    def slice(self, start_round: int = 0, count: int = 10) -> List[Dict[str, Any]]:
        """
        Entries with round >= start_round, oldest first, at most count of them.
        """
        if count <= 0:
            return []
        selected = []
        for entry in self._entries:
            if entry.round < start_round:
                continue
            selected.append(entry.to_dict())
            if len(selected) == count:
                break
        return selected

    def clear(self) -> None:
        self._entries.clear()
        self._evicted = 0

    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[-1] if self._entries else None

    def set_max_entries(self, max_entries: Optional[int]) -> None:
        """Change the cap, keeping the newest entries that still fit."""
        if max_entries == self.max_entries:
            return
        self.max_entries = max_entries
        self._entries = deque(self._entries, maxlen=max_entries)

    @property
    def evicted(self) -> int:
        """Entries dropped by the cap since the last clear."""
        return self._evicted

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)
