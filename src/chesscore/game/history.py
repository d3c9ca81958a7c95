"""Snapshot-based undo/redo history."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chesscore.core.notation import position_to_fen

if TYPE_CHECKING:
    from chesscore.core.move import Move
    from chesscore.core.position import Position

_LOGGER = logging.getLogger(__name__)

DEFAULT_CAPACITY = 500


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One recorded position; ``move`` is ``None`` for the root entry."""

    sequence: int
    fen: str
    move: Move | None = None
    san: str = ""
    timestamp: float = field(default_factory=time.monotonic)
    _snapshot: Position | None = field(default=None, repr=False, compare=False)

    def position(self) -> Position:
        """A fresh copy of the recorded position."""
        assert self._snapshot is not None
        return self._snapshot.copy()


class History:
    """Linear list of position snapshots with a movable cursor.

    Recording after an undo discards the redo branch.  Once more than
    *capacity* entries are held, the oldest quarter is dropped in bulk.
    """

    __slots__ = ("_capacity", "_entries", "_cursor", "_next_sequence")

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 2:
            raise ValueError(f"History capacity must be >= 2, got {capacity}")
        self._capacity = capacity
        self._entries: list[HistoryEntry] = []
        self._cursor = -1
        self._next_sequence = 0

    # ── Recording ────────────────────────────────────────────────────────

    def reset(self, position: Position) -> HistoryEntry:
        """Forget everything and record *position* as the new root."""
        self._entries.clear()
        self._cursor = -1
        return self._append(position, None, "")

    def record(self, position: Position, move: Move | None, san: str = "") -> HistoryEntry:
        """Append the position reached by *move*, dropping any redo branch."""
        dropped = len(self._entries) - self._cursor - 1
        if dropped > 0:
            del self._entries[self._cursor + 1 :]
            _LOGGER.debug("Discarded %d redo entries", dropped)
        entry = self._append(position, move, san)
        if len(self._entries) > self._capacity:
            self._evict()
        return entry

    def _append(self, position: Position, move: Move | None, san: str) -> HistoryEntry:
        entry = HistoryEntry(
            sequence=self._next_sequence,
            fen=position_to_fen(position),
            move=move,
            san=san,
            _snapshot=position.copy(),
        )
        self._next_sequence += 1
        self._entries.append(entry)
        self._cursor = len(self._entries) - 1
        return entry

    def _evict(self) -> None:
        count = max(1, self._capacity // 4)
        del self._entries[:count]
        self._cursor = max(0, self._cursor - count)
        _LOGGER.debug(
            "History over capacity %d, evicted %d oldest entries",
            self._capacity,
            count,
        )

    # ── Navigation ───────────────────────────────────────────────────────

    def undo(self) -> HistoryEntry | None:
        """Step back one entry; ``None`` when already at the oldest entry."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> HistoryEntry | None:
        """Step forward one entry; ``None`` when already at the newest entry."""
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> HistoryEntry | None:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def entries(self) -> list[HistoryEntry]:
        """Entries from the oldest kept one up to the cursor."""
        return self._entries[: self._cursor + 1]

    def __len__(self) -> int:
        return len(self._entries)
