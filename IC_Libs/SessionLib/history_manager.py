"""
Linear undo/redo history for ImageCraft Lite.

Snapshots form a single sequence with a cursor pointing at the current
state. Committing after an undo discards everything after the cursor; there
is no branching.

Classes:
    HistoryManager: Snapshot sequence with cursor
"""

import logging
from typing import Generic, List, Optional, TypeVar

from IC_Libs.ImageEditingLib.editor_errors import NothingToRedoError, NothingToUndoError

logger = logging.getLogger(__name__)

SnapshotT = TypeVar("SnapshotT")


class HistoryManager(Generic[SnapshotT]):
    """
    Undo/redo over a linear snapshot sequence.

    Example:
        >>> history = HistoryManager()
        >>> history.reset("initial")
        >>> history.commit("edit")
        >>> history.undo()
        'initial'
        >>> history.can_redo
        True
    """

    def __init__(self, max_entries: Optional[int] = None):
        """
        Args:
            max_entries: Maximum snapshots kept; the oldest are dropped when
                exceeded (None = unbounded)
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._entries: List[SnapshotT] = []
        self._cursor = -1
        self._max_entries = max_entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> Optional[SnapshotT]:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    @property
    def entries(self) -> List[SnapshotT]:
        return list(self._entries)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return 0 <= self._cursor < len(self._entries) - 1

    def reset(self, initial: SnapshotT) -> None:
        """Replace the whole history with a single initial snapshot."""
        self._entries = [initial]
        self._cursor = 0

    def clear(self) -> None:
        self._entries = []
        self._cursor = -1

    def commit(self, snapshot: SnapshotT) -> None:
        """Drop any redoable future, append `snapshot` and move the cursor to it."""
        del self._entries[self._cursor + 1:]
        self._entries.append(snapshot)
        self._cursor = len(self._entries) - 1

        if self._max_entries is not None and len(self._entries) > self._max_entries:
            overflow = len(self._entries) - self._max_entries
            del self._entries[:overflow]
            self._cursor -= overflow

        logger.debug(f"History commit: {self._cursor + 1}/{len(self._entries)}")

    def undo(self) -> SnapshotT:
        """
        Move the cursor back one snapshot.

        Raises:
            NothingToUndoError: If the cursor is at the first snapshot
        """
        if not self.can_undo:
            raise NothingToUndoError()
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> SnapshotT:
        """
        Move the cursor forward one snapshot.

        Raises:
            NothingToRedoError: If the cursor is at the last snapshot
        """
        if not self.can_redo:
            raise NothingToRedoError()
        self._cursor += 1
        return self._entries[self._cursor]
