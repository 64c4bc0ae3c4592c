"""
Bounded undo/redo history over cube snapshots.

The history is a list of snapshots with a cursor. The entry under the cursor
is always the current state. Up to `max_entries` earlier states are kept
for undo. Recording a new state drops everything after the cursor, appends,
and evicts the oldest entry once that many undo steps are held.
"""

from cubecraft.config import MAX_HISTORY_ENTRIES
from cubecraft.models.cube import CubeSnapshot
from cubecraft.models.failure import InvariantViolationError


class History:
    """Snapshot history with a movable cursor."""

    def __init__(self, initial: CubeSnapshot, max_entries: int = MAX_HISTORY_ENTRIES):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: list[CubeSnapshot] = [initial]
        self._cursor = 0

    @property
    def current(self) -> CubeSnapshot:
        if not 0 <= self._cursor < len(self._entries):
            raise InvariantViolationError(
                f"History cursor {self._cursor} outside {len(self._entries)} entries"
            )
        return self._entries[self._cursor]

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, snapshot: CubeSnapshot) -> bool:
        """
        Make `snapshot` the current state.

        Returns False (and records nothing) when it equals the current state.
        """
        if snapshot == self.current:
            return False
        del self._entries[self._cursor + 1 :]
        self._entries.append(snapshot)
        overflow = len(self._entries) - (self.max_entries + 1)
        if overflow > 0:
            del self._entries[0:overflow]
        self._cursor = len(self._entries) - 1
        return True

    def undo(self) -> CubeSnapshot | None:
        """Step back; None when there is nothing to undo."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self.current

    def redo(self) -> CubeSnapshot | None:
        if not self.can_redo:
            return None
        self._cursor += 1
        return self.current

    def reset(self, snapshot: CubeSnapshot) -> None:
        """Forget all history; `snapshot` becomes the only entry."""
        self._entries = [snapshot]
        self._cursor = 0
