"""Bounded undo/redo stack of immutable state snapshots."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class SnapshotHistory(Generic[T]):
    """Linear history with a cursor.

    ``push`` drops the redo tail, ignores a state equal to the current one
    and evicts the oldest snapshot once ``max_size`` is exceeded. Snapshots
    must be immutable or treated as such by callers.
    """

    def __init__(self, initial: T, max_size: int = 50) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._states: list[T] = [initial]
        self._index = 0

    @property
    def current(self) -> T:
        return self._states[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._states) - 1

    def __len__(self) -> int:
        return len(self._states)

    def push(self, state: T) -> bool:
        """Record ``state``; return False when it equals the current snapshot."""
        if state == self.current:
            return False
        del self._states[self._index + 1 :]
        self._states.append(state)
        if len(self._states) > self.max_size:
            self._states.pop(0)
        self._index = len(self._states) - 1
        return True

    def undo(self) -> Optional[T]:
        if not self.can_undo:
            return None
        self._index -= 1
        return self.current

    def redo(self) -> Optional[T]:
        if not self.can_redo:
            return None
        self._index += 1
        return self.current

    def reset(self, state: T) -> None:
        self._states = [state]
        self._index = 0


__all__ = ["SnapshotHistory"]
