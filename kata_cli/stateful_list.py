"""Cyclic single-cursor list used by every selectable collection."""
from __future__ import annotations

from typing import Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class StatefulList(Generic[T]):
    """An ordered list of items with one cursor.

    The cursor stays in [0, len - 1] while the list has items and is 0 when
    it is empty. Moving past either end wraps around; moving on an empty
    list does nothing.
    """

    def __init__(self, items: Optional[Iterable[T]] = None, cursor: int = 0):
        self.items: List[T] = list(items or [])
        self.cursor = self._clamp(cursor)

    @classmethod
    def with_items(cls, items: Iterable[T], initial_cursor: int = 0) -> "StatefulList[T]":
        """Build a list; an out-of-range cursor is clamped to the nearest valid index."""
        return cls(items, initial_cursor)

    def _clamp(self, index: int) -> int:
        if not self.items:
            return 0
        return min(max(int(index), 0), len(self.items) - 1)

    def next(self) -> None:
        if not self.items:
            return
        self.cursor = (self.cursor + 1) % len(self.items)

    def previous(self) -> None:
        if not self.items:
            return
        self.cursor = (self.cursor - 1) % len(self.items)

    def select(self, index: int) -> None:
        self.cursor = self._clamp(index)

    @property
    def selected(self) -> Optional[T]:
        """The item under the cursor, or None when empty."""
        if not self.items:
            return None
        return self.items[self.cursor]

    def is_empty(self) -> bool:
        return not self.items

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __repr__(self) -> str:
        return f"StatefulList(items={len(self.items)}, cursor={self.cursor})"


__all__ = ["StatefulList"]
