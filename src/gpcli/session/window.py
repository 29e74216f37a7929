"""Sliding window of in-flight measurements for infinite mode."""

from __future__ import annotations

from typing import Optional

from .history import HistoryItem


class PollingWindow:
    """Bounded, ordered set of outstanding measurements with a sweep cursor.

    Items are polled FIFO, one sweep per round (`restart` then `next` until it
    returns None). Items may be removed mid-sweep without the cursor skipping
    or revisiting anything.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"Window capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.items: list[HistoryItem] = []
        self.pos = 0

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self):
        return (
            f"PollingWindow(capacity={self.capacity}, pos={self.pos}, "
            f"ids={[item.id for item in self.items]})"
        )

    def restart(self) -> None:
        self.pos = 0

    def next(self) -> Optional[HistoryItem]:
        if self.pos >= len(self.items):
            return None
        self.pos += 1
        return self.items[self.pos - 1]

    def append(self, item: HistoryItem) -> None:
        if len(self.items) >= self.capacity:
            raise RuntimeError(
                f"PollingWindow full ({self.capacity}), check can_append() first"
            )
        self.items.append(item)

    def remove(self, item: HistoryItem) -> None:
        kept = []
        for i, el in enumerate(self.items):
            if el is item:
                if i < self.pos:
                    self.pos -= 1
            else:
                kept.append(el)
        self.items = kept

    def can_append(self) -> bool:
        """Spare capacity and at least one held item partially finished."""
        if len(self.items) >= self.capacity:
            return False
        return any(el.partially_finished for el in self.items)
