from __future__ import annotations

from typing import Iterable

from jobtail.errors import InvalidCapacity


class RingBuffer:
    """Fixed-capacity store of the most recently pushed lines.

    Once full, each push overwrites the oldest slot. ``total_seen`` keeps
    counting every push, so callers can report how much was dropped.
    """

    def __init__(self, capacity: int) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidCapacity(capacity)
        self.capacity = capacity
        self._slots: list[str | None] = [None] * capacity
        self.write_cursor = 0
        self.filled = 0
        self.total_seen = 0

    def __len__(self) -> int:
        return self.filled

    @property
    def wrapped(self) -> bool:
        return self.total_seen > self.capacity

    def push(self, line: str) -> None:
        self._slots[self.write_cursor] = line
        self.write_cursor = (self.write_cursor + 1) % self.capacity
        if self.filled < self.capacity:
            self.filled += 1
        self.total_seen += 1

    def extend(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.push(line)

    def linearize(self) -> list[str]:
        if self.filled < self.capacity:
            return list(self._slots[: self.filled])
        # oldest surviving line sits under the cursor once the buffer is full
        start = self.write_cursor
        return list(self._slots[start:] + self._slots[:start])

    def tail(self, count: int) -> list[str]:
        if count <= 0:
            return []
        return self.linearize()[-count:]
