"""Bounded queue of timestamped input states, with look-ahead interpolation."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Tuple

BUFFER_SIZE = 1024


@dataclass
class InputState:
    """One sample of controller input."""

    timestamp: float
    target_position: float
    target_fader: int = 0


def cubic_interpolate(y0: float, y1: float, y2: float, y3: float, mu: float) -> float:
    """Cubic interpolation between ``y1`` (mu=0) and ``y2`` (mu=1)."""
    mu2 = mu * mu
    a0 = y3 - y2 - y0 + y1
    a1 = y0 - y1 - a0
    a2 = y2 - y0
    a3 = y1
    return mu * mu2 * a0 + mu2 * a1 + mu * a2 + a3


class StateQueue:
    """A FIFO of :class:`InputState` holding at most ``size - 1`` entries."""

    def __init__(self, size: int = BUFFER_SIZE) -> None:
        if size < 2:
            raise ValueError("size must be at least 2")
        self.size = size
        self._items: Deque[InputState] = deque()

    @property
    def capacity(self) -> int:
        return self.size - 1

    def __len__(self) -> int:
        return len(self._items)

    def peek(self, ahead_by: int) -> Optional[InputState]:
        """Return the entry ``ahead_by`` places from the front, or None."""
        if ahead_by < 0 or ahead_by >= len(self._items):
            return None
        return self._items[ahead_by]

    def read(self) -> Optional[InputState]:
        """Remove and return the oldest entry, or None if empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def write(self, state: InputState, overwrite_old: bool = False) -> bool:
        """Append ``state``; when full, drop the oldest or refuse.

        Returns False only when the queue is full and ``overwrite_old`` is
        false.
        """
        if len(self._items) >= self.capacity:
            if not overwrite_old:
                return False
            self._items.popleft()
        self._items.append(state)
        return True

    def interpolate(self, timestamp: float) -> Optional[Tuple[float, float]]:
        """Find the target position for ``timestamp``.

        Entries that are entirely in the past are consumed. Returns the
        (possibly advanced) timestamp and the position, or None when fewer
        than four entries are available.
        """
        while len(self._items) >= 4:
            y1 = self._items[1]
            y2 = self._items[2]
            if timestamp < y1.timestamp:
                timestamp = y1.timestamp
            if timestamp < y2.timestamp:
                return timestamp, y2.target_position
            self._items.popleft()
        return None