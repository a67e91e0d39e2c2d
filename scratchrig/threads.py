"""Checks that keep blocking operations out of the realtime thread."""

from __future__ import annotations

import threading

_state = threading.local()


class RealtimeViolation(RuntimeError):
    """A realtime thread called something that may block."""


def mark_realtime() -> None:
    """Declare the calling thread to be a realtime thread."""
    _state.realtime = True


def is_realtime() -> bool:
    """Return True if the calling thread was marked as realtime."""
    return getattr(_state, "realtime", False)


def rt_not_allowed() -> None:
    """Raise RealtimeViolation if the calling thread is realtime.

    Call this before taking a lock or doing anything else that may block.
    """
    if is_realtime():
        raise RealtimeViolation("Realtime thread called a blocking function")