"""A small signal/slot mechanism for notifying interested parties of changes."""

from __future__ import annotations

from typing import Any, Callable, List

Callback = Callable[[Any], None]


class Event:
    """An event that observers can watch and that can be fired with data.

    Observers are called newest first, each with the data passed to
    :meth:`fire`.
    """

    def __init__(self) -> None:
        self._observers: List[Callback] = []

    def __len__(self) -> int:
        return len(self._observers)

    def watch(self, callback: Callback) -> None:
        """Start calling ``callback`` whenever this event fires."""
        if not callable(callback):
            raise TypeError("callback must be callable")
        self._observers.insert(0, callback)

    def ignore(self, callback: Callback) -> None:
        """Stop calling ``callback``; raise ValueError if it is not watching."""
        try:
            self._observers.remove(callback)
        except ValueError:
            raise ValueError("callback is not watching this event") from None

    def fire(self, data: Any = None) -> None:
        """Call every watching observer with ``data``."""
        for callback in tuple(self._observers):
            callback(data)

    def clear(self) -> None:
        """Check the event is ready to be discarded: no observer may remain."""
        if self._observers:
            raise RuntimeError(
                f"event still has {len(self._observers)} observer(s)"
            )