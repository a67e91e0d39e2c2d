"""A global one-line status console."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import IO, Optional

from scratchrig.events import Event

_MAX_MESSAGE = 255


class StatusLevel(IntEnum):
    """Importance of a status message."""

    VERBOSE = 0
    INFO = 1
    WARN = 2
    ALERT = 3


class Status:
    """The current status line and its level.

    Messages at INFO or above are echoed to ``stream`` (standard error by
    default). Every change fires :attr:`changed` with the new message.
    """

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        self._stream = stream
        self.message = ""
        self.level: int = StatusLevel.VERBOSE
        self.changed = Event()

    def set(self, level: int, message: str) -> None:
        """Replace the status with ``message`` at ``level``."""
        self.message = message
        self.level = level
        if level >= StatusLevel.INFO:
            stream = self._stream if self._stream is not None else sys.stderr
            stream.write(message + "\n")
        self.changed.fire(message)

    def printf(self, level: int, template: str, *args: object) -> None:
        """Set the status to ``template % args``, limited to 255 characters."""
        text = template % args if args else template
        self.set(level, text[:_MAX_MESSAGE])