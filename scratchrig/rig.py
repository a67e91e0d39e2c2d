"""The main service loop: waits on importing tracks and cross-thread events."""

from __future__ import annotations

import os
import select
import threading
from contextlib import contextmanager
from typing import Iterator, List, Protocol, Tuple

from scratchrig.threads import rt_not_allowed

EVENT_WAKE = b"\x00"
EVENT_QUIT = b"\x01"

# Descriptors watched besides the event pipe; further tracks wait their turn.
MAX_POLLED_TRACKS = 3


class Handled(Protocol):
    def fileno(self) -> int: ...

    def handle(self) -> bool: ...


class Rig:
    """Runs non-realtime work for tracks that are importing.

    A posted track must provide ``fileno()`` and ``handle()``; ``handle`` is
    called when the descriptor is readable and returns True once the
    import is complete, after which the rig forgets the track.
    """

    def __init__(self) -> None:
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        self._lock = threading.RLock()
        self._tracks: List[Handled] = []
        self._closed = False

    def __enter__(self) -> "Rig":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._tracks)

    @property
    def tracks(self) -> Tuple[Handled, ...]:
        return tuple(self._tracks)

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the rig lock for the duration of the block."""
        rt_not_allowed()
        with self._lock:
            yield

    def _post(self, event: bytes) -> None:
        rt_not_allowed()
        if self._closed:
            raise ValueError("rig is closed")
        os.write(self._write_fd, event)

    def post_track(self, track: Handled) -> None:
        """Handle ``track`` until its import has completed."""
        with self.locked():
            self._tracks.insert(0, track)
        self._post(EVENT_WAKE)

    def quit(self) -> None:
        """Ask the main loop to return; safe from any non-realtime thread."""
        self._post(EVENT_QUIT)

    def _drain_events(self) -> bool:
        """Consume pending events; return True if asked to quit."""
        while True:
            try:
                data = os.read(self._read_fd, 1)
            except BlockingIOError:
                return False
            if not data:
                return False
            if data == EVENT_QUIT:
                return True
            if data != EVENT_WAKE:
                raise RuntimeError(f"unknown rig event {data!r}")

    def main(self) -> None:
        """Service tracks until :meth:`quit` is called."""
        rt_not_allowed()
        self._lock.acquire()
        try:
            while True:
                watched = {
                    track.fileno(): track
                    for track in self._tracks[:MAX_POLLED_TRACKS]
                }
                self._lock.release()
                try:
                    readable, _, _ = select.select(
                        [self._read_fd, *watched], [], []
                    )
                finally:
                    self._lock.acquire()

                if self._read_fd in readable and self._drain_events():
                    return

                for fd in readable:
                    track = watched.get(fd)
                    if track is None or track not in self._tracks:
                        continue
                    if track.handle():
                        self._tracks.remove(track)
        finally:
            self._lock.release()

    def close(self) -> None:
        """Release the event pipe."""
        if self._closed:
            return
        self._closed = True
        os.close(self._read_fd)
        os.close(self._write_fd)