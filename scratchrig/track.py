"""Reference-counted audio tracks, filled with PCM from an import process."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from array import array
from typing import Iterator, List, Optional, Tuple

from scratchrig.status import Status, StatusLevel
from scratchrig.threads import rt_not_allowed

log = logging.getLogger(__name__)

RATE = 44100
TRACK_CHANNELS = 2
TRACK_MAX_BLOCKS = 64
TRACK_BLOCK_SAMPLES = 2048 * 1024
TRACK_PPM_RES = 64
TRACK_OVERVIEW_RES = 2048

SAMPLE = 2 * TRACK_CHANNELS  # bytes per stereo sample
MAX_SAMPLES = TRACK_MAX_BLOCKS * TRACK_BLOCK_SAMPLES

_READ_SIZE = 65536


class TrackError(Exception):
    """A track could not be created or could not hold more audio."""


class Track:
    """Stereo 16-bit PCM audio with level meters computed as it arrives."""

    def __init__(
        self,
        importer: Optional[str] = None,
        path: Optional[str] = None,
        rate: int = RATE,
        max_samples: int = MAX_SAMPLES,
    ) -> None:
        self.importer = importer
        self.path = path
        self.rate = rate
        self.max_samples = max_samples
        self.refcount = 0
        self.bytes = 0
        self.terminated = False
        self.finished = False
        self.process: Optional[subprocess.Popen] = None
        self.status: Optional[Status] = None
        self.store: Optional["TrackStore"] = None

        self._samples = array("h")
        self._pending = bytearray()
        self._ppm_level = 0
        self._overview_level = 0
        self._ppm = bytearray()
        self._overview = bytearray()

    @property
    def length(self) -> int:
        """Number of complete stereo samples held."""
        return len(self._samples) // TRACK_CHANNELS

    def __len__(self) -> int:
        return self.length

    def commit(self, data: bytes) -> None:
        """Append raw native-endian PCM bytes.

        Whole samples are metered and stored; a trailing partial sample is
        kept until the rest arrives. If the track is full, the part that
        fits is kept and TrackError is raised.
        """
        room = self.max_samples * SAMPLE - self.bytes
        accepted = bytes(data[: max(room, 0)])
        self.bytes += len(accepted)
        self._pending += accepted

        whole = len(self._pending) // SAMPLE * SAMPLE
        if whole:
            incoming = array("h")
            incoming.frombytes(bytes(self._pending[:whole]))
            del self._pending[:whole]
            self._meter(incoming)

        if len(accepted) < len(data):
            raise TrackError("Maximum track length reached")

    def _meter(self, incoming: array) -> None:
        position = self.length
        ppm = self._ppm_level
        overview = self._overview_level
        values = iter(incoming)
        for left, right in zip(values, values):
            v = (abs(left) + abs(right)) & 0xFFFF

            # PPM-style fast meter approximation
            if v > ppm:
                ppm += (v - ppm) >> 3
            else:
                ppm -= (ppm - v) >> 9
            self._store_meter(self._ppm, position // TRACK_PPM_RES, ppm >> 8)

            # Slow overview meter in fixed point
            w = v << 16
            if w > overview:
                overview += (w - overview) >> 8
            else:
                overview -= (overview - w) >> 17
            self._store_meter(
                self._overview, position // TRACK_OVERVIEW_RES, overview >> 24
            )
            position += 1
        self._ppm_level = ppm
        self._overview_level = overview
        self._samples.extend(incoming)

    @staticmethod
    def _store_meter(meter: bytearray, index: int, value: int) -> None:
        if index == len(meter):
            meter.append(value & 0xFF)
        else:
            meter[index] = value & 0xFF

    def _check(self, sample: int) -> None:
        if not 0 <= sample < self.length:
            raise IndexError(f"sample {sample} outside track of {self.length}")

    def get_ppm(self, sample: int) -> int:
        """Return the pseudo-PPM meter value at ``sample``."""
        self._check(sample)
        return self._ppm[sample // TRACK_PPM_RES]

    def get_overview(self, sample: int) -> int:
        """Return the overview meter value at ``sample``."""
        self._check(sample)
        return self._overview[sample // TRACK_OVERVIEW_RES]

    def get_sample(self, sample: int) -> Tuple[int, int]:
        """Return the (left, right) values of ``sample``."""
        self._check(sample)
        base = sample * TRACK_CHANNELS
        return self._samples[base], self._samples[base + 1]

    def is_importing(self) -> bool:
        """Return True while the import process is running."""
        return self.process is not None

    def fileno(self) -> int:
        """Return the descriptor the import process writes audio to."""
        if self.process is None or self.process.stdout is None:
            raise RuntimeError("track is not importing")
        return self.process.stdout.fileno()

    def _read_from_pipe(self) -> bool:
        """Read what is available; return True once the import is over."""
        fd = self.fileno()
        while True:
            try:
                data = os.read(fd, _READ_SIZE)
            except BlockingIOError:
                return False
            except OSError as exc:
                log.error("read: %s", exc)
                return True
            if not data:
                return True
            try:
                self.commit(data)
            except TrackError as exc:
                log.error("%s", exc)
                return True

    def _stop_import(self) -> None:
        process = self.process
        assert process is not None and process.stdout is not None
        process.stdout.close()
        code = process.wait()
        if code == 0:
            log.info("Track import completed")
            self.finished = True
        else:
            log.info("Track import completed with status %d", code)
            if not self.terminated and self.status is not None:
                self.status.printf(
                    StatusLevel.ALERT, "Error importing %s", self.path
                )
        self.process = None

    def terminate(self) -> None:
        """Ask the import process to stop early."""
        if self.process is None:
            raise RuntimeError("track is not importing")
        self.process.terminate()
        self.terminated = True

    def handle(self) -> bool:
        """Take in audio from the import process.

        Returns True when the import has completed; the reference held
        for the import is then released.
        """
        if self.process is None:
            raise RuntimeError("track is not importing")
        if not self._read_from_pipe():
            return False
        self._stop_import()
        if self.store is not None:
            self.store.release(self)
        return True


class TrackStore:
    """Shares tracks between users, importing each path once."""

    def __init__(self, rig=None, status: Optional[Status] = None) -> None:
        self.rig = rig
        self.status = status
        self._tracks: List[Track] = []
        self._empty = Track()
        self._empty.refcount = 1

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(tuple(self._tracks))

    def _start_import(self, track: Track) -> None:
        rt_not_allowed()
        log.info("Importing '%s'...", track.path)
        try:
            process = subprocess.Popen(
                ["import", str(track.path), str(RATE)],
                executable=track.importer,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
            )
        except OSError as exc:
            raise TrackError(f"cannot start importer: {exc}") from exc
        assert process.stdout is not None
        os.set_blocking(process.stdout.fileno(), False)
        track.process = process

    def acquire_by_import(self, importer: str, path: str) -> Track:
        """Return the track for ``importer`` and ``path``, importing if new."""
        for track in self._tracks:
            if track.importer == importer and track.path == path:
                self.acquire(track)
                return track

        track = Track(importer, path)
        track.status = self.status
        track.store = self
        self._start_import(track)
        self._tracks.insert(0, track)

        track.refcount += 1  # held on behalf of the import
        if self.rig is not None:
            self.rig.post_track(track)

        self.acquire(track)
        return track

    def acquire_empty(self) -> Track:
        """Return the shared track that holds no audio."""
        self._empty.refcount += 1
        return self._empty

    def acquire(self, track: Track) -> None:
        """Take another reference on ``track``."""
        track.refcount += 1

    def release(self, track: Track) -> None:
        """Drop a reference; the track is forgotten when none remain."""
        if track.refcount <= 0:
            raise ValueError("track has no references to release")
        track.refcount -= 1

        # Only the import holds a reference: stop it to save resources.
        if track.refcount == 1 and track.is_importing():
            track.terminate()
            return

        if track.refcount == 0:
            if track is self._empty:
                raise RuntimeError("the empty track cannot be freed")
            if track in self._tracks:
                self._tracks.remove(track)