"""Index every track in a two-level folder tree."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import IO, Iterator, List, Optional

log = logging.getLogger(__name__)


@dataclass
class PlaylistFile:
    """A track (beat or sample) and its position across the whole playlist."""

    path: str
    index: int


@dataclass
class Folder:
    """A folder and the files in it, in name order."""

    path: str
    files: List[PlaylistFile] = field(default_factory=list)


@dataclass
class Playlist:
    """Folders that hold at least one file, in name order."""

    folders: List[Folder] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(folder.files) for folder in self.folders)

    def __len__(self) -> int:
        return self.total

    def __iter__(self) -> Iterator[PlaylistFile]:
        for folder in self.folders:
            yield from folder.files

    def file_at(self, index: int) -> Optional[PlaylistFile]:
        """Return the file with the given index, or None."""
        return next((f for f in self if f.index == index), None)

    def dump(self, out: Optional[IO[str]] = None) -> None:
        """Write one "folder - file" line per file."""
        stream = out if out is not None else sys.stdout
        for folder in self.folders:
            for item in folder.files:
                stream.write(f"{folder.path} - {item.path}\n")


def _sorted_entries(path: str) -> List[str]:
    try:
        return sorted(os.listdir(path))
    except OSError:
        return []


def load_file_structure(base_path: str) -> Playlist:
    """Index the subfolders of ``base_path`` and the files inside them.

    ``base_path`` is joined to subfolder names directly, so it normally
    ends with a separator. Hidden entries and cue sheets are skipped, and
    folders without files are left out. A missing base folder gives an
    empty playlist.
    """
    log.info("indexing %s", base_path)
    playlist = Playlist()
    count = 0

    for name in _sorted_entries(base_path):
        if name.startswith("."):
            continue
        folder_path = f"{base_path}{name}"
        if not os.path.isdir(folder_path):
            continue

        files = []
        for entry in _sorted_entries(folder_path):
            if entry.startswith(".") or ".cue" in entry:
                continue
            files.append(PlaylistFile(f"{folder_path}/{entry}", count))
            count += 1

        if files:
            playlist.folders.append(Folder(folder_path, files))

    log.info("Added folder %s : %d files found", base_path, count)
    return playlist