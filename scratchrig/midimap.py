"""Mappings from MIDI messages and GPIO pins to deck actions."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import IO, Iterator, List, Optional, Sequence, Tuple


class Action(IntEnum):
    """What a mapping does when it triggers."""

    CUE = 0
    SHIFTON = 1
    SHIFTOFF = 2
    STARTSTOP = 3
    START = 4
    STOP = 5
    PITCH = 6
    NOTE = 7
    GND = 8
    VOLUME = 9
    NEXTFILE = 10
    PREVFILE = 11
    RANDOMFILE = 12
    NEXTFOLDER = 13
    PREVFOLDER = 14
    RECORD = 15
    VOLUP = 16
    VOLDOWN = 17
    JOGPIT = 18
    DELETECUE = 19
    SC500 = 20
    VOLUHOLD = 21
    VOLDHOLD = 22
    JOGPSTOP = 23
    JOGREVERSE = 24
    BEND = 25
    NOTHING = 255


class MapType(IntEnum):
    """The kind of event a mapping listens for."""

    MIDI = 0
    IO = 1


# Checked in this order after CUE/DELETECUE; the first substring found wins.
_ACTION_NAMES: Tuple[Tuple[str, Action], ...] = (
    ("SHIFTON", Action.SHIFTON),
    ("SHIFTOFF", Action.SHIFTOFF),
    ("STARTSTOP", Action.STARTSTOP),
    ("GND", Action.GND),
    ("NEXTFILE", Action.NEXTFILE),
    ("PREVFILE", Action.PREVFILE),
    ("RANDOMFILE", Action.RANDOMFILE),
    ("NEXTFOLDER", Action.NEXTFOLDER),
    ("PREVFOLDER", Action.PREVFOLDER),
    ("PITCH", Action.PITCH),
    ("JOGPIT", Action.JOGPIT),
    ("JOGPSTOP", Action.JOGPSTOP),
    ("RECORD", Action.RECORD),
    ("VOLUME", Action.VOLUME),
    ("VOLUP", Action.VOLUP),
    ("VOLDOWN", Action.VOLDOWN),
    ("VOLUHOLD", Action.VOLUHOLD),
    ("VOLDHOLD", Action.VOLDHOLD),
)


def _atoi(text: str) -> int:
    """Parse a leading integer the lenient way: 0 if there is none."""
    text = text.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for ch in text:
        if not ch.isdigit():
            break
        digits += ch
    return sign * int(digits) if digits else 0


def parse_action(actions: str) -> Tuple[int, Action, int]:
    """Split an action string such as ``CH1_NOTE60`` into its parts.

    Returns ``(deck_no, action, param)``. The deck comes from the third
    character and the action from the text after the fourth. Raises
    ValueError if either cannot be recognised.
    """
    if len(actions) < 3 or actions[2] not in "01":
        raise ValueError(f"no deck number in action {actions!r}")
    deck_no = int(actions[2])
    name = actions[4:]
    param = 0

    action: Optional[Action] = None
    if "CUE" in name:
        action = Action.CUE
    if "DELETECUE" in name:
        action = Action.DELETECUE
    else:
        for key, value in _ACTION_NAMES:
            if key in name:
                action = value
                break
        else:
            if "NOTE" in name:
                action = Action.NOTE
                param = _atoi(actions[8:]) & 0xFF

    if action is None:
        raise ValueError(f"unknown action {actions!r}")
    return deck_no, action, param


@dataclass
class Mapping:
    """A binding between a MIDI or IO event and an action on a deck."""

    map_type: MapType
    midi_bytes: Tuple[int, int, int]
    port: int
    pin: int
    pullup: bool
    edge: int
    deck_no: int
    action: Action
    param: int = 0
    debounce: int = 0


def _normalise_midi(midi_bytes: Sequence[int]) -> Tuple[int, int, int]:
    status, data1, data2 = (b & 0xFF for b in midi_bytes[:3])
    # A note-on with zero velocity is a note-off.
    if status & 0xF0 == 0x90 and data2 == 0:
        status = 0x80 | (status & 0x0F)
    return status, data1, data2


class MappingList:
    """Mappings in the order they were added; lookups return the first match."""

    def __init__(self) -> None:
        self._maps: List[Mapping] = []

    def __iter__(self) -> Iterator[Mapping]:
        return iter(self._maps)

    def __len__(self) -> int:
        return len(self._maps)

    def add(
        self,
        map_type: MapType,
        deck_no: int,
        midi_bytes: Optional[Sequence[int]],
        port: int,
        pin: int,
        pullup: bool,
        edge: int,
        action: Action,
        param: int,
    ) -> Mapping:
        """Append a new mapping and return it."""
        if midi_bytes is None:
            stored = (0, 0, 0)
        else:
            if len(midi_bytes) < 3:
                raise ValueError("MIDI messages have three bytes")
            stored = tuple(b & 0xFF for b in midi_bytes[:3])
        mapping = Mapping(
            map_type=MapType(map_type),
            midi_bytes=stored,  # type: ignore[arg-type]
            port=port,
            pin=pin,
            pullup=bool(pullup),
            edge=edge,
            deck_no=deck_no,
            action=Action(action),
            param=param,
        )
        self._maps.append(mapping)
        return mapping

    def add_config(
        self,
        map_type: MapType,
        midi_bytes: Optional[Sequence[int]],
        port: int,
        pin: int,
        pullup: bool,
        edge: int,
        actions: str,
    ) -> Mapping:
        """Append a mapping described by an action string from the config."""
        deck_no, action, param = parse_action(actions)
        return self.add(
            map_type, deck_no, midi_bytes, port, pin, pullup, edge, action, param
        )

    def find_midi(self, midi_bytes: Sequence[int], edge: int) -> Optional[Mapping]:
        """Return the first MIDI mapping matching the message and edge.

        Pitch-bend mappings match on the status byte alone; all others on
        the status byte and the first data byte.
        """
        status, data1, _ = _normalise_midi(midi_bytes)
        for mapping in self._maps:
            if mapping.map_type != MapType.MIDI or mapping.edge != edge:
                continue
            first, second, _ = mapping.midi_bytes
            if first != status:
                continue
            if first & 0xF0 == 0xE0 or second == data1:
                return mapping
        return None

    def find_io(self, port: int, pin: int, edge: int) -> Optional[Mapping]:
        """Return the first IO mapping for this port, pin and edge."""
        return next(
            (
                m
                for m in self._maps
                if m.map_type == MapType.IO
                and m.pin == pin
                and m.edge == edge
                and m.port == port
            ),
            None,
        )

    def dump(self, out: Optional[IO[str]] = None) -> None:
        """Write one line describing each mapping."""
        stream = out if out is not None else sys.stdout
        for m in self._maps:
            b0, b1, b2 = m.midi_bytes
            stream.write(
                f"Dump Mapping - ty:{int(m.map_type)} po:{m.port} pn{m.pin:x} "
                f"pl:{int(m.pullup):x} ed{m.edge:x} mid:{b0:x}:{b1:x}:{b2:x}- "
                f"dn:{m.deck_no}, a:{int(m.action)}, p:{m.param}\n"
            )