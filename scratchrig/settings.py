"""Rig settings and the configuration file that overrides them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from scratchrig.midimap import MappingList, MapType

log = logging.getLogger(__name__)

DEFAULT_PATHS = ("/media/sda/scsettings.txt", "/var/scsettings.txt")

# Every note on a channel is bound when this note number is configured.
ALL_NOTES = 255

# Configuration keys holding a single integer, and the setting each sets.
_INT_KEYS = {
    "buffersize": "buffersize",
    "faderclosepoint": "fader_close_point",
    "faderopenpoint": "fader_open_point",
    "platterenabled": "platter_enabled",
    "disablevolumeadc": "disable_volume_adc",
    "platterspeed": "platter_speed",
    "samplerate": "sample_rate",
    "updaterate": "update_rate",
    "debouncetime": "debounce_time",
    "holdtime": "hold_time",
    "slippiness": "slippiness",
    "brakespeed": "brake_speed",
    "pitchrange": "pitch_range",
    "jogreverse": "jog_reverse",
    "cutbeats": "cut_beats",
}


@dataclass
class Settings:
    """Tunable behaviour of the rig."""

    buffersize: int = 256  # output buffer size
    sample_rate: int = 48000
    single_vca: int = 0
    doublecut: int = 0
    hamster: int = 0
    fader_open_point: int = 10  # needed to open a closed fader
    fader_close_point: int = 2  # needed to close an open fader
    update_rate: int = 2000  # delay between input loop iterations
    platter_enabled: int = 1
    platter_speed: int = 2275  # platter movement per second of audio
    debounce_time: int = 5
    hold_time: int = 100
    slippiness: int = 200
    brake_speed: int = 3000
    pitch_range: int = 50  # of MIDI pitch commands
    midi_delay: int = 5  # seconds to wait before looking for MIDI devices
    disable_volume_adc: int = 0
    disable_pic_buttons: int = 0
    vol_amount: float = 0.03
    vol_amount_held: float = 0.001
    jog_reverse: int = 0
    cut_beats: int = 0
    initial_volume: float = 0.125
    midi_remapped: bool = False
    io_remapped: bool = False


def count_chars(text: str, char: str) -> int:
    """Return how many times ``char`` occurs in ``text``."""
    return text.count(char)


def _atoi(text: Optional[str]) -> int:
    """Parse a leading integer leniently: 0 when there is none."""
    if text is None:
        raise ValueError("missing value")
    text = text.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = []
    for ch in text:
        if not ch.isdigit():
            break
        digits.append(ch)
    return sign * int("".join(digits)) if digits else 0


def _byte(value: int) -> int:
    return value & 0xFF


def _signed_byte(value: int) -> int:
    value &= 0xFF
    return value - 256 if value > 127 else value


def _tokens(text: str, delim: str) -> List[str]:
    """Split like strtok: empty fields between delimiters are dropped."""
    return [t for t in text.split(delim) if t]


def _field(tokens: Sequence[str], index: int) -> str:
    try:
        return tokens[index]
    except IndexError:
        raise ValueError("too few fields") from None


def _midi_line(value: str, maps: MappingList) -> None:
    fields = _tokens(value, ",")
    control_type = _byte(_atoi(_field(fields, 0)))
    channel = _byte(_atoi(_field(fields, 1)))
    note = _byte(_atoi(_field(fields, 2)))
    edge = _signed_byte(_atoi(_field(fields, 3)))
    actions = _field(fields, 4)
    status = _byte((control_type << 4) | channel)

    if note == ALL_NOTES:
        for number in range(128):
            maps.add_config(
                MapType.MIDI, (status, number, 0), 0, 0, False, edge,
                f"{actions}{number}",
            )
    else:
        maps.add_config(MapType.MIDI, (status, note, 0), 0, 0, False, edge, actions)


def _io_line(value: str, maps: MappingList) -> None:
    fields = _tokens(value, ",")
    port = 0
    if count_chars(value, ",") == 4:
        port = _byte(_atoi(_field(fields, 0)))
        fields = fields[1:]
    pin = _byte(_atoi(_field(fields, 0)))
    pullup = bool(_byte(_atoi(_field(fields, 1))))
    edge = _signed_byte(_atoi(_field(fields, 2)))
    actions = _field(fields, 3)
    maps.add_config(MapType.IO, None, port, pin, pullup, edge, actions)


def _apply_line(settings: Settings, line: str, maps: MappingList) -> None:
    tokens = _tokens(line.rstrip("\r\n"), "=")
    param = tokens[0] if tokens else ""
    value = tokens[1] if len(tokens) > 1 else None

    if param in _INT_KEYS:
        setattr(settings, _INT_KEYS[param], _atoi(value))
    elif "midii" in param:
        settings.midi_remapped = True
        if value is None:
            raise ValueError("missing value")
        _midi_line(value, maps)
    elif "io" in param:
        settings.io_remapped = True
        if value is None:
            raise ValueError("missing value")
        _io_line(value, maps)
    elif param == "mididelay":
        settings.midi_delay = _atoi(value)
    else:
        log.warning(
            "Unrecognised configuration line - Param : %s , value : %s", param, value
        )


def parse_settings(lines: Iterable[str], maps: MappingList) -> Settings:
    """Build settings from configuration lines, adding mappings to ``maps``.

    Lines are ``key=value``; blank lines and lines starting with ``#`` are
    ignored. Malformed lines are logged and skipped.
    """
    settings = Settings()
    for line in lines:
        if len(line) < 2 or line.startswith("#"):
            continue
        try:
            _apply_line(settings, line, maps)
        except ValueError as exc:
            log.warning("Bad configuration line %r: %s", line.rstrip("\r\n"), exc)
    return settings


def load_settings(
    paths: Optional[Sequence[str]] = None, maps: Optional[MappingList] = None
) -> Settings:
    """Read settings from the first of ``paths`` that can be opened.

    When none can be opened the defaults are returned.
    """
    if maps is None:
        maps = MappingList()
    settings = Settings()
    for path in paths if paths is not None else DEFAULT_PATHS:
        try:
            with open(path, encoding="utf-8", errors="replace") as handle:
                settings = parse_settings(handle, maps)
        except OSError:
            continue
        break

    log.info(
        "bs %d, fcp %d, fop %d, pe %d, ps %d, sr %d, ur %d",
        settings.buffersize,
        settings.fader_close_point,
        settings.fader_open_point,
        settings.platter_enabled,
        settings.platter_speed,
        settings.sample_rate,
        settings.update_rate,
    )
    return settings