import io

import pytest

from scratchrig.midimap import Action, MapType, MappingList, parse_action


def test_parse_cue():
    assert parse_action("CH0_CUE") == (0, Action.CUE, 0)


def test_parse_deletecue_overrides_cue():
    assert parse_action("CH1_DELETECUE") == (1, Action.DELETECUE, 0)


def test_parse_note_parameter():
    assert parse_action("CH1_NOTE60") == (1, Action.NOTE, 60)


def test_parse_note_without_number():
    assert parse_action("CH0_NOTE") == (0, Action.NOTE, 0)


@pytest.mark.parametrize(
    "text, action",
    [
        ("CH0_SHIFTON", Action.SHIFTON),
        ("CH0_SHIFTOFF", Action.SHIFTOFF),
        ("CH0_STARTSTOP", Action.STARTSTOP),
        ("CH0_GND", Action.GND),
        ("CH0_NEXTFILE", Action.NEXTFILE),
        ("CH0_PREVFOLDER", Action.PREVFOLDER),
        ("CH1_PITCH", Action.PITCH),
        ("CH1_JOGPIT", Action.JOGPIT),
        ("CH1_JOGPSTOP", Action.JOGPSTOP),
        ("CH0_RECORD", Action.RECORD),
        ("CH0_VOLUME", Action.VOLUME),
        ("CH0_VOLUP", Action.VOLUP),
        ("CH0_VOLDOWN", Action.VOLDOWN),
        ("CH0_VOLUHOLD", Action.VOLUHOLD),
        ("CH0_VOLDHOLD", Action.VOLDHOLD),
    ],
)
def test_parse_named_actions(text, action):
    assert parse_action(text)[1] == action


def test_parsed_values_fixed_by_header():
    assert int(parse_action("CH0_CUE")[1]) == 0
    assert int(parse_action("CH0_NOTE12")[1]) == 7
    maps = MappingList()
    maps.add(MapType.MIDI, 0, [0x90, 1, 0], 0, 0, False, 1, Action.NOTHING, 0)
    out = io.StringIO()
    maps.dump(out)
    line = out.getvalue().splitlines()[0]
    assert line.startswith("Dump Mapping - ty:0 ")
    assert "a:255," in line


@pytest.mark.parametrize("text", ["CH2_CUE", "C", "CH0_BOGUS"])
def test_parse_rejects_bad_strings(text):
    with pytest.raises(ValueError):
        parse_action(text)


def test_add_keeps_order_and_defaults():
    maps = MappingList()
    first = maps.add(MapType.IO, 0, None, 1, 5, True, 1, Action.CUE, 0)
    second = maps.add(MapType.MIDI, 1, [0x90, 36, 0], 0, 0, False, 1, Action.NOTE, 60)
    assert list(maps) == [first, second]
    assert first.midi_bytes == (0, 0, 0)
    assert second.midi_bytes == (0x90, 36, 0)
    assert first.debounce == 0


def test_add_config_uses_parsed_action():
    maps = MappingList()
    m = maps.add_config(MapType.IO, None, 0, 3, True, 1, "CH1_NEXTFILE")
    assert (m.deck_no, m.action, m.pin) == (1, Action.NEXTFILE, 3)


def test_find_io_matches_all_fields():
    maps = MappingList()
    target = maps.add(MapType.IO, 0, None, 2, 7, True, 1, Action.CUE, 0)
    maps.add(MapType.IO, 0, None, 2, 7, True, 0, Action.CUE, 0)
    assert maps.find_io(2, 7, 1) is target
    assert maps.find_io(2, 7, 3) is None
    assert maps.find_io(1, 7, 1) is None


def test_find_midi_matches_two_bytes():
    maps = MappingList()
    target = maps.add(MapType.MIDI, 0, [0x90, 36, 0], 0, 0, False, 1, Action.CUE, 0)
    assert maps.find_midi([0x90, 36, 127], 1) is target
    assert maps.find_midi([0x90, 37, 127], 1) is None
    assert maps.find_midi([0x90, 36, 127], 0) is None


def test_zero_velocity_note_on_is_note_off():
    maps = MappingList()
    off = maps.add(MapType.MIDI, 0, [0x81, 36, 0], 0, 0, False, 0, Action.CUE, 0)
    assert maps.find_midi([0x91, 36, 0], 0) is off


def test_pitch_bend_matches_status_only():
    maps = MappingList()
    bend = maps.add(MapType.MIDI, 0, [0xE0, 0, 0], 0, 0, False, 1, Action.PITCH, 0)
    assert maps.find_midi([0xE0, 12, 64], 1) is bend
    assert maps.find_midi([0xE1, 12, 64], 1) is None


def test_io_mappings_not_found_by_midi():
    maps = MappingList()
    maps.add(MapType.IO, 0, [0x90, 36, 0], 0, 0, False, 1, Action.CUE, 0)
    assert maps.find_midi([0x90, 36, 1], 1) is None


def test_dump_writes_one_line_per_mapping():
    maps = MappingList()
    maps.add(MapType.IO, 1, None, 1, 10, True, 1, Action.NEXTFILE, 0)
    maps.add(MapType.MIDI, 0, [0x90, 36, 0], 0, 0, False, 1, Action.CUE, 0)
    out = io.StringIO()
    maps.dump(out)
    lines = out.getvalue().splitlines()
    assert len(lines) == len(maps)
    assert lines[0] == (
        "Dump Mapping - ty:1 po:1 pna pl:1 ed1 mid:0:0:0- dn:1, a:10, p:0"
    )
    assert "mid:90:24:0" in lines[1]