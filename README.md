# scratchrig

A library of the non-audio core pieces of a scratch sampler. It has no
dependencies outside the standard library.

## Modules

- `scratchrig.settings`: the `Settings` dataclass holds the tunable values,
  such as `platter_speed`, `hold_time` and `pitch_range`, each with its
  default. `parse_settings(lines, maps)` reads `key=value` lines. It skips
  blank lines and lines that start with `#`. Keys containing `midii` or `io`
  become mappings in `maps`. Lines that are malformed or unknown are logged
  and skipped. `load_settings(paths, maps)` reads the first of `paths` that
  can be opened and returns the defaults if none can be. `count_chars`
  counts the occurrences of a character.
- `scratchrig.midimap`: `Action`, `MapType`, `Mapping` and `MappingList`.
  - `MappingList.add` and `MappingList.add_config` append mappings.
  - `MappingList.find_midi` and `MappingList.find_io` return the first match.
    A note-on with zero velocity counts as a note-off. Pitch-bend mappings
    match on the status byte alone.
  - `MappingList.dump` writes one line for each mapping.
  - `parse_action` splits an action string such as `CH1_NOTE60` into a deck
    number, an action and a parameter. It raises `ValueError` when it
    recognises neither.
- `scratchrig.playlist`: `load_file_structure(base_path)` indexes each
  sub-folder of `base_path` into a `Playlist` of `Folder` and `PlaylistFile`
  objects, in name order. It skips hidden entries and `.cue` files. Every file
  gets a global index, and `Playlist.file_at` looks a file up by that index.
  `Playlist.dump` lists each folder with its files.
- `scratchrig.track`:
  - `Track` holds stereo 16-bit PCM, together with PPM and overview meters
    that are computed as data arrives through `Track.commit`.
  - `TrackStore` hands out reference-counted tracks. `acquire_by_import`
    starts the given importer program as a subprocess with the arguments
    `import <path> 44100`. It reads raw PCM from the program's standard
    output and imports each importer/path pair once.
  - `TrackError` is raised when an importer cannot be started or a track is
    full.
- `scratchrig.rig`: `Rig` is a service loop. `Rig.main` waits on the
  descriptors of posted tracks and calls their `handle()` until
  `Rig.quit` is called. `Rig.locked()` is a context manager that holds the
  rig lock. `Rig.close` releases the event pipe.
- `scratchrig.pitch`: `PitchFilter` is an alpha-beta filter that estimates
  pitch from changes in position.
- `scratchrig.statequeue`: `StateQueue` is a bounded FIFO of `InputState`
  with `peek`, `read`, `write` and `interpolate`. The module also provides
  `cubic_interpolate`.
- `scratchrig.status`: `Status` and `StatusLevel` make up a one-line status
  console. Messages at INFO and above are echoed to a stream. Every change
  fires `Status.changed`, which is a `scratchrig.events.Event`.
- `scratchrig.threads`: `mark_realtime`, `is_realtime` and `rt_not_allowed`
  guard blocking calls. `rt_not_allowed` raises `RealtimeViolation` when it
  is called from a thread marked as realtime.

## Install

    pip install .

To run the tests:

    pip install .[test]
    pytest

## Example

    from scratchrig.midimap import MappingList
    from scratchrig.settings import parse_settings

    maps = MappingList()
    settings = parse_settings(
        ["platterspeed=3072\n", "io=0,1,1,CH0_STARTSTOP\n"],
        maps,
    )
    print(settings.platter_speed)    # 3072
    print(maps.find_io(0, 0, 1))     # the STARTSTOP mapping for deck 0

## What it does not do

The package has no command-line program. It plays no audio and reads no
sensors, buttons or MIDI devices. It provides no decks, players or cue
points. Tracks are filled only by an importer program that you supply.