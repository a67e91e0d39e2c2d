import io

from scratchrig.status import Status, StatusLevel


def test_initial_status_is_empty_and_verbose():
    status = Status(io.StringIO())
    assert status.message == ""
    assert status.level == StatusLevel.VERBOSE


def test_set_info_echoes_message_to_stream():
    stream = io.StringIO()
    status = Status(stream)
    status.set(StatusLevel.INFO, "Track import completed")
    assert stream.getvalue() == "Track import completed\n"
    assert status.message == "Track import completed"
    assert status.level == StatusLevel.INFO


def test_set_verbose_is_not_echoed():
    stream = io.StringIO()
    status = Status(stream)
    status.set(StatusLevel.VERBOSE, "quiet")
    assert stream.getvalue() == ""
    assert status.message == "quiet"


def test_set_fires_changed_event():
    status = Status(io.StringIO())
    received = []
    status.changed.watch(received.append)
    status.set(StatusLevel.WARN, "careful")
    status.set(StatusLevel.VERBOSE, "calm")
    assert received == ["careful", "calm"]


def test_printf_formats_message():
    stream = io.StringIO()
    status = Status(stream)
    status.printf(StatusLevel.ALERT, "Error importing %s", "song.mp3")
    assert status.message == "Error importing song.mp3"
    assert status.level == StatusLevel.ALERT
    assert stream.getvalue() == "Error importing song.mp3\n"


def test_printf_truncates_long_messages():
    status = Status(io.StringIO())
    status.printf(StatusLevel.VERBOSE, "%s", "a" * 1000)
    assert status.message == "a" * 255


def test_printf_without_arguments_keeps_template():
    status = Status(io.StringIO())
    status.printf(StatusLevel.VERBOSE, "100% done")
    assert status.message == "100% done"