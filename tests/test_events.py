import pytest

from scratchrig.events import Event


def test_fire_passes_data_to_observer():
    event = Event()
    received = []
    event.watch(received.append)
    event.fire("hello")
    event.fire(42)
    assert received == ["hello", 42]


def test_newest_observer_is_called_first():
    event = Event()
    calls = []
    event.watch(lambda data: calls.append(("first", data)))
    event.watch(lambda data: calls.append(("second", data)))
    event.fire("x")
    assert calls == [("second", "x"), ("first", "x")]


def test_ignore_stops_notifications():
    event = Event()
    received = []
    event.watch(received.append)
    event.fire(1)
    event.ignore(received.append)
    event.fire(2)
    assert received == [1]
    assert len(event) == 0


def test_ignore_unknown_callback_raises():
    event = Event()
    with pytest.raises(ValueError):
        event.ignore(print)


def test_watch_requires_callable():
    event = Event()
    with pytest.raises(TypeError):
        event.watch("not callable")


def test_clear_with_observers_raises():
    event = Event()
    event.watch(lambda data: None)
    with pytest.raises(RuntimeError):
        event.clear()


def test_clear_after_all_ignored_leaves_no_observers():
    event = Event()
    received = []
    event.watch(received.append)
    event.ignore(received.append)
    event.clear()
    event.fire("ignored")
    assert received == []


def test_observer_may_ignore_itself_while_firing():
    event = Event()
    calls = []

    def once(data):
        calls.append(data)
        event.ignore(once)

    event.watch(once)
    assert len(event) == 1
    event.fire("a")
    assert len(event) == 0
    event.fire("b")
    assert calls == ["a"]