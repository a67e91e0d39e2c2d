import threading

import pytest

from scratchrig.threads import (
    RealtimeViolation,
    is_realtime,
    mark_realtime,
    rt_not_allowed,
)


def _run_in_thread(func):
    results = {}

    def target():
        try:
            results["value"] = func()
        except Exception as exc:  # captured for the assertion
            results["error"] = exc

    thread = threading.Thread(target=target)
    thread.start()
    thread.join()
    return results


def test_new_thread_is_not_realtime():
    def body():
        return is_realtime()

    assert is_realtime() is False
    assert _run_in_thread(body) == {"value": False}


def test_marked_thread_is_realtime():
    def body():
        mark_realtime()
        return is_realtime()

    assert _run_in_thread(body)["value"] is True


def test_rt_not_allowed_raises_in_realtime_thread():
    def body():
        mark_realtime()
        with pytest.raises(RealtimeViolation) as info:
            rt_not_allowed()
        return info.type, is_realtime()

    assert _run_in_thread(body) == {"value": (RealtimeViolation, True)}


def test_rt_not_allowed_passes_in_ordinary_thread():
    def body():
        rt_not_allowed()
        return is_realtime()

    assert _run_in_thread(body) == {"value": False}


def test_marking_does_not_leak_to_other_threads():
    def body():
        mark_realtime()
        return is_realtime()

    def plain():
        return is_realtime()

    assert _run_in_thread(body)["value"] is True
    assert is_realtime() is False
    assert _run_in_thread(plain)["value"] is False


def test_violation_is_runtime_error():
    def body():
        mark_realtime()
        with pytest.raises(RuntimeError) as info:
            rt_not_allowed()
        return isinstance(info.value, RealtimeViolation)

    assert _run_in_thread(body) == {"value": True}