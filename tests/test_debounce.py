import threading

from src.taskflow.debounce import Debouncer


def test_only_last_scheduled_call_fires():
    fired = threading.Event()
    calls = []

    def callback(value):
        calls.append(value)
        fired.set()

    debouncer = Debouncer(0.05, callback)
    debouncer.schedule("a")
    debouncer.schedule("ab")
    debouncer.schedule("abc")

    assert fired.wait(2)
    assert calls == ["abc"]
    assert not debouncer.pending


def test_flush_runs_immediately_and_cancels_pending():
    calls = []
    debouncer = Debouncer(10, calls.append)
    debouncer.schedule("typed")
    assert debouncer.pending

    debouncer.flush("entered")
    assert calls == ["entered"]
    assert not debouncer.pending


def test_cancel():
    calls = []
    debouncer = Debouncer(10, calls.append)
    debouncer.schedule("typed")
    debouncer.cancel()
    assert not debouncer.pending
    assert calls == []
