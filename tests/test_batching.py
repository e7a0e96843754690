import json
import threading

import pytest

from fmesdk.batching import BatchEventQueue

LONG = 3600


class Recorder:
    def __init__(self, result=True, exc=None):
        self.calls = []
        self.result = result
        self.exc = exc
        self.called = threading.Event()

    def __call__(self, payload, query, headers):
        self.calls.append((payload, query, headers))
        self.called.set()
        if self.exc is not None:
            raise self.exc
        return self.result


def make_queue(send, per_request=10, interval=LONG, callback=None):
    return BatchEventQueue(per_request, interval, send, 123, "placeholder", None, callback)


def test_enqueue_below_capacity_keeps_events():
    send = Recorder()
    queue = make_queue(send)
    queue.enqueue({"n": 1})
    queue.enqueue({"n": 2})
    assert queue.snapshot() == [{"n": 1}, {"n": 2}]
    assert send.calls == []
    queue.flush_and_clear_interval()


def test_manual_flush_sends_batch_payload():
    send = Recorder()
    queue = make_queue(send)
    queue.enqueue({"n": 1})
    assert queue.flush(True) is True
    payload, query, headers = send.calls[0]
    assert payload == {"ev": [{"n": 1}]}
    assert query == {"a": "123", "env": "placeholder"}
    assert headers == {"Authorization": "placeholder", "Content-Type": "application/json"}
    assert queue.snapshot() == []
    queue.flush_and_clear_interval()


def test_flush_empty_returns_false():
    send = Recorder()
    queue = make_queue(send)
    assert queue.flush(True) is False
    assert send.calls == []
    queue.flush_and_clear_interval()


def test_failed_send_requeues_in_order():
    send = Recorder(result=False)
    queue = make_queue(send)
    queue.enqueue({"n": 1})
    queue.enqueue({"n": 2})
    assert queue.flush(True) is False
    assert queue.snapshot() == [{"n": 1}, {"n": 2}]
    queue.enqueue({"n": 3})
    assert queue.snapshot() == [{"n": 1}, {"n": 2}, {"n": 3}]
    queue.flush_and_clear_interval()


def test_send_exception_calls_flush_callback():
    received = []
    send = Recorder(exc=RuntimeError("boom"))
    queue = make_queue(send, callback=lambda err, events: received.append((err, events)))
    queue.enqueue({"n": 1})
    assert queue.flush(True) is False
    assert received[0][0] == "boom"
    assert json.loads(received[0][1]) == [{"n": 1}]
    assert queue.snapshot() == [{"n": 1}]
    queue.flush_and_clear_interval()


def test_reaching_capacity_flushes_in_background():
    send = Recorder()
    queue = make_queue(send, per_request=2)
    queue.enqueue({"n": 1})
    queue.enqueue({"n": 2})
    assert send.called.wait(5)
    assert send.calls[0][0] == {"ev": [{"n": 1}, {"n": 2}]}
    queue.flush_and_clear_interval()


def test_timer_flushes_periodically():
    send = Recorder()
    queue = make_queue(send, interval=0.05)
    queue.enqueue({"n": 1})
    assert send.called.wait(5)
    assert send.calls[0][0]["ev"] == [{"n": 1}]
    queue.flush_and_clear_interval()


def test_flush_and_clear_interval_stops_timer_and_flushes():
    send = Recorder()
    queue = make_queue(send)
    queue.enqueue({"n": 1})
    assert queue.timer_running is True
    assert queue.flush_and_clear_interval() is True
    assert queue.timer_running is False
    assert queue.snapshot() == []


def test_context_manager_flushes_on_exit():
    send = Recorder()
    with make_queue(send) as queue:
        queue.enqueue({"n": 1})
    assert len(send.calls) == 1
    assert queue.timer_running is False


@pytest.mark.parametrize("interval", [0, -1])
def test_non_positive_interval_rejected(interval):
    with pytest.raises(ValueError):
        make_queue(Recorder(), interval=interval)