"""Queue that batches outgoing events and sends them on size or on a timer."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Optional

_log = logging.getLogger(__name__)

SendFunction = Callable[[dict[str, Any], dict[str, str], dict[str, str]], bool]
FlushCallback = Callable[[str, str], None]


class BatchEventQueue:
    """Collects events and posts them in batches.

    ``send`` is called with the batch payload ``{"ev": [...]}``, the query
    parameters and the request headers, and returns whether the batch was
    accepted. A batch that is not accepted goes back to the front of the queue.
    """

    def __init__(
        self,
        events_per_request: int,
        request_time_interval: float,
        send: SendFunction,
        account_id: int,
        sdk_key: str,
        logger: Optional[logging.Logger] = None,
        flush_callback: Optional[FlushCallback] = None,
    ) -> None:
        if request_time_interval <= 0:
            raise ValueError(
                f"request_time_interval must be positive, got {request_time_interval}"
            )
        self.events_per_request = events_per_request
        self.request_time_interval = request_time_interval
        self.account_id = account_id
        self.sdk_key = sdk_key
        self._send = send
        self._flush_callback = flush_callback
        self._logger = logger or _log
        self._queue: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._timer: Optional[threading.Thread] = threading.Thread(
            target=self._run_timer, name="batch-event-timer", daemon=True
        )
        self._timer.start()
        self._logger.debug(
            "Batch event queue initialized with eventsPerRequest=%s and requestTimeInterval=%s",
            events_per_request,
            request_time_interval,
        )

    def __enter__(self) -> "BatchEventQueue":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.flush_and_clear_interval()

    def _run_timer(self) -> None:
        while not self._stop.wait(self.request_time_interval):
            self.flush(False)

    def enqueue(self, event_data: dict[str, Any]) -> None:
        """Add an event; a full queue is flushed in the background."""
        with self._lock:
            self._queue.append(event_data)
            size = len(self._queue)
        self._logger.debug("Event added to queue. Current queue size: %s", size)
        if size >= self.events_per_request:
            self._logger.debug("Queue reached max capacity, flushing")
            threading.Thread(target=self.flush, args=(False,), daemon=True).start()

    def flush(self, manual: bool = False) -> bool:
        """Send everything queued; return True when the batch was accepted."""
        with self._lock:
            if not self._queue:
                events: list[dict[str, Any]] = []
            else:
                events = self._queue
                self._queue = []
        if not events:
            self._logger.debug("Batch queue is empty, nothing to flush")
            return False

        how = "manually" if manual else ""
        self._logger.debug(
            "Flushing %s %s events for account %s", how, len(events), self.account_id
        )
        if self._send_batch(events):
            self._logger.info("Flushed %s events %s", len(events), how)
            return True

        with self._lock:
            self._queue = events + self._queue
        self._logger.error(
            "Batch flush failed for account %s; events kept for retry", self.account_id
        )
        return False

    def _send_batch(self, events: list[dict[str, Any]]) -> bool:
        payload = {"ev": events}
        query = {"a": str(self.account_id), "env": self.sdk_key}
        headers = {"Authorization": self.sdk_key, "Content-Type": "application/json"}
        try:
            return bool(self._send(payload, query, headers))
        except Exception as exc:
            if self._flush_callback is not None:
                self._flush_callback(str(exc), json.dumps(events))
            self._logger.error(
                "Error sending batch events for account %s: %s", self.account_id, exc
            )
            return False

    def flush_and_clear_interval(self) -> bool:
        """Stop the timer and flush what remains."""
        timer = self._timer
        if timer is not None:
            self._stop.set()
            if timer is not threading.current_thread():
                timer.join()
            self._timer = None
        return self.flush(True)

    @property
    def timer_running(self) -> bool:
        """True while the periodic flush timer is active."""
        return self._timer is not None and self._timer.is_alive()

    def snapshot(self) -> list[dict[str, Any]]:
        """Return a copy of the events currently queued."""
        with self._lock:
            return list(self._queue)