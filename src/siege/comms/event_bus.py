"""EventBus — thread-safe pub/sub for battle events.

The engine publishes notable occurrences (waves, hits, eliminations, the
end of the battle) here so presentation and persistence collaborators
can react without holding a reference into simulation state.  Payloads
are plain dicts built fresh for every event.
"""

from __future__ import annotations

import queue
import threading


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self, maxsize: int = 100) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[queue.Queue] = []
        self._maxsize = maxsize

    def subscribe(self) -> queue.Queue:
        """Subscribe to events. Returns a Queue that receives every event.

        Messages look like ``{"type": "wave_spawned", "data": {...}}``.
        """
        q: queue.Queue = queue.Queue(maxsize=self._maxsize)
        with self._lock:
            self._subscribers.append(q)
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            try:
                self._subscribers.remove(q)
            except ValueError:
                pass

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            for q in self._subscribers:
                try:
                    q.put_nowait(msg)
                except queue.Full:
                    # Full: drop the oldest message, retry once
                    try:
                        q.get_nowait()
                    except queue.Empty:
                        pass
                    try:
                        q.put_nowait(msg)
                    except queue.Full:
                        pass
