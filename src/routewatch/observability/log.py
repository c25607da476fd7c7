"""Event log — bounded history of one watch session.

Keeps the most recent ``WatchEvent`` objects in a ring buffer for status
queries, plus lifetime per-type totals that survive eviction, so a session
summary stays exact however long the watch runs.

Thread Safety:
    Every method takes the same ``threading.Lock``.  Events are appended from
    the watcher thread and the debounce timer threads while the caller's
    thread reads status.

"""

import threading
from collections import Counter, deque

from routewatch.observability.events import WatchEvent


class EventLog:
    """Ring buffer of recent events with lifetime counts.

    Args:
        max_events: Number of events retained for ``query``/``latest``.

    """

    __slots__ = ("_events", "_lock", "_totals")

    def __init__(self, max_events: int = 1_000) -> None:
        self._events: deque[WatchEvent] = deque(maxlen=max_events)
        self._totals: Counter[type] = Counter()
        self._lock = threading.Lock()

    def append(self, event: WatchEvent) -> None:
        with self._lock:
            self._events.append(event)
            self._totals[type(event)] += 1

    def query(self, *, event_type: type, limit: int = 100) -> list[WatchEvent]:
        """Return retained events of *event_type*, most recent first."""
        with self._lock:
            results: list[WatchEvent] = []
            for event in reversed(self._events):
                if len(results) >= limit:
                    break
                if isinstance(event, event_type):
                    results.append(event)
            return results

    def latest(self, event_type: type) -> WatchEvent | None:
        """The most recent retained event of *event_type*, if any."""
        found = self.query(event_type=event_type, limit=1)
        return found[0] if found else None

    def total(self, event_type: type) -> int:
        """How many events of *event_type* were ever appended."""
        with self._lock:
            return self._totals[event_type]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
