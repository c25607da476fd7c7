"""Observability — frozen events for the load/diff cycle and the watcher.

Every reload cycle and filesystem signal can be recorded as an immutable
event with a nanosecond timestamp, safe for concurrent production from the
watcher thread and the debounce timer threads.

Quick Start:
    >>> from routewatch.observability import EventLog, WatchCollector
    >>> log = EventLog()
    >>> collector = WatchCollector(log)
    >>> # Pass collector to RecordStore / ChangeNotifier / ChangeMonitor

"""

from routewatch.observability.collector import WatchCollector
from routewatch.observability.events import (
    ChangesDetected,
    ChangeSignalled,
    ReloadFailed,
    SnapshotLoaded,
    WatcherFailed,
    WatchEvent,
    now_ns,
)
from routewatch.observability.log import EventLog
from routewatch.observability.status import WatchStatus, summarize

__all__ = [
    "ChangeSignalled",
    "ChangesDetected",
    "EventLog",
    "ReloadFailed",
    "SnapshotLoaded",
    "WatchCollector",
    "WatchEvent",
    "WatchStatus",
    "WatcherFailed",
    "now_ns",
    "summarize",
]
