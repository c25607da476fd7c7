"""Unified event model for routewatch observability.

Defines event types for the load/diff cycle and the filesystem watcher.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Record store events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SnapshotLoaded:
    """A full parse of the watched file was published as the live snapshot.

    Attributes:
        path: Absolute path to the watched file.
        record_count: Number of records in the new snapshot.
        load_ms: Time spent parsing and publishing in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    record_count: int
    load_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ChangesDetected:
    """Two snapshots were diffed, producing a set of changed keys.

    Attributes:
        path: Watched file path.
        changes_count: Number of changed keys.
        added: Number of added records.
        removed: Number of removed records.
        modified: Number of modified records.
        detect_ms: Time spent reloading and diffing in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    changes_count: int
    added: int
    removed: int
    modified: int
    detect_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ReloadFailed:
    """A reload cycle could not read the watched file; the old snapshot was kept."""

    path: str
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Watcher events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ChangeSignalled:
    """A relevant raw filesystem signal arrived for the watched file.

    Attributes:
        path: Watched file path.
        kind: Raw signal kind.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    kind: Literal["created", "written"]
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class WatcherFailed:
    """The filesystem notification primitive reported an error."""

    path: str
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type WatchEvent = (
    SnapshotLoaded
    | ChangesDetected
    | ReloadFailed
    | ChangeSignalled
    | WatcherFailed
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
