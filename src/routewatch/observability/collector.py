"""Watch collector — records store and watcher activity into an EventLog.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    Safe to share between the watcher thread and debounce timer threads.

"""

from __future__ import annotations

from routewatch.observability.events import (
    ChangesDetected,
    ChangeSignalled,
    ReloadFailed,
    SnapshotLoaded,
    WatcherFailed,
    now_ns,
)
from routewatch.observability.log import EventLog


class WatchCollector:
    """Event collector for one watch session.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Record store events -----

    def record_load(self, path: str, *, record_count: int = 0, load_ms: float = 0.0) -> None:
        """Record a published snapshot."""
        self._log.append(
            SnapshotLoaded(
                path=path,
                record_count=record_count,
                load_ms=load_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_diff(
        self,
        path: str,
        *,
        changes_count: int = 0,
        added: int = 0,
        removed: int = 0,
        modified: int = 0,
        detect_ms: float = 0.0,
    ) -> None:
        """Record a snapshot diff."""
        self._log.append(
            ChangesDetected(
                path=path,
                changes_count=changes_count,
                added=added,
                removed=removed,
                modified=modified,
                detect_ms=detect_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_reload_failure(self, path: str, error: BaseException | str) -> None:
        """Record a reload that kept the previous snapshot."""
        self._log.append(ReloadFailed(path=path, error=str(error), timestamp_ns=now_ns()))

    # ----- Watcher events -----

    def record_signal(self, path: str, kind: str) -> None:
        """Record a relevant raw filesystem signal."""
        self._log.append(
            ChangeSignalled(
                path=path,
                kind=kind,  # type: ignore[arg-type]
                timestamp_ns=now_ns(),
            )
        )

    def record_watch_failure(self, path: str, error: BaseException | str) -> None:
        """Record an error surfaced by the notification primitive."""
        self._log.append(WatcherFailed(path=path, error=str(error), timestamp_ns=now_ns()))
