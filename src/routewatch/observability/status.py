"""Session status — what a running watch has seen so far.

Summarises a session's ``EventLog`` into one frozen ``WatchStatus``: the
live snapshot's last load, how many reload cycles ran or failed, how many
filesystem signals and watcher errors arrived, and the most recent diffs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from routewatch.observability.events import (
    ChangesDetected,
    ChangeSignalled,
    ReloadFailed,
    SnapshotLoaded,
    WatcherFailed,
)

if TYPE_CHECKING:
    from routewatch.observability.log import EventLog


@dataclass(frozen=True, slots=True)
class WatchStatus:
    """Point-in-time summary of a watch session.

    Attributes:
        last_load: Most recent published snapshot, if any.
        reloads: Reload cycles that produced a diff.
        reload_failures: Reload cycles that kept the previous snapshot.
        signals: Relevant filesystem signals received.
        watcher_failures: Errors raised by the notification primitive.
        recent_changes: Latest diffs, most recent first.
        last_error: Message of the most recent reload failure, if any.

    """

    last_load: SnapshotLoaded | None
    reloads: int
    reload_failures: int
    signals: int
    watcher_failures: int
    recent_changes: tuple[ChangesDetected, ...]
    last_error: str | None = None

    @property
    def record_count(self) -> int:
        """Records in the live snapshot (0 before the first load)."""
        return self.last_load.record_count if self.last_load is not None else 0


def summarize(log: EventLog, *, recent: int = 5) -> WatchStatus:
    """Build a WatchStatus from *log*, keeping *recent* diffs."""
    failure = log.latest(ReloadFailed)
    last_load = log.latest(SnapshotLoaded)
    return WatchStatus(
        last_load=last_load,  # type: ignore[arg-type]
        reloads=log.total(ChangesDetected),
        reload_failures=log.total(ReloadFailed),
        signals=log.total(ChangeSignalled),
        watcher_failures=log.total(WatcherFailed),
        recent_changes=tuple(log.query(event_type=ChangesDetected, limit=recent)),  # type: ignore[arg-type]
        last_error=failure.error if isinstance(failure, ReloadFailed) else None,
    )
