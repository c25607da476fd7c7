"""Change monitor — connects the watcher to the record store.

Orchestrates one reload cycle per debounced burst:
    1. ChangeNotifier fires after the file has been quiet
    2. RecordStore re-parses the file into a fresh snapshot and swaps it in
    3. The fresh snapshot is diffed against the previous one
    4. The changed keys are reported (stderr summary + ChangesDetected event)

A reload that cannot read the file is reported and leaves the previous
snapshot in place; the next burst simply tries again.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from routewatch._errors import SourceError
from routewatch.report import print_change_summary, print_reload_error

if TYPE_CHECKING:
    from routewatch.config import WatchConfig
    from routewatch.observability.collector import WatchCollector
    from routewatch.records.store import ChangeReport, RecordStore


class ChangeMonitor:
    """Runs reload-and-diff cycles against a RecordStore.

    ``handle_change`` is meant to be the ChangeNotifier callback.

    Args:
        store: Store holding the live snapshot.
        config: Session configuration (listing cap, verbosity).
        collector: Optional observability collector.

    """

    def __init__(
        self,
        store: RecordStore,
        *,
        config: WatchConfig,
        collector: WatchCollector | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._collector = collector
        self._lock = threading.Lock()
        self._last_report: ChangeReport | None = None
        self._cycles = 0
        self._failures = 0

    @property
    def last_report(self) -> ChangeReport | None:
        """Report of the most recent successful cycle."""
        with self._lock:
            return self._last_report

    @property
    def cycles(self) -> int:
        """Number of reload cycles attempted."""
        with self._lock:
            return self._cycles

    @property
    def failures(self) -> int:
        """Number of reload cycles that kept the previous snapshot."""
        with self._lock:
            return self._failures

    def handle_change(self) -> ChangeReport | None:
        """Reload the store, diff, and report.

        Returns the ChangeReport, or None when the file could not be read.

        """
        with self._lock:
            self._cycles += 1
        try:
            report = self._store.detect_changes()
        except SourceError as exc:
            with self._lock:
                self._failures += 1
            if self._config.verbose:
                print_reload_error(self._store.path, exc)
            if self._collector is not None:
                self._collector.record_reload_failure(str(self._store.path), exc)
            return None

        with self._lock:
            self._last_report = report
        if self._config.verbose:
            print_change_summary(report, max_listed=self._config.max_listed)
        return report
