"""Routewatch application — wires config, store, monitor, and watcher.

Two entry points:

- ``open_watch(config)`` builds a non-blocking ``WatchSession`` (initial load
  done, watcher ready to start).  Useful for embedding and tests.
- ``watch(path)`` is the blocking CLI flow: load, print the banner, watch
  until interrupted, shut down cleanly.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from routewatch.config_loader import load_config
from routewatch.monitor import ChangeMonitor
from routewatch.observability import EventLog, WatchCollector, summarize
from routewatch.records.store import RecordStore
from routewatch.records.watcher import ChangeNotifier

if TYPE_CHECKING:
    from routewatch.config import WatchConfig
    from routewatch.observability import WatchStatus
    from routewatch.records.store import Snapshot
    from routewatch.records.watcher import WatchFunc


@dataclass(slots=True)
class WatchSession:
    """A loaded store plus the monitor and watcher driving it.

    Attributes:
        config: Resolved session configuration.
        store: Record store holding the live snapshot.
        monitor: Reload-and-diff coordinator.
        notifier: Debounced file watcher (not started until ``start()``).
        collector: Observability collector shared by all components.
        load_ms: Duration of the initial load.

    """

    config: WatchConfig
    store: RecordStore
    monitor: ChangeMonitor
    notifier: ChangeNotifier
    collector: WatchCollector
    load_ms: float = 0.0

    def snapshot(self) -> Snapshot:
        """Current snapshot."""
        return self.store.snapshot()

    def status(self) -> WatchStatus:
        """Summary of the session so far, read from the event log."""
        return summarize(self.collector.log)

    def start(self) -> None:
        self.notifier.start()

    def stop(self) -> None:
        """Stop watching.  Idempotent."""
        self.notifier.stop()

    def __enter__(self) -> WatchSession:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


def open_watch(
    config: WatchConfig,
    *,
    collector: WatchCollector | None = None,
    watch_func: WatchFunc | None = None,
) -> WatchSession:
    """Create a store, perform the initial load, and wire the watcher.

    Raises:
        SourceError: The initial load failed.  There is no known-good
            snapshot to fall back on, so this is fatal.

    """
    if collector is None:
        collector = WatchCollector(EventLog())

    store = RecordStore(
        config.path,
        marker=config.marker,
        encoding=config.encoding,
        collector=collector,
    )
    t0 = time.perf_counter()
    store.load()
    load_ms = (time.perf_counter() - t0) * 1000

    monitor = ChangeMonitor(store, config=config, collector=collector)
    notifier = ChangeNotifier(
        config.path,
        monitor.handle_change,
        debounce_ms=config.debounce_ms,
        collector=collector,
        watch_func=watch_func,
    )
    return WatchSession(
        config=config,
        store=store,
        monitor=monitor,
        notifier=notifier,
        collector=collector,
        load_ms=load_ms,
    )


def watch(
    path: str | Path,
    *,
    stop_event: threading.Event | None = None,
    config_file: str | Path | None = None,
    **overrides: object,
) -> None:
    """Watch *path* and report changed records until interrupted.

    Blocks until *stop_event* is set or KeyboardInterrupt is raised.

    Args:
        path: Routing-table file to watch.
        stop_event: Optional event that ends the watch when set.
        config_file: Explicit routewatch.yaml / .toml to merge.
        **overrides: Override WatchConfig fields.

    Raises:
        SourceError: The initial load failed.
        WatchSetupError: The directory could not be watched.

    """
    from routewatch.report import print_banner, print_session_summary

    config = load_config(Path(path), config_file=config_file, **overrides)
    session = open_watch(config)
    if config.verbose:
        print_banner(config, len(session.store), load_ms=session.load_ms)

    if stop_event is None:
        stop_event = threading.Event()

    with session:
        try:
            while not stop_event.wait(0.5):
                pass
        except KeyboardInterrupt:
            pass

    if config.verbose:
        print_session_summary(session.status())
