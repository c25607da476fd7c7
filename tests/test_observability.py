"""Tests for routewatch.observability — watch-session event observability."""

import threading

from routewatch.observability.collector import WatchCollector
from routewatch.observability.events import (
    ChangesDetected,
    ChangeSignalled,
    ReloadFailed,
    SnapshotLoaded,
    WatcherFailed,
    now_ns,
)
from routewatch.observability.log import EventLog
from routewatch.observability.status import WatchStatus, summarize


def _loaded(path: str = "/data/routes.txt", count: int = 2) -> SnapshotLoaded:
    return SnapshotLoaded(path=path, record_count=count, load_ms=0.5, timestamp_ns=now_ns())


# ---------------------------------------------------------------------------
# EventLog
# ---------------------------------------------------------------------------


class TestEventLog:
    """Tests for the event log store."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        assert len(log) == 0
        log.append(_loaded())
        assert len(log) == 1

    def test_max_events_enforced(self) -> None:
        log = EventLog(max_events=5)
        for i in range(10):
            log.append(_loaded(count=i))
        assert len(log) == 5
        assert [e.record_count for e in log.query(event_type=SnapshotLoaded)] == [9, 8, 7, 6, 5]

    def test_totals_survive_eviction(self) -> None:
        log = EventLog(max_events=3)
        for i in range(10):
            log.append(_loaded(count=i))
        assert log.total(SnapshotLoaded) == 10
        assert log.total(ReloadFailed) == 0

    def test_query_by_type(self) -> None:
        log = EventLog()
        log.append(_loaded())
        log.append(ReloadFailed(path="/data/routes.txt", error="gone", timestamp_ns=now_ns()))
        log.append(_loaded())

        results = log.query(event_type=SnapshotLoaded)
        assert len(results) == 2
        assert all(isinstance(r, SnapshotLoaded) for r in results)

    def test_query_newest_first(self) -> None:
        log = EventLog()
        for i in range(3):
            log.append(_loaded(count=i))
        assert [e.record_count for e in log.query(event_type=SnapshotLoaded)] == [2, 1, 0]

    def test_latest(self) -> None:
        log = EventLog()
        assert log.latest(SnapshotLoaded) is None
        log.append(_loaded(count=1))
        log.append(ReloadFailed(path="/r", error="gone", timestamp_ns=now_ns()))
        log.append(_loaded(count=2))
        latest = log.latest(SnapshotLoaded)
        assert latest is not None
        assert latest.record_count == 2

    def test_query_limit(self) -> None:
        log = EventLog()
        for i in range(20):
            log.append(_loaded(count=i))
        assert len(log.query(event_type=SnapshotLoaded, limit=5)) == 5

    def test_concurrent_appends(self) -> None:
        log = EventLog()

        def writer() -> None:
            for _ in range(200):
                log.append(_loaded())

        threads = [threading.Thread(target=writer) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(log) == 800
        assert log.total(SnapshotLoaded) == 800


# ---------------------------------------------------------------------------
# WatchCollector
# ---------------------------------------------------------------------------


class TestWatchCollector:
    """Tests for the collector façade used by store, monitor, and notifier."""

    def test_default_log(self) -> None:
        assert isinstance(WatchCollector().log, EventLog)

    def test_shared_log(self) -> None:
        log = EventLog()
        collector = WatchCollector(log)
        collector.record_load("/r", record_count=3, load_ms=1.5)
        assert len(log) == 1

    def test_record_load(self) -> None:
        collector = WatchCollector()
        collector.record_load("/r", record_count=3, load_ms=1.5)
        (event,) = collector.log.query(event_type=SnapshotLoaded)
        assert (event.record_count, event.load_ms) == (3, 1.5)

    def test_record_diff(self) -> None:
        collector = WatchCollector()
        collector.record_diff("/r", changes_count=3, added=1, removed=1, modified=1, detect_ms=2.0)
        (event,) = collector.log.query(event_type=ChangesDetected)
        assert (event.changes_count, event.added, event.removed, event.modified) == (3, 1, 1, 1)

    def test_record_reload_failure_stringifies(self) -> None:
        collector = WatchCollector()
        collector.record_reload_failure("/r", OSError("permission denied"))
        (event,) = collector.log.query(event_type=ReloadFailed)
        assert event.error == "permission denied"

    def test_record_signal(self) -> None:
        collector = WatchCollector()
        collector.record_signal("/r", "written")
        (event,) = collector.log.query(event_type=ChangeSignalled)
        assert event.kind == "written"

    def test_record_watch_failure(self) -> None:
        collector = WatchCollector()
        collector.record_watch_failure("/r", "overflow")
        (event,) = collector.log.query(event_type=WatcherFailed)
        assert event.error == "overflow"


class TestEvents:
    def test_frozen(self) -> None:
        event = _loaded()
        try:
            event.record_count = 5  # type: ignore[misc]
        except AttributeError:
            pass
        else:
            raise AssertionError("SnapshotLoaded should be frozen")

    def test_now_ns_monotonic(self) -> None:
        assert now_ns() <= now_ns()


# ---------------------------------------------------------------------------
# summarize / WatchStatus
# ---------------------------------------------------------------------------


class TestSummarize:
    """summarize() — session status read back from the log."""

    def test_empty_log(self) -> None:
        status = summarize(EventLog())
        assert status.last_load is None
        assert status.record_count == 0
        assert (status.reloads, status.reload_failures, status.signals) == (0, 0, 0)
        assert status.recent_changes == ()
        assert status.last_error is None

    def test_counts_and_latest(self) -> None:
        collector = WatchCollector()
        collector.record_load("/r", record_count=2)
        collector.record_signal("/r", "written")
        collector.record_signal("/r", "written")
        collector.record_load("/r", record_count=3)
        collector.record_diff("/r", changes_count=1, added=1)
        collector.record_reload_failure("/r", OSError("permission denied"))
        collector.record_watch_failure("/r", "overflow")

        status = summarize(collector.log)
        assert status.record_count == 3
        assert status.reloads == 1
        assert status.reload_failures == 1
        assert status.signals == 2
        assert status.watcher_failures == 1
        assert status.last_error == "permission denied"
        (change,) = status.recent_changes
        assert change.added == 1

    def test_recent_changes_capped_newest_first(self) -> None:
        collector = WatchCollector()
        for i in range(8):
            collector.record_diff("/r", changes_count=i)
        status = summarize(collector.log, recent=3)
        assert [c.changes_count for c in status.recent_changes] == [7, 6, 5]
        assert status.reloads == 8

    def test_frozen(self) -> None:
        status = summarize(EventLog())
        assert isinstance(status, WatchStatus)
        try:
            status.reloads = 1  # type: ignore[misc]
        except AttributeError:
            pass
        else:
            raise AssertionError("WatchStatus should be frozen")
