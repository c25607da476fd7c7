"""Tests for routewatch.app — session wiring and the blocking watch() flow."""

from __future__ import annotations

import io
import sys
import threading
import time
from pathlib import Path
from unittest.mock import patch

import pytest
from watchfiles import Change

from routewatch._errors import SourceError
from routewatch.app import WatchSession, open_watch, watch
from routewatch.config import WatchConfig
from routewatch.observability import ChangesDetected, SnapshotLoaded
from tests.conftest import route


def _scripted_watch(path: Path, rewrites: list[str], applied: threading.Event):
    """Fake primitive: apply each rewrite, signal it, then block until stopped."""

    def watch_func(*paths: Path, stop_event: threading.Event, **kwargs: object):
        for text in rewrites:
            path.write_text(text)
            yield {(Change.modified, str(path))}
        applied.set()
        stop_event.wait()

    return watch_func


class TestOpenWatch:
    """open_watch() — initial load and wiring, without blocking."""

    def test_initial_load(self, routes_file: Path) -> None:
        session = open_watch(WatchConfig(path=routes_file, verbose=False))
        assert isinstance(session, WatchSession)
        assert set(session.snapshot()) == {"1.0.0.0/24", "10.0.0.0/8"}
        assert session.load_ms >= 0
        assert session.collector.log.query(event_type=SnapshotLoaded)

    def test_initial_load_failure_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(SourceError):
            open_watch(WatchConfig(path=tmp_path / "missing.txt"))

    def test_end_to_end_reload(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.txt"
        path.write_text(route("A", " x") + route("B", " y"))
        applied = threading.Event()
        fake = _scripted_watch(path, [route("A", " x") + route("C", " z")], applied)

        session = open_watch(
            WatchConfig(path=path, debounce_ms=50, verbose=False), watch_func=fake,
        )
        with session:
            assert applied.wait(2.0)
            deadline = time.monotonic() + 2.0
            while session.monitor.last_report is None and time.monotonic() < deadline:
                time.sleep(0.01)

        report = session.monitor.last_report
        assert report is not None
        assert report.changed == {"B", "C"}
        assert set(session.snapshot()) == {"A", "C"}
        (event,) = session.collector.log.query(event_type=ChangesDetected)
        assert (event.added, event.removed) == (1, 1)

        status = session.status()
        assert status.record_count == 2
        assert status.reloads == 1
        assert status.signals == 1
        assert status.reload_failures == 0


class TestWatch:
    """watch() — blocking entry point."""

    def test_returns_when_stop_event_set(self, routes_file: Path) -> None:
        stop = threading.Event()
        stop.set()
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            watch(routes_file, stop_event=stop)

        output = buf.getvalue()
        assert "2 records loaded" in output
        assert "Watching" in output
        assert "Stopped." in output

    def test_overrides_applied(self, routes_file: Path) -> None:
        stop = threading.Event()
        stop.set()
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            watch(routes_file, stop_event=stop, debounce_ms=250, marker="Destination:")
        assert "debounce: 250ms" in buf.getvalue()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(SourceError):
            watch(tmp_path / "missing.txt", stop_event=threading.Event())
