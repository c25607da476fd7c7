"""File watcher — debounced change notifications for one watched file.

Editors and dump tools rarely write a file in one go: a rewrite typically
produces a burst of create/write signals.  The watcher collapses each burst
into a single callback, fired once the file has been quiet for the debounce
interval.

State machine::

    Idle    --signal-->  Pending (timer armed)
    Pending --signal-->  Pending (timer cancelled and re-armed)
    Pending --expiry-->  Idle    (callback invoked once, on the timer thread)

The raw signals come from watchfiles, which watches the file's parent
directory in a background thread so that delete-and-recreate rewrites are
seen too.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change

from routewatch._errors import WatchSetupError
from routewatch.report import print_callback_error, print_watch_warning

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from routewatch._types import ChangeCallback, SignalKind
    from routewatch.observability.collector import WatchCollector

    type RawChanges = Iterable[tuple[Change, str]]
    type WatchFunc = Callable[..., Iterator[set[tuple[Change, str]]]]


# Mapping from watchfiles Change enum to the signal kinds we react to.
# Deletions are ignored: a rewrite that deletes first is followed by a create.
_SIGNAL_KIND_MAP: dict[Change, Literal["created", "written"]] = {
    Change.added: "created",
    Change.modified: "written",
}

# Batching inside watchfiles itself; our own debounce runs on top of it.
_RAW_DEBOUNCE_MS = 50
_RAW_STEP_MS = 50
_RETRY_SECONDS = 1.0


def categorize_change(change: Change, path: str | Path, watched: Path) -> SignalKind | None:
    """Classify a raw filesystem change for the watched file.

    Returns None for other paths and for kinds other than create/write.

    """
    if Path(path) != watched:
        return None
    return _SIGNAL_KIND_MAP.get(change)


class Debouncer:
    """Cancel-and-rearm single-shot timer.

    Every ``trigger()`` cancels the pending timer (if any) and arms a fresh
    one, so a burst of triggers less than ``interval`` apart invokes the
    callback exactly once, ``interval`` after the last trigger.

    Thread-safe: the timer handle is guarded by a lock shared by the
    triggering thread and the timer threads.

    Args:
        interval: Quiet period in seconds.
        callback: Invoked on the timer thread once per burst.

    """

    def __init__(self, interval: float, callback: ChangeCallback) -> None:
        self._interval = interval
        self._callback = callback
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        # Bumped on every trigger so a timer that already started firing
        # when it was cancelled does nothing.
        self._generation = 0
        self._closed = False
        self._fired = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def closed(self) -> bool:
        """Whether ``close()`` has been called."""
        with self._lock:
            return self._closed

    @property
    def pending(self) -> bool:
        """Whether a timer is armed (the Pending state)."""
        with self._lock:
            return self._timer is not None

    @property
    def fired(self) -> int:
        """Number of callback invocations so far."""
        with self._lock:
            return self._fired

    def trigger(self) -> None:
        """Register a signal: (re)arm the timer unless closed."""
        with self._lock:
            if self._closed:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            timer = threading.Timer(self._interval, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        """Drop the pending timer, if any, and return to Idle."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1

    def close(self) -> None:
        """Cancel the pending timer and ignore all further triggers."""
        with self._lock:
            self._closed = True
        self.cancel()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if self._closed or generation != self._generation:
                return
            self._timer = None
            self._fired += 1
        try:
            self._callback()
        except Exception as exc:
            print_callback_error(exc)


class ChangeNotifier:
    """Watches one file and invokes a callback once per burst of writes.

    Uses watchfiles on the file's parent directory in a background thread.
    Only create/write events for the exact watched path count; everything
    else is ignored.  Errors raised by watchfiles are reported and the watch
    is re-established, so one bad event never ends the session.

    Args:
        path: File to watch.
        callback: Invoked once per debounced burst, on a timer thread.
        debounce_ms: Quiet interval in milliseconds.
        collector: Optional observability collector.
        watch_func: Raw notification primitive (defaults to
            ``watchfiles.watch``).
        retry_seconds: Pause before re-establishing a failed watch.

    """

    def __init__(
        self,
        path: Path,
        callback: ChangeCallback,
        *,
        debounce_ms: int = 500,
        collector: WatchCollector | None = None,
        watch_func: WatchFunc | None = None,
        retry_seconds: float = _RETRY_SECONDS,
    ) -> None:
        self._path = Path(path).resolve()
        self._collector = collector
        self._callback = callback
        self._interval = debounce_ms / 1000
        self._debouncer = Debouncer(self._interval, callback)
        self._watch_func = watch_func
        self._retry_seconds = retry_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching in a background thread.

        Raises:
            WatchSetupError: The parent directory cannot be watched.

        """
        with self._lock:
            if self.is_running:
                return
            watch_dir = self._path.parent
            if not watch_dir.is_dir():
                msg = f"cannot watch {watch_dir}: not a directory"
                raise WatchSetupError(msg)

            # stop() closed the previous debouncer for good.
            if self._debouncer.closed:
                self._debouncer = Debouncer(self._interval, self._callback)
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._watch_loop,
                name="routewatch-watcher",
                daemon=True,
            )
            self._thread.start()

    def stop(self) -> None:
        """Stop consuming signals and cancel any pending callback.

        Idempotent.  A callback already running is allowed to finish.

        """
        self._debouncer.close()
        self._stop_event.set()
        with self._lock:
            thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=5.0)

    def __enter__(self) -> ChangeNotifier:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def handle_changes(self, raw_changes: RawChanges) -> int:
        """Feed one batch of raw changes through the filter and debouncer.

        Returns the number of relevant signals in the batch.

        """
        relevant = 0
        for change, path_str in raw_changes:
            kind = categorize_change(change, path_str, self._path)
            if kind is None:
                continue
            relevant += 1
            if self._collector is not None:
                self._collector.record_signal(str(self._path), kind)
            self._debouncer.trigger()
        return relevant

    def _watch_loop(self) -> None:
        """Background thread: run the primitive and feed the debouncer."""
        watch = self._watch_func
        if watch is None:
            from watchfiles import watch

        watched = self._path
        while not self._stop_event.is_set():
            try:
                for raw_changes in watch(
                    watched.parent,
                    watch_filter=lambda _change, path: Path(path) == watched,
                    debounce=_RAW_DEBOUNCE_MS,
                    step=_RAW_STEP_MS,
                    stop_event=self._stop_event,
                    recursive=False,
                    raise_interrupt=False,
                ):
                    self.handle_changes(raw_changes)
            except Exception as exc:
                if self._stop_event.is_set():
                    break
                print_watch_warning(self._path, exc)
                if self._collector is not None:
                    self._collector.record_watch_failure(str(self._path), exc)
            # Back off before re-establishing the watch.
            self._stop_event.wait(self._retry_seconds)
