"""Record store — the live, atomically swapped snapshot of the watched file.

A ``Snapshot`` is an immutable mapping from identity key to ``Record``,
produced by one complete parse. The ``RecordStore`` holds the current
snapshot behind a multi-reader/single-writer lock.

Reloads never mutate the live snapshot. A new snapshot is built outside the
lock from a fresh parse and only then published, so readers always see either
the old or the new snapshot in full. Slow parses do not block readers of the
old snapshot; the write lock is held only for the reference swap.

Thread Safety:
    ``snapshot()`` may be called from any thread. ``load()`` and
    ``detect_changes()`` may also be called from any thread; reload cycles
    are serialised so every ``ChangeReport`` compares consecutive snapshots.

"""

from __future__ import annotations

import threading
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from routewatch.config import DEFAULT_MARKER
from routewatch.observability.events import now_ns
from routewatch.records.chunker import Record, parse_file
from routewatch.records.differ import classify_changes

if TYPE_CHECKING:
    from collections.abc import Iterable

    from routewatch._types import Digest, RecordKey
    from routewatch.observability.collector import WatchCollector


class ReadWriteLock:
    """Multi-reader/single-writer lock with writer preference.

    Any number of readers may hold the lock together. A writer waits for
    active readers to leave, and while it waits no new reader is admitted,
    so a stream of readers cannot starve a reload.

    """

    __slots__ = ("_cond", "_readers", "_writer", "_writers_waiting")

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        """Hold the lock shared for the duration of the block."""
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Hold the lock exclusively for the duration of the block."""
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class Snapshot(Mapping[str, Record]):
    """Immutable key -> Record mapping from one complete parse.

    When several records share a key, the last one in the file wins.

    Args:
        records: Records in source order.
        source: Path the records were read from, if any.

    """

    __slots__ = ("_loaded_ns", "_order", "_records", "_source")

    def __init__(self, records: Iterable[Record] = (), *, source: Path | None = None) -> None:
        by_key: dict[RecordKey, Record] = {}
        for record in records:
            by_key[record.key] = record
        self._records = MappingProxyType(by_key)
        self._order = tuple(sorted(by_key.values(), key=lambda r: r.start_line))
        self._source = source
        self._loaded_ns = now_ns()

    @property
    def source(self) -> Path | None:
        """Path the records were read from, if any."""
        return self._source

    @property
    def loaded_ns(self) -> int:
        """Monotonic timestamp of when the snapshot was built."""
        return self._loaded_ns

    @classmethod
    def empty(cls, source: Path | None = None) -> Snapshot:
        """Snapshot with no records (the store's state before the first load)."""
        return cls((), source=source)

    def __getitem__(self, key: str) -> Record:
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"Snapshot({len(self)} records, source={self.source!r})"

    def records(self) -> tuple[Record, ...]:
        """Records in file order."""
        return self._order

    def digests(self) -> dict[RecordKey, Digest]:
        """Key -> digest view, handy for comparing snapshots by content."""
        return {key: record.digest for key, record in self._records.items()}


@dataclass(frozen=True, slots=True)
class ChangeReport:
    """Outcome of one reload-and-diff cycle.

    Attributes:
        changed: Keys that were added, removed, or modified.
        record_count: Number of records in the new snapshot.
        elapsed_ms: Time spent reloading and diffing.
        added: How many of ``changed`` were added.
        removed: How many were removed.
        modified: How many were modified.

    """

    changed: frozenset[RecordKey]
    record_count: int
    elapsed_ms: float
    added: int = 0
    removed: int = 0
    modified: int = 0

    @property
    def has_changes(self) -> bool:
        return bool(self.changed)


class RecordStore:
    """Owns the current snapshot of the watched file.

    Args:
        path: File to parse.
        marker: Record-start token.
        encoding: Text encoding of the file.
        collector: Optional observability collector for load/diff events.

    """

    def __init__(
        self,
        path: Path,
        *,
        marker: str = DEFAULT_MARKER,
        encoding: str = "utf-8",
        collector: WatchCollector | None = None,
    ) -> None:
        self._path = Path(path)
        self._marker = marker
        self._encoding = encoding
        self._collector = collector
        self._lock = ReadWriteLock()
        # Serialises reload cycles so detect_changes() compares consecutive snapshots.
        self._reload_lock = threading.Lock()
        self._snapshot = Snapshot.empty(self._path)
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def loaded(self) -> bool:
        """Whether at least one load has succeeded."""
        return self._loaded

    def __len__(self) -> int:
        return len(self.snapshot())

    def snapshot(self) -> Snapshot:
        """Return the current snapshot (read-only, never partially built)."""
        with self._lock.read():
            return self._snapshot

    def load(self) -> Snapshot:
        """Parse the file and publish a fresh snapshot.

        Raises:
            SourceError: The file could not be read. The previous snapshot
                is left untouched.

        """
        with self._reload_lock:
            _, current = self._reload()
        return current

    def detect_changes(self) -> ChangeReport:
        """Reload the file and diff the fresh snapshot against the previous one.

        The store switches to the fresh snapshot whether or not anything
        changed.

        Raises:
            SourceError: The file could not be read. The previous snapshot
                is retained and no diff is computed.

        """
        t0 = time.perf_counter()
        with self._reload_lock:
            previous, current = self._reload()
        changes = classify_changes(previous, current)
        elapsed_ms = (time.perf_counter() - t0) * 1000

        added = sum(1 for c in changes if c.kind == "added")
        removed = sum(1 for c in changes if c.kind == "removed")
        modified = len(changes) - added - removed
        report = ChangeReport(
            changed=frozenset(c.key for c in changes),
            record_count=len(current),
            elapsed_ms=elapsed_ms,
            added=added,
            removed=removed,
            modified=modified,
        )
        if self._collector is not None:
            self._collector.record_diff(
                str(self._path),
                changes_count=len(report.changed),
                added=added,
                removed=removed,
                modified=modified,
                detect_ms=elapsed_ms,
            )
        return report

    def _reload(self) -> tuple[Snapshot, Snapshot]:
        """Build a new snapshot outside the lock, then swap it in.

        Returns (previous, current). Caller holds ``_reload_lock``.

        """
        t0 = time.perf_counter()
        records = parse_file(self._path, marker=self._marker, encoding=self._encoding)
        fresh = Snapshot(records, source=self._path)
        with self._lock.write():
            previous = self._snapshot
            self._snapshot = fresh
            self._loaded = True
        load_ms = (time.perf_counter() - t0) * 1000

        if self._collector is not None:
            self._collector.record_load(str(self._path), record_count=len(fresh), load_ms=load_ms)
        return previous, fresh
