"""Record layer — routing-table records as content-addressed snapshots.

Handles record chunking (text -> keyed records), the atomically swapped
record store, snapshot diffing, and debounced file watching.
"""

from routewatch.records.chunker import (
    Record,
    digest,
    parse_bytes,
    parse_file,
    parse_lines,
    parse_text,
)
from routewatch.records.differ import RecordChange, classify_changes, diff_snapshots
from routewatch.records.store import ChangeReport, RecordStore, Snapshot
from routewatch.records.watcher import ChangeNotifier, Debouncer

__all__ = [
    "ChangeNotifier",
    "ChangeReport",
    "Debouncer",
    "Record",
    "RecordChange",
    "RecordStore",
    "Snapshot",
    "classify_changes",
    "diff_snapshots",
    "digest",
    "parse_bytes",
    "parse_file",
    "parse_lines",
    "parse_text",
]
