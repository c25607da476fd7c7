"""Routewatch — incremental change reports for routing-table dumps.

Watches one routing-table dump (``display ip routing-table verbose`` style
output), splits it into records at every ``Destination:`` line, hashes each
record, and on every settled rewrite reports which destinations were added,
removed, or modified.

Quick start::

    import routewatch

    routewatch.watch("routes.txt")      # Blocks, prints change summaries

Embedding::

    from routewatch import WatchConfig, open_watch

    with open_watch(WatchConfig(path="routes.txt")) as session:
        snapshot = session.snapshot()

Layers:

    records.chunker   text -> keyed, hashed records
    records.store     atomically swapped snapshots
    records.differ    snapshot vs snapshot -> changed keys
    records.watcher   debounced watchfiles notifications
    monitor           reload -> diff -> report

"""

__version__ = "0.1.0"
__all__ = [
    "RecordStore",
    "Snapshot",
    "WatchConfig",
    "__version__",
    "diff_snapshots",
    "open_watch",
    "watch",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import routewatch`` fast (watchfiles is only loaded on demand).
    """
    if name == "WatchConfig":
        from routewatch.config import WatchConfig

        return WatchConfig

    if name == "RecordStore":
        from routewatch.records.store import RecordStore

        return RecordStore

    if name == "Snapshot":
        from routewatch.records.store import Snapshot

        return Snapshot

    if name == "diff_snapshots":
        from routewatch.records.differ import diff_snapshots

        return diff_snapshots

    if name == "open_watch":
        from routewatch.app import open_watch

        return open_watch

    if name == "watch":
        from routewatch.app import watch

        return watch

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
