"""Snapshot differ — key-level diff between two record snapshots.

Compares two Snapshots and reports which identity keys changed. A key has
changed when it was added, removed, or when its content digest differs.
Records are never compared line by line; the digest is the only equality
test.

The scan always covers the complete key space of both snapshots. Snapshots
are rebuilt wholesale on every reload, so there is no incremental mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from routewatch._types import ChangeKind, RecordKey
    from routewatch.records.store import Snapshot


@dataclass(frozen=True, slots=True)
class RecordChange:
    """A single record-level change between two snapshots.

    Attributes:
        key: Identity key of the record.
        kind: Type of change — added, removed, or modified.
        old_digest: Digest before the change (None for additions).
        new_digest: Digest after the change (None for removals).

    """

    key: RecordKey
    kind: ChangeKind
    old_digest: str | None
    new_digest: str | None


def classify_changes(old: Snapshot, new: Snapshot) -> tuple[RecordChange, ...]:
    """Diff two snapshots, keeping the kind of every change.

    Keys present in *old* are reported first in old-file order (removed or
    modified), followed by keys only present in *new* in new-file order.
    Identical snapshots short-circuit to an empty result.

    """
    if old is new:
        return ()

    changes: list[RecordChange] = []
    for key, old_record in old.items():
        new_record = new.get(key)
        if new_record is None:
            changes.append(
                RecordChange(key=key, kind="removed", old_digest=old_record.digest, new_digest=None)
            )
        elif new_record.digest != old_record.digest:
            changes.append(
                RecordChange(
                    key=key,
                    kind="modified",
                    old_digest=old_record.digest,
                    new_digest=new_record.digest,
                )
            )

    for key, new_record in new.items():
        if key not in old:
            changes.append(
                RecordChange(key=key, kind="added", old_digest=None, new_digest=new_record.digest)
            )

    return tuple(changes)


def diff_snapshots(old: Snapshot, new: Snapshot) -> frozenset[RecordKey]:
    """Return the set of keys that differ between *old* and *new*.

    Added, removed, and modified records are collapsed into one "changed"
    signal per key; each changed key appears exactly once.

    """
    return frozenset(change.key for change in classify_changes(old, new))
