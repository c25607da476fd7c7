"""Shared type definitions for routewatch."""

from collections.abc import Callable
from typing import Literal

# Identity key of a record (e.g. "10.0.0.0/8")
type RecordKey = str

# Hex-encoded SHA-256 content digest
type Digest = str

# How a record differs between two snapshots
type ChangeKind = Literal["added", "removed", "modified"]

# Raw filesystem signal kinds the notifier reacts to
type SignalKind = Literal["created", "written"]

# Zero-argument callback fired once per debounced burst
type ChangeCallback = Callable[[], object]
