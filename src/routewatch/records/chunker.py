"""Record chunker — splits a routing-table dump into content-addressed records.

A record starts at every line beginning with the marker token
(``Destination:`` by default) and runs until the next marker line or the end
of input. The second whitespace-delimited token of the marker line is the
record's identity key. Every record carries a SHA-256 digest of its raw bytes,
which is the only equality test used when comparing record versions.

Example input::

    Destination: 10.0.0.0/8
         Protocol: IBGP        Process ID: 0
          NextHop: 172.31.251.131
    Destination: 10.1.0.0/16
         Protocol: Static      Process ID: 0

Produces two records keyed ``10.0.0.0/8`` (lines 1-3) and ``10.1.0.0/16``
(lines 4-5).
"""

from __future__ import annotations

import hashlib
import io
from dataclasses import dataclass
from typing import TYPE_CHECKING

from routewatch._errors import SourceError
from routewatch.config import DEFAULT_MARKER

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from routewatch._types import Digest, RecordKey


@dataclass(frozen=True, slots=True)
class Record:
    """One logical entry of the routing table.

    Attributes:
        key: Identity key taken from the marker line.
        start_line: 1-based line number of the marker line.
        end_line: 1-based line number of the record's last line (inclusive).
        content: The record's lines joined by ``\\n``, decoded with the file
            encoding. Undecodable bytes are kept as surrogate escapes.
        digest: Hex SHA-256 of the raw bytes as read (lines joined by
            ``\\n``, terminators stripped).

    """

    key: RecordKey
    start_line: int
    end_line: int
    content: str
    digest: Digest

    @property
    def line_count(self) -> int:
        """Number of source lines spanned by the record."""
        return self.end_line - self.start_line + 1


def digest(content: str | bytes) -> Digest:
    """Return the hex SHA-256 digest of *content*.

    Strings are UTF-8 encoded, with surrogate escapes turned back into the
    bytes they stand for.

    """
    if isinstance(content, str):
        content = content.encode("utf-8", errors="surrogateescape")
    return hashlib.sha256(content).hexdigest()


def is_marker(line: str | bytes, marker: str | bytes = DEFAULT_MARKER) -> bool:
    """Whether *line* begins a new record."""
    return line.startswith(marker)


def extract_key(line: str, lineno: int) -> RecordKey:
    """Return the identity key of a marker line.

    Falls back to ``unknown_<lineno>`` when the line has fewer than two
    tokens. Such keys change whenever the record moves, so they never match
    across reloads.

    """
    parts = line.split()
    if len(parts) >= 2:
        return parts[1]
    return f"unknown_{lineno}"


def _strip_terminator(raw: bytes) -> bytes:
    """Drop one trailing ``\\n`` and then one trailing ``\\r``.

    A ``\\r`` anywhere else is ordinary line content.

    """
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw


class _OpenRecord:
    """Accumulates raw lines for the record currently being read."""

    __slots__ = ("key", "lines", "start_line")

    def __init__(self, key: RecordKey, start_line: int, first_line: bytes) -> None:
        self.key = key
        self.start_line = start_line
        self.lines = [first_line]

    def close(self, encoding: str) -> Record:
        raw = b"\n".join(self.lines)
        return Record(
            key=self.key,
            start_line=self.start_line,
            end_line=self.start_line + len(self.lines) - 1,
            content=raw.decode(encoding, errors="surrogateescape"),
            digest=digest(raw),
        )


def parse_lines(
    lines: Iterable[bytes],
    *,
    marker: str = DEFAULT_MARKER,
    encoding: str = "utf-8",
) -> list[Record]:
    """Split raw *lines* into records, in source order.

    Lines are split on ``\\n`` only; one trailing ``\\r`` is dropped.
    Everything else (including trailing whitespace and blank lines) is kept
    verbatim. Lines before the first marker are discarded. Bytes that are
    not valid in *encoding* never fail the parse: the digest covers the raw
    bytes, and the decoded text carries them as surrogate escapes.

    """
    marker_bytes = marker.encode(encoding)
    records: list[Record] = []
    current: _OpenRecord | None = None

    for lineno, raw in enumerate(lines, start=1):
        line = _strip_terminator(raw)
        if is_marker(line, marker_bytes):
            if current is not None:
                records.append(current.close(encoding))
            key = extract_key(line.decode(encoding, errors="surrogateescape"), lineno)
            current = _OpenRecord(key, lineno, line)
        elif current is not None:
            current.lines.append(line)

    if current is not None:
        records.append(current.close(encoding))
    return records


def parse_bytes(
    data: bytes,
    *,
    marker: str = DEFAULT_MARKER,
    encoding: str = "utf-8",
) -> list[Record]:
    """Split a whole raw document into records."""
    return parse_lines(io.BytesIO(data), marker=marker, encoding=encoding)


def parse_text(text: str, *, marker: str = DEFAULT_MARKER) -> list[Record]:
    """Split a decoded document into records (UTF-8 digests)."""
    return parse_bytes(text.encode("utf-8", errors="surrogateescape"), marker=marker)


def parse_file(
    path: Path,
    *,
    marker: str = DEFAULT_MARKER,
    encoding: str = "utf-8",
) -> list[Record]:
    """Stream *path* in binary mode and split it into records.

    Raises:
        SourceError: The file could not be opened or read. No partial
            result is returned.

    """
    try:
        with path.open("rb") as fh:
            return parse_lines(fh, marker=marker, encoding=encoding)
    except OSError as exc:
        msg = f"cannot read {path}: {exc}"
        raise SourceError(msg) from exc


def render_records(records: Sequence[Record]) -> str:
    """Join records back into document text, one newline after each record.

    Re-parsing the result reproduces the same keys, line spans, and digests
    (for UTF-8 input without a preamble).

    """
    return "".join(record.content + "\n" for record in records)
