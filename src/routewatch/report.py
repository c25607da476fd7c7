"""Console report — startup banner and per-cycle change summaries.

Everything is written to stderr.  Detects ``NO_COLOR`` / ``TERM`` for safe
fallback to plain text.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from routewatch.config import WatchConfig
    from routewatch.observability.status import WatchStatus
    from routewatch.records.store import ChangeReport


# ---------------------------------------------------------------------------
# ANSI helpers, respecting NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(config: WatchConfig, record_count: int, *, load_ms: float = 0.0) -> None:
    """Print the routewatch startup banner to stderr.

    Args:
        config: Resolved WatchConfig.
        record_count: Number of records in the initial snapshot.
        load_ms: Time spent on the initial load in milliseconds.

    """
    from routewatch import __version__

    lines: list[str] = [
        "",
        f"  {_BOLD}routewatch{_RESET} {_DIM}v{__version__}{_RESET}",
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {_plural(record_count, 'record')} loaded{timing}")
    lines.append(f"  {_DIM}├─{_RESET} marker: {_DIM}{config.marker}{_RESET}")
    lines.append(f"  {_DIM}└─{_RESET} debounce: {config.debounce_ms}ms")
    lines.append("")
    lines.append(f"  {_DIM}Watching {config.path} for changes... (press Ctrl+C to exit){_RESET}")
    lines.append("")

    print("\n".join(lines), file=sys.stderr)


def format_change_summary(report: ChangeReport, *, max_listed: int = 10) -> list[str]:
    """Render a ChangeReport as summary lines.

    At most *max_listed* keys are listed (sorted); the remainder is
    summarised as a count.

    """
    if not report.has_changes:
        return [f"No changes detected (checked in {report.elapsed_ms:.1f}ms)"]

    noun = "changed record" if len(report.changed) == 1 else "changed records"
    lines = [f"Found {len(report.changed)} {noun} (detected in {report.elapsed_ms:.1f}ms):"]
    keys = sorted(report.changed)
    for key in keys[:max_listed]:
        lines.append(f"  - {key}")
    hidden = len(keys) - max_listed
    if hidden > 0:
        lines.append(f"  ... and {hidden} more")
    return lines


def print_change_summary(report: ChangeReport, *, max_listed: int = 10) -> None:
    """Print the summary of one reload cycle to stderr."""
    lines = format_change_summary(report, max_listed=max_listed)
    color = _GREEN if report.has_changes else _DIM
    lines[0] = f"{color}{lines[0]}{_RESET}"
    print("\n".join(["", f"{_BOLD}[File Change Detected]{_RESET}", *lines]), file=sys.stderr)


def print_session_summary(status: WatchStatus) -> None:
    """Print the end-of-session summary to stderr."""
    parts = [
        _plural(status.reloads, "reload"),
        _plural(status.reload_failures, "failed reload"),
        _plural(status.signals, "file signal"),
    ]
    if status.watcher_failures:
        parts.append(_plural(status.watcher_failures, "watcher error"))
    lines = [
        "",
        f"  {_DIM}Stopped.{_RESET} {_plural(status.record_count, 'record')} in the live snapshot",
        f"  {_DIM}{', '.join(parts)}{_RESET}",
    ]
    if status.last_error is not None:
        lines.append(f"  {_RED}Last reload error{_RESET}: {status.last_error}")
    print("\n".join(lines), file=sys.stderr)


def print_reload_error(path: Path, exc: BaseException) -> None:
    """Report a reload that kept the previous snapshot."""
    print(
        f"  {_RED}Reload error{_RESET} ({path.name}): {exc} (keeping previous snapshot)",
        file=sys.stderr,
    )


def print_watch_warning(path: Path, exc: BaseException) -> None:
    """Report an error from the filesystem notification primitive."""
    print(f"  {_YELLOW}!{_RESET} File watcher error ({path.name}): {exc}", file=sys.stderr)


def print_callback_error(exc: BaseException) -> None:
    """Report an exception raised by a debounced change callback."""
    print(f"  {_RED}Change handler error{_RESET}: {exc}", file=sys.stderr)
