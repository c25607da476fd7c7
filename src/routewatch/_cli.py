"""Routewatch CLI — routewatch PATH.

Entry point for the ``routewatch`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the routewatch CLI."""
    parser = argparse.ArgumentParser(
        prog="routewatch",
        description="Watch a routing-table dump and report which records changed.",
        epilog="Example:\n  routewatch .data/routes.txt",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument("path", nargs="?", help="Path to routing table file")
    parser.add_argument(
        "-f", "--file", dest="file", default=None,
        help="Path to routing table file (alternative to PATH)",
    )
    parser.add_argument("--marker", default=None, help="Record start token (default: Destination:)")
    parser.add_argument(
        "--debounce-ms", type=int, default=None, help="Quiet interval before reloading (default: 500)",
    )
    parser.add_argument(
        "--max-listed", type=int, default=None, help="Changed keys listed per cycle (default: 10)",
    )
    parser.add_argument("--config", default=None, help="Explicit routewatch.yaml/.toml file")
    return parser


def _get_version() -> str:
    """Get the package version."""
    from routewatch import __version__

    return __version__


def _resolve_path(parser: argparse.ArgumentParser, args: argparse.Namespace) -> Path:
    """Return the watched path or exit with a usage message."""
    raw = args.file or args.path
    if not raw:
        parser.error("a routing table file is required")
    if args.file and args.path and args.file != args.path:
        parser.error("give the file either as PATH or with --file, not both")
    path = Path(raw)
    if not path.is_file():
        parser.error(f"file {raw} does not exist")
    return path


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    path = _resolve_path(parser, args)

    from routewatch._errors import RouteWatchError
    from routewatch.app import watch

    try:
        watch(
            path,
            config_file=args.config,
            marker=args.marker,
            debounce_ms=args.debounce_ms,
            max_listed=args.max_listed,
        )
    except RouteWatchError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
