"""Routewatch configuration.

WatchConfig is the central configuration object, frozen after creation.
"""

import codecs
from dataclasses import dataclass
from pathlib import Path

from routewatch._errors import ConfigError

DEFAULT_MARKER = "Destination:"


@dataclass(frozen=True, slots=True)
class WatchConfig:
    """Configuration for a routewatch session.

    Attributes:
        path: Path to the routing-table dump being watched.
              Always resolved to an absolute path on construction.
        marker: Token that starts every record line (e.g. ``Destination:``).
        debounce_ms: Quiet interval after the last filesystem signal before
            a reload cycle runs.
        max_listed: Maximum number of changed keys listed individually in a
            change summary; the rest are summarised as a count.
        encoding: Text encoding of the watched file.
        verbose: Print banners and change summaries to stderr.

    """

    path: Path
    marker: str = DEFAULT_MARKER
    debounce_ms: int = 500
    max_listed: int = 10
    encoding: str = "utf-8"
    verbose: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))
        # Resolve to absolute so that watchfiles (which reports absolute
        # paths) can be compared by equality.
        if not self.path.is_absolute():
            object.__setattr__(self, "path", self.path.resolve())

        if not self.marker or self.marker != self.marker.strip():
            msg = f"marker must be a non-empty token without surrounding whitespace, got {self.marker!r}"
            raise ConfigError(msg)
        if self.debounce_ms <= 0:
            msg = f"debounce_ms must be positive, got {self.debounce_ms}"
            raise ConfigError(msg)
        if self.max_listed < 0:
            msg = f"max_listed must not be negative, got {self.max_listed}"
            raise ConfigError(msg)
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            msg = f"unknown encoding {self.encoding!r}"
            raise ConfigError(msg) from exc

    @property
    def watch_dir(self) -> Path:
        """Directory that receives the filesystem watch."""
        return self.path.parent

    @property
    def debounce_seconds(self) -> float:
        """Debounce interval in seconds."""
        return self.debounce_ms / 1000
