"""Load WatchConfig from routewatch.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from routewatch._errors import ConfigError
from routewatch.config import WatchConfig

_CONFIG_NAMES = ("routewatch.yaml", "routewatch.yml", "routewatch.toml")
_CONFIG_KEYS = ("marker", "debounce_ms", "max_listed", "encoding", "verbose")


def load_config(
    path: str | Path,
    *,
    config_file: str | Path | None = None,
    **overrides: object,
) -> WatchConfig:
    """Load WatchConfig for *path*, optionally merging a config file.

    With no *config_file*, looks for routewatch.yaml, routewatch.yml, or
    routewatch.toml next to the watched file. Overrides that are ``None``
    are ignored so unset CLI flags fall through to the file value.
    """
    path = Path(path)
    if config_file is not None:
        file_config = _read_explicit(Path(config_file))
    else:
        file_config = _discover(path.resolve().parent)

    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    unknown = sorted(set(merged) - set(_CONFIG_KEYS))
    if unknown:
        msg = f"unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)
    return WatchConfig(path=path, **merged)  # type: ignore[arg-type]


def _discover(directory: Path) -> dict[str, object]:
    """Read the first config file found in *directory*. Returns empty dict otherwise."""
    for name in _CONFIG_NAMES:
        candidate = directory / name
        if candidate.is_file():
            try:
                return _parse(candidate)
            except ConfigError:
                return {}
    return {}


def _read_explicit(path: Path) -> dict[str, object]:
    """Read a config file the user asked for by name; errors are fatal."""
    if not path.is_file():
        msg = f"config file not found: {path}"
        raise ConfigError(msg)
    return _parse(path)


def _parse(path: Path) -> dict[str, object]:
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".toml":
            data = tomllib.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        msg = f"cannot read config file {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"config file {path} must contain a mapping"
        raise ConfigError(msg)
    return _flatten_section(data)


def _flatten_section(data: dict[str, object]) -> dict[str, object]:
    """Extract routewatch.* keys into top-level config."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _CONFIG_KEYS:
            result[k] = v
    section = data.get("routewatch")
    if isinstance(section, dict):
        for k, v in section.items():
            result[k] = v
    return result
