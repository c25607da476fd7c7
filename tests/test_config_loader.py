"""Tests for routewatch.config_loader — file discovery and override merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from routewatch._errors import ConfigError
from routewatch.config_loader import load_config


class TestLoadConfig:
    """load_config() — yaml/toml next to the watched file, CLI overrides win."""

    def test_no_config_file(self, routes_file: Path) -> None:
        config = load_config(routes_file)
        assert config.path == routes_file
        assert config.debounce_ms == 500

    def test_yaml_discovered(self, routes_file: Path) -> None:
        (routes_file.parent / "routewatch.yaml").write_text("debounce_ms: 200\nmax_listed: 3\n")
        config = load_config(routes_file)
        assert config.debounce_ms == 200
        assert config.max_listed == 3

    def test_yml_discovered(self, routes_file: Path) -> None:
        (routes_file.parent / "routewatch.yml").write_text("marker: 'Network'\n")
        assert load_config(routes_file).marker == "Network"

    def test_toml_discovered(self, routes_file: Path) -> None:
        (routes_file.parent / "routewatch.toml").write_text("[routewatch]\ndebounce_ms = 750\n")
        assert load_config(routes_file).debounce_ms == 750

    def test_yaml_section(self, routes_file: Path) -> None:
        (routes_file.parent / "routewatch.yaml").write_text("routewatch:\n  encoding: latin-1\n")
        assert load_config(routes_file).encoding == "latin-1"

    def test_overrides_win(self, routes_file: Path) -> None:
        (routes_file.parent / "routewatch.yaml").write_text("debounce_ms: 200\n")
        assert load_config(routes_file, debounce_ms=900).debounce_ms == 900

    def test_none_overrides_ignored(self, routes_file: Path) -> None:
        (routes_file.parent / "routewatch.yaml").write_text("debounce_ms: 200\n")
        assert load_config(routes_file, debounce_ms=None).debounce_ms == 200

    def test_unrelated_top_level_keys_ignored(self, routes_file: Path) -> None:
        (routes_file.parent / "routewatch.yaml").write_text("other_tool: 1\nmax_listed: 4\n")
        assert load_config(routes_file).max_listed == 4

    def test_broken_discovered_file_ignored(self, routes_file: Path) -> None:
        (routes_file.parent / "routewatch.yaml").write_text("debounce_ms: [unclosed\n")
        assert load_config(routes_file).debounce_ms == 500

    def test_explicit_file(self, routes_file: Path, tmp_path: Path) -> None:
        explicit = tmp_path / "custom.toml"
        explicit.write_text("max_listed = 25\n")
        assert load_config(routes_file, config_file=explicit).max_listed == 25

    def test_explicit_missing_file(self, routes_file: Path, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(routes_file, config_file=tmp_path / "nope.yaml")

    def test_explicit_broken_file(self, routes_file: Path, tmp_path: Path) -> None:
        explicit = tmp_path / "bad.toml"
        explicit.write_text("max_listed = \n")
        with pytest.raises(ConfigError, match="cannot read"):
            load_config(routes_file, config_file=explicit)

    def test_explicit_non_mapping(self, routes_file: Path, tmp_path: Path) -> None:
        explicit = tmp_path / "list.yaml"
        explicit.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(routes_file, config_file=explicit)

    def test_unknown_override_rejected(self, routes_file: Path) -> None:
        with pytest.raises(ConfigError, match="unknown config keys"):
            load_config(routes_file, colour="red")

    def test_invalid_value_from_file(self, routes_file: Path) -> None:
        (routes_file.parent / "routewatch.yaml").write_text("debounce_ms: 0\n")
        with pytest.raises(ConfigError, match="debounce_ms"):
            load_config(routes_file)
