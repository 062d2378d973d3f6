"""Tests for config discovery and loading."""

from pathlib import Path

import pytest

from mindlattice.config.discovery import CONFIG_ENV_VAR, find_config, load_config


class TestFindConfig:
    def test_finds_in_start_dir(self, tmp_path: Path) -> None:
        cfg = tmp_path / "mindlattice.toml"
        cfg.write_text("")
        assert find_config(tmp_path) == cfg.resolve()

    def test_walks_up(self, tmp_path: Path) -> None:
        cfg = tmp_path / "mindlattice.toml"
        cfg.write_text("")
        nested = tmp_path / "x" / "y"
        nested.mkdir(parents=True)
        assert find_config(nested) == cfg.resolve()

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "mindlattice.toml").write_text("")
        other = tmp_path / "other.toml"
        other.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))
        assert find_config(tmp_path) == other

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = load_config(cwd=tmp_path)
        assert config.lattice.capacity == 4096

    def test_loads_sections(self, tmp_path: Path) -> None:
        cfg = tmp_path / "mindlattice.toml"
        cfg.write_text('[render]\nmax_depth = 3\n[export]\ndefault_format = "dot"\n')
        config = load_config(cfg)
        assert config.render.max_depth == 3
        assert config.export.default_format == "dot"
        assert config.lattice.max_depth == 64
