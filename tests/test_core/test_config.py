"""Tests for claycli.core.config module.

Covers:
  - get_global_config_path() with default and XDG_CONFIG_HOME
  - load_global_config() with missing, valid, and invalid files
  - find_project_root() 3-tier resolution (env var > local walk > global config)
  - get_paths()
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from claycli.core.config import (
    find_project_root,
    get_global_config_path,
    get_paths,
    load_global_config,
)


def _write_global_config(base: Path, data) -> None:
    config_dir = base / "claycli"
    config_dir.mkdir(parents=True)
    (config_dir / "config.yaml").write_text(yaml.dump(data), encoding="utf-8")


# ---------------------------------------------------------------------------
# get_global_config_path
# ---------------------------------------------------------------------------

class TestGetGlobalConfigPath:
    """Tests for get_global_config_path()."""

    def test_default_path(self, monkeypatch):
        """Without XDG_CONFIG_HOME, returns ~/.config/claycli/config.yaml."""
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        result = get_global_config_path()
        assert result == Path.home() / ".config" / "claycli" / "config.yaml"

    def test_xdg_config_home(self, monkeypatch, tmp_path):
        """With XDG_CONFIG_HOME set, uses that directory."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "custom_config"))
        result = get_global_config_path()
        assert result == tmp_path / "custom_config" / "claycli" / "config.yaml"


# ---------------------------------------------------------------------------
# load_global_config
# ---------------------------------------------------------------------------

class TestLoadGlobalConfig:
    """Tests for load_global_config()."""

    def test_missing_file_returns_empty(self, monkeypatch, tmp_path):
        """Returns empty dict when config file does not exist."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "nonexistent"))
        assert load_global_config() == {}

    def test_valid_config(self, monkeypatch, tmp_path):
        """Returns parsed dict from valid YAML config."""
        _write_global_config(tmp_path, {"root": "/some/path", "extra": 42})
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert load_global_config() == {"root": "/some/path", "extra": 42}

    def test_invalid_yaml_returns_empty(self, monkeypatch, tmp_path):
        """Returns empty dict when YAML is invalid."""
        config_dir = tmp_path / "claycli"
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("{{{{invalid yaml:::::", encoding="utf-8")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert load_global_config() == {}

    def test_non_dict_yaml_returns_empty(self, monkeypatch, tmp_path):
        """Returns empty dict when YAML parses to a list."""
        _write_global_config(tmp_path, ["item1", "item2"])
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert load_global_config() == {}


# ---------------------------------------------------------------------------
# find_project_root
# ---------------------------------------------------------------------------

class TestFindProjectRoot:
    """Tests for find_project_root() 3-tier resolution."""

    def _make_project(self, base: Path) -> Path:
        (base / ".clay").mkdir(parents=True)
        return base

    def test_env_var_takes_priority(self, monkeypatch, tmp_path):
        """CLAYCLI_ROOT env var is the highest priority."""
        project = self._make_project(tmp_path / "env_project")
        monkeypatch.setenv("CLAYCLI_ROOT", str(project))
        result = find_project_root(start_path=tmp_path / "nowhere")
        assert result == project.resolve()

    def test_env_var_without_clay_dir_raises(self, monkeypatch, tmp_path):
        """CLAYCLI_ROOT pointing to a dir without .clay/ raises."""
        bad_dir = tmp_path / "no_clay"
        bad_dir.mkdir()
        monkeypatch.setenv("CLAYCLI_ROOT", str(bad_dir))
        with pytest.raises(FileNotFoundError, match="CLAYCLI_ROOT"):
            find_project_root()

    def test_local_walk_finds_clay(self, monkeypatch, tmp_path):
        """Walking up from a subdirectory finds .clay/ in a parent."""
        monkeypatch.delenv("CLAYCLI_ROOT", raising=False)
        project = self._make_project(tmp_path / "my_project")
        subdir = project / "components" / "article"
        subdir.mkdir(parents=True)
        assert find_project_root(start_path=subdir) == project.resolve()

    def test_local_walk_takes_priority_over_global_config(self, monkeypatch, tmp_path):
        """Local .clay/ walk wins over global config root."""
        monkeypatch.delenv("CLAYCLI_ROOT", raising=False)
        global_project = self._make_project(tmp_path / "global_project")
        _write_global_config(tmp_path / "xdg", {"root": str(global_project)})
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

        local_project = self._make_project(tmp_path / "local_project")
        assert find_project_root(start_path=local_project) == local_project.resolve()

    def test_global_config_fallback(self, monkeypatch, tmp_path):
        """Falls back to global config root when local walk fails."""
        monkeypatch.delenv("CLAYCLI_ROOT", raising=False)
        start = tmp_path / "no_clay_here" / "deep"
        start.mkdir(parents=True)

        global_project = self._make_project(tmp_path / "global_project")
        _write_global_config(tmp_path / "xdg", {"root": str(global_project)})
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

        assert find_project_root(start_path=start) == global_project.resolve()

    def test_global_config_bad_path_raises(self, monkeypatch, tmp_path):
        """Global config root without .clay/ raises FileNotFoundError."""
        monkeypatch.delenv("CLAYCLI_ROOT", raising=False)
        bad_dir = tmp_path / "bad_global"
        bad_dir.mkdir()
        _write_global_config(tmp_path / "xdg", {"root": str(bad_dir)})
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

        start = tmp_path / "nowhere"
        start.mkdir()

        with pytest.raises(FileNotFoundError, match="Global config"):
            find_project_root(start_path=start)

    def test_no_resolution_raises(self, monkeypatch, tmp_path):
        """Raises FileNotFoundError when none of the 3 tiers work."""
        monkeypatch.delenv("CLAYCLI_ROOT", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "empty_xdg"))
        start = tmp_path / "nowhere"
        start.mkdir()

        with pytest.raises(FileNotFoundError, match="clay init"):
            find_project_root(start_path=start)


# ---------------------------------------------------------------------------
# get_paths
# ---------------------------------------------------------------------------

class TestGetPaths:
    """Tests for get_paths()."""

    def test_paths(self, tmp_path):
        paths = get_paths(project_root=tmp_path)
        assert paths.root == tmp_path
        assert paths.clay_dir == tmp_path / ".clay"
        assert paths.config_file == tmp_path / ".clay" / "config.yaml"
        assert paths.backups == tmp_path / ".clay" / "backups"

    def test_uses_cached_root(self, mock_project_root):
        assert get_paths().root == mock_project_root
