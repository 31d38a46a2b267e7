"""Tests for glint.config."""

from __future__ import annotations

import json

import pytest

from glint.config import (
    DEFAULT_MAX_FILES,
    DEFAULT_SUBJECT_LIMIT,
    Config,
    config_from_dict,
    load_config,
)


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("GLINT_CONFIG_DIR", str(tmp_path))
    return tmp_path


class TestFromDict:
    def test_empty(self) -> None:
        assert config_from_dict({}) == Config()

    def test_banner_string_is_split(self) -> None:
        assert config_from_dict({"banner": "one\ntwo"}).banner == ["one", "two"]

    def test_banner_list(self) -> None:
        assert config_from_dict({"banner": ["x", 1]}).banner == ["x", "1"]

    def test_limits_are_clamped(self) -> None:
        config = config_from_dict({"subjectLimit": 0, "maxFiles": 2})
        assert config.subject_limit == 1
        assert config.max_files == 4

    def test_wrong_types_are_ignored(self) -> None:
        config = config_from_dict({"subjectLimit": "72", "keybindings": []})
        assert config.subject_limit == DEFAULT_SUBJECT_LIMIT
        assert config.keybindings == {}

    def test_keybindings(self) -> None:
        config = config_from_dict({"keybindings": {"confirm": ["ctrl+s"]}})
        assert config.keybindings == {"confirm": ["ctrl+s"]}


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, config_dir) -> None:
        config = load_config()
        assert config.subject_limit == DEFAULT_SUBJECT_LIMIT
        assert config.max_files == DEFAULT_MAX_FILES

    def test_reads_file(self, config_dir) -> None:
        (config_dir / "config.json").write_text(
            json.dumps({"banner": ["hey"], "subjectLimit": 72, "keybindings": {"toggle": "x"}})
        )
        assert load_config() == Config(
            banner=["hey"], subject_limit=72, keybindings={"toggle": "x"}
        )

    def test_missing_dir_gives_defaults(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("GLINT_CONFIG_DIR", str(tmp_path / "nested" / "dir"))
        assert load_config() == Config()

    def test_invalid_json(self, config_dir, capsys) -> None:
        (config_dir / "config.json").write_text("{nope")
        assert load_config() == Config()
        assert "Error reading config" in capsys.readouterr().err

    def test_non_object_json(self, config_dir, capsys) -> None:
        (config_dir / "config.json").write_text("[1, 2]")
        assert load_config() == Config()
        assert "Error reading config" in capsys.readouterr().err
