"""Configuration management for glint. Stored at ~/.glint/config.json."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_BANNER = ["glint"]
DEFAULT_SUBJECT_LIMIT = 50
DEFAULT_MAX_FILES = 15


@dataclass
class Config:
    banner: list[str] = field(default_factory=lambda: list(DEFAULT_BANNER))
    subject_limit: int = DEFAULT_SUBJECT_LIMIT
    max_files: int = DEFAULT_MAX_FILES
    keybindings: dict[str, str | list[str]] = field(default_factory=dict)


def config_from_dict(data: dict[str, Any]) -> Config:
    config = Config()
    banner = data.get("banner")
    if isinstance(banner, str):
        config.banner = banner.splitlines()
    elif isinstance(banner, list):
        config.banner = [str(line) for line in banner]
    if isinstance(data.get("subjectLimit"), int):
        config.subject_limit = max(1, data["subjectLimit"])
    if isinstance(data.get("maxFiles"), int):
        # Room for the "<all>" row, two candidates and the summary line
        config.max_files = max(4, data["maxFiles"])
    if isinstance(data.get("keybindings"), dict):
        config.keybindings = dict(data["keybindings"])
    return config


def _get_config_dir() -> Path:
    return Path(os.environ.get("GLINT_CONFIG_DIR", Path.home() / ".glint"))


def _get_config_path() -> Path:
    return _get_config_dir() / "config.json"


def load_config() -> Config:
    config_path = _get_config_path()
    if not config_path.exists():
        return Config()
    try:
        data = json.loads(config_path.read_text())
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        return config_from_dict(data)
    except (OSError, ValueError) as e:
        print(f"Error reading config: {e}", file=sys.stderr)
        return Config()
