from __future__ import annotations

import os
from pathlib import Path

import platformdirs

APP_NAME = "scenefixer"
CONFIG_FILENAME = "config.toml"
HOME_FILENAME = "home.yaml"
BACKUPS_FILENAME = "scene_backups.json"


def default_config_path() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME)) / CONFIG_FILENAME


def default_data_dir() -> Path:
    return Path(platformdirs.user_data_dir(APP_NAME))


def default_home_file() -> Path:
    return default_data_dir() / HOME_FILENAME


def expand_path(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))
