from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .paths import (
    BACKUPS_FILENAME,
    default_config_path,
    default_data_dir,
    default_home_file,
    expand_path,
)

CONFIG_ENV_VAR = "SCENEFIXER_CONFIG"


class DatabaseConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    path: str = Field(default_factory=lambda: str(default_data_dir()))


class HomeConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    file: str = Field(default_factory=lambda: str(default_home_file()))


class ProbingConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    probe_delay: float = Field(default=0.1, ge=0)
    toggle_step_delay: float = Field(default=0.3, ge=0)
    toggle_device_delay: float = Field(default=0.5, ge=0)
    health_window: int = Field(default=10, ge=1)


class AuditingConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    audit_delay: float = Field(default=0.1, ge=0)
    rebuild_threshold: float = Field(default=50.0, ge=0, le=100)


class RetentionConfig(BaseModel):
    """Caps for append-only collections. ``None`` keeps everything."""

    model_config = {"frozen": True, "extra": "forbid"}

    max_test_history: int | None = Field(default=None, ge=1)
    max_backups: int | None = Field(default=None, ge=1)


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    home: HomeConfig = Field(default_factory=HomeConfig)
    probing: ProbingConfig = Field(default_factory=ProbingConfig)
    auditing: AuditingConfig = Field(default_factory=AuditingConfig)
    retention: RetentionConfig = Field(default_factory=RetentionConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def data_dir_from_settings(settings: Settings) -> Path:
    return expand_path(settings.database.path)


def backups_path_from_settings(settings: Settings) -> Path:
    return data_dir_from_settings(settings) / BACKUPS_FILENAME


def home_file_from_settings(settings: Settings) -> Path:
    return expand_path(settings.home.file)


def _toml_string(value: str) -> str:
    return json.dumps(value)


def _toml_optional_int(key: str, value: int | None) -> str:
    # TOML has no null; an unset cap is written as a comment
    if value is None:
        return f"# {key} = 100"
    return f"{key} = {value}"


def render_settings_toml(settings: Settings) -> str:
    lines = [
        "# SceneFixer configuration",
        "",
        "[database]",
        f"path = {_toml_string(settings.database.path)}",
        "",
        "[home]",
        f"file = {_toml_string(settings.home.file)}",
        "",
        "[probing]",
        f"probe_delay = {settings.probing.probe_delay}",
        f"toggle_step_delay = {settings.probing.toggle_step_delay}",
        f"toggle_device_delay = {settings.probing.toggle_device_delay}",
        f"health_window = {settings.probing.health_window}",
        "",
        "[auditing]",
        f"audit_delay = {settings.auditing.audit_delay}",
        f"rebuild_threshold = {settings.auditing.rebuild_threshold}",
        "",
        "[retention]",
        _toml_optional_int("max_test_history", settings.retention.max_test_history),
        _toml_optional_int("max_backups", settings.retention.max_backups),
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
