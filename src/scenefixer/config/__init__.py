from __future__ import annotations

from .paths import (
    APP_NAME,
    BACKUPS_FILENAME,
    CONFIG_FILENAME,
    HOME_FILENAME,
    default_config_path,
    default_data_dir,
    default_home_file,
    expand_path,
)
from .settings import (
    CONFIG_ENV_VAR,
    AuditingConfig,
    DatabaseConfig,
    HomeConfig,
    ProbingConfig,
    RetentionConfig,
    Settings,
    backups_path_from_settings,
    data_dir_from_settings,
    get_settings,
    home_file_from_settings,
    load_settings,
    render_settings_toml,
    resolve_config_path,
    write_settings,
)

__all__ = [
    "APP_NAME",
    "BACKUPS_FILENAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "HOME_FILENAME",
    "AuditingConfig",
    "DatabaseConfig",
    "HomeConfig",
    "ProbingConfig",
    "RetentionConfig",
    "Settings",
    "backups_path_from_settings",
    "data_dir_from_settings",
    "default_config_path",
    "default_data_dir",
    "default_home_file",
    "expand_path",
    "get_settings",
    "home_file_from_settings",
    "load_settings",
    "render_settings_toml",
    "resolve_config_path",
    "write_settings",
]
