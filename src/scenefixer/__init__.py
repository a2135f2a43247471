"""scenefixer - health monitoring and automatic repair for smart-home scenes."""

from __future__ import annotations

from importlib.metadata import version

from .config import Settings, get_settings
from .models import (
    AuditResult,
    Device,
    RepairAction,
    Scene,
    SceneBackup,
    TestResult,
)
from .services import Engine, build_engine
from .storage import BackupStore

__all__ = [
    "AuditResult",
    "BackupStore",
    "Device",
    "Engine",
    "RepairAction",
    "Scene",
    "SceneBackup",
    "Settings",
    "TestResult",
    "__version__",
    "build_engine",
    "get_settings",
]

__version__ = version("scenefixer")
