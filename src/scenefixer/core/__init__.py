from __future__ import annotations

from .auditor import SceneAuditor, build_recommendations
from .file_home import FileHomePlatform
from .health import (
    KeepAll,
    KeepLatest,
    RetentionPolicy,
    apply_test_result,
    classify_scene,
    reliability_score,
    retention_for,
    windowed_status,
)
from .inference import infer_manufacturer, infer_protocol, parse_category
from .inventory import HomeInventory
from .platform import (
    CharacteristicError,
    DeviceNotFoundError,
    HomePlatform,
    PlatformDevice,
    PlatformError,
    PlatformScene,
    SceneAction,
    SceneNotFoundError,
)
from .prober import DeviceProber
from .progress import ProgressCallback, SweepProgress
from .repair import RepairOrchestrator

__all__ = [
    "CharacteristicError",
    "DeviceNotFoundError",
    "DeviceProber",
    "FileHomePlatform",
    "HomeInventory",
    "HomePlatform",
    "KeepAll",
    "KeepLatest",
    "PlatformDevice",
    "PlatformError",
    "PlatformScene",
    "ProgressCallback",
    "RepairOrchestrator",
    "RetentionPolicy",
    "SceneAction",
    "SceneAuditor",
    "SceneNotFoundError",
    "SweepProgress",
    "apply_test_result",
    "build_recommendations",
    "classify_scene",
    "infer_manufacturer",
    "infer_protocol",
    "parse_category",
    "reliability_score",
    "retention_for",
    "windowed_status",
]
