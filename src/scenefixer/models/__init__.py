"""Data models for SceneFixer."""

from scenefixer.models.device import (
    DANGEROUS_CATEGORIES,
    Device,
    DeviceCategory,
    DeviceHealthStatus,
    DeviceManufacturer,
    DeviceProtocol,
    ManufacturerSummary,
    RoomSummary,
    TestResult,
)
from scenefixer.models.scene import (
    AuditResult,
    RepairAction,
    RepairActionType,
    Scene,
    SceneBackup,
    SceneHealthStatus,
)

__all__ = [
    "DANGEROUS_CATEGORIES",
    "AuditResult",
    "Device",
    "DeviceCategory",
    "DeviceHealthStatus",
    "DeviceManufacturer",
    "DeviceProtocol",
    "ManufacturerSummary",
    "RepairAction",
    "RepairActionType",
    "RoomSummary",
    "Scene",
    "SceneBackup",
    "SceneHealthStatus",
    "TestResult",
]
