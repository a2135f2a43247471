from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, computed_field

from .device import new_id, utcnow


def percentage(reachable: int, total: int) -> float:
    if total <= 0:
        return 100.0
    return reachable / total * 100


class SceneHealthStatus(StrEnum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    BROKEN = "broken"
    UNKNOWN = "unknown"


class RepairActionType(StrEnum):
    REMOVE_DEVICE = "remove_device"
    RESTORE_DEVICE = "restore_device"
    UPDATE_CONFIGURATION = "update_configuration"
    FULL_RESTORE = "full_restore"


class Scene(BaseModel):
    model_config = {"extra": "forbid"}

    id: str = Field(default_factory=new_id)
    name: str
    action_set_id: str

    total_devices: int = 0
    reachable_devices: int = 0
    unreachable_devices: int = 0
    reachable_device_names: list[str] = Field(default_factory=list)
    unreachable_device_names: list[str] = Field(default_factory=list)

    health_status: SceneHealthStatus = SceneHealthStatus.UNKNOWN
    last_audit: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def health_percentage(self) -> float:
        return percentage(self.reachable_devices, self.total_devices)


class AuditResult(BaseModel):
    """Snapshot produced by auditing one scene."""

    model_config = {"extra": "forbid"}

    id: str = Field(default_factory=new_id)
    scene: Scene
    audit_date: datetime = Field(default_factory=utcnow)
    found: bool = True
    status: SceneHealthStatus = SceneHealthStatus.UNKNOWN
    reachable_devices: list[str] = Field(default_factory=list)
    unreachable_devices: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def health_percentage(self) -> float:
        total = len(self.reachable_devices) + len(self.unreachable_devices)
        return percentage(len(self.reachable_devices), total)


class SceneBackup(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(default_factory=new_id)
    scene_id: str
    scene_name: str
    backup_date: datetime = Field(default_factory=utcnow)
    device_names: list[str] = Field(default_factory=list)
    configuration: dict[str, str] = Field(default_factory=dict)


class RepairAction(BaseModel):
    """Audit-log entry for one repair or restore attempt."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(default_factory=new_id)
    scene_id: str
    scene_name: str
    action_type: RepairActionType
    device_name: str | None = None
    removed_count: int | None = None
    timestamp: datetime = Field(default_factory=utcnow)
    success: bool
    message: str | None = None
