from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, Field


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeviceHealthStatus(StrEnum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNREACHABLE = "unreachable"
    UNKNOWN = "unknown"
    TESTING = "testing"


class DeviceProtocol(StrEnum):
    WIFI = "wifi"
    ZIGBEE = "zigbee"
    ZWAVE = "zwave"
    BLUETOOTH = "bluetooth"
    THREAD = "thread"
    MATTER = "matter"
    UNKNOWN = "unknown"


class DeviceManufacturer(StrEnum):
    PHILIPS_HUE = "philips_hue"
    LUTRON = "lutron"
    IKEA = "ikea"
    NANOLEAF = "nanoleaf"
    ECOBEE = "ecobee"
    SCHLAGE = "schlage"
    YALE = "yale"
    AUGUST = "august"
    EVE = "eve"
    LIFX = "lifx"
    WEMO = "wemo"
    TP_LINK = "tp_link"
    MEROSS = "meross"
    AQARA = "aqara"
    SONOS = "sonos"
    APPLE = "apple"
    UNKNOWN = "unknown"


class DeviceCategory(StrEnum):
    LIGHT = "light"
    SWITCH = "switch"
    OUTLET = "outlet"
    THERMOSTAT = "thermostat"
    LOCK = "lock"
    GARAGE_DOOR = "garage_door"
    SENSOR = "sensor"
    CAMERA = "camera"
    DOORBELL = "doorbell"
    SPEAKER = "speaker"
    FAN = "fan"
    BLIND = "blind"
    OTHER = "other"

    @property
    def is_dangerous(self) -> bool:
        """Categories that automated state-changing tests must never touch."""
        return self in DANGEROUS_CATEGORIES


DANGEROUS_CATEGORIES = frozenset({DeviceCategory.LOCK, DeviceCategory.GARAGE_DOOR})


class TestResult(BaseModel):
    """Outcome of a single connectivity or toggle test."""

    model_config = {"frozen": True, "extra": "forbid"}
    __test__: ClassVar[bool] = False

    id: str = Field(default_factory=new_id)
    timestamp: datetime = Field(default_factory=utcnow)
    success: bool
    response_time: float | None = None  # milliseconds
    error_message: str | None = None


class Device(BaseModel):
    model_config = {"extra": "forbid"}

    id: str = Field(default_factory=new_id)
    accessory_id: str
    name: str
    room: str | None = None
    manufacturer: DeviceManufacturer = DeviceManufacturer.UNKNOWN
    category: DeviceCategory = DeviceCategory.OTHER
    protocol: DeviceProtocol = DeviceProtocol.UNKNOWN
    model: str | None = None
    firmware_version: str | None = None
    has_power_state: bool = False

    is_reachable: bool = True
    health_status: DeviceHealthStatus = DeviceHealthStatus.UNKNOWN
    reliability_score: float = 100.0
    last_seen: datetime | None = None
    average_response_time: float | None = None
    test_history: list[TestResult] = Field(default_factory=list)

    scene_count: int = 0
    scene_names: list[str] = Field(default_factory=list)


class RoomSummary(BaseModel):
    model_config = {"extra": "forbid"}

    name: str
    total_devices: int = 0
    healthy_devices: int = 0
    degraded_devices: int = 0
    unreachable_devices: int = 0


class ManufacturerSummary(BaseModel):
    model_config = {"extra": "forbid"}

    manufacturer: DeviceManufacturer
    device_count: int = 0
    healthy_count: int = 0
    degraded_count: int = 0
    unreachable_count: int = 0
    average_reliability: float = 100.0
