from __future__ import annotations

import logging
from collections.abc import Callable

from scenefixer.models import (
    Device,
    DeviceHealthStatus,
    ManufacturerSummary,
    RoomSummary,
    Scene,
)

from .inference import infer_manufacturer, infer_protocol, parse_category
from .platform import HomePlatform, PlatformDevice, PlatformError, PlatformScene

logger = logging.getLogger(__name__)

DeviceUpdate = Callable[[Device], None]
SceneUpdate = Callable[[Scene], None]


class HomeInventory:
    """Keyed device and scene collections for one home.

    Records are only changed through ``update_device`` / ``update_scene``,
    which look the record up by id at call time. Every read hands out copies,
    so a caller holding a snapshot never observes a half-applied update.
    """

    def __init__(self, platform: HomePlatform) -> None:
        self._platform = platform
        self._devices: dict[str, Device] = {}
        self._scenes: dict[str, Scene] = {}
        self.is_loading = False
        self.error_message: str | None = None

    def devices(self) -> list[Device]:
        return [device.model_copy(deep=True) for device in self._devices.values()]

    def scenes(self) -> list[Scene]:
        return [scene.model_copy(deep=True) for scene in self._scenes.values()]

    def get_device(self, device_id: str) -> Device | None:
        device = self._devices.get(device_id)
        return device.model_copy(deep=True) if device else None

    def get_scene(self, scene_id: str) -> Scene | None:
        scene = self._scenes.get(scene_id)
        return scene.model_copy(deep=True) if scene else None

    def find_device(self, key: str) -> Device | None:
        """Look a device up by id, accessory id or exact name."""
        for device in self._devices.values():
            if key in (device.id, device.accessory_id, device.name):
                return device.model_copy(deep=True)
        return None

    def find_scene(self, key: str) -> Scene | None:
        """Look a scene up by id, action set id or exact name."""
        for scene in self._scenes.values():
            if key in (scene.id, scene.action_set_id, scene.name):
                return scene.model_copy(deep=True)
        return None

    def add_device(self, device: Device) -> None:
        self._devices[device.id] = device.model_copy(deep=True)

    def add_scene(self, scene: Scene) -> None:
        self._scenes[scene.id] = scene.model_copy(deep=True)

    def update_device(self, device_id: str, update: DeviceUpdate) -> Device | None:
        device = self._devices.get(device_id)
        if device is None:
            return None
        update(device)
        return device.model_copy(deep=True)

    def update_scene(self, scene_id: str, update: SceneUpdate) -> Scene | None:
        scene = self._scenes.get(scene_id)
        if scene is None:
            return None
        update(scene)
        return scene.model_copy(deep=True)

    async def refresh(self) -> bool:
        """Reload the catalog from the platform.

        Records already known (matched by external id) keep their identity,
        test history and last audit; everything descriptive is overwritten.
        """
        self.is_loading = True
        try:
            platform_devices = await self._platform.list_devices()
            platform_scenes = await self._platform.list_scenes()
        except PlatformError as exc:
            self.error_message = str(exc)
            logger.warning("Failed to refresh home catalog: %s", exc)
            return False
        finally:
            self.is_loading = False

        self.error_message = None
        self._scenes = self._merge_scenes(platform_scenes)
        self._devices = self._merge_devices(platform_devices, platform_scenes)

        logger.info(
            "Refreshed %d devices and %d scenes", len(self._devices), len(self._scenes)
        )
        return True

    def _merge_devices(
        self, platform_devices: list[PlatformDevice], scenes: list[PlatformScene]
    ) -> dict[str, Device]:
        known = {device.accessory_id: device for device in self._devices.values()}
        merged: dict[str, Device] = {}

        for info in platform_devices:
            memberships = [s.name for s in scenes if info.id in s.device_ids()]
            device = known.get(info.id) or Device(accessory_id=info.id, name=info.name)

            device.name = info.name
            device.room = info.room
            device.manufacturer = infer_manufacturer(info.manufacturer)
            device.protocol = infer_protocol(info.manufacturer)
            device.category = parse_category(info.category)
            device.model = info.model
            device.firmware_version = info.firmware_version
            device.has_power_state = info.has_power_state
            device.is_reachable = info.reachable
            if not device.test_history:
                device.health_status = DeviceHealthStatus.UNKNOWN
            device.scene_count = len(memberships)
            device.scene_names = memberships

            merged[device.id] = device
        return merged

    def _merge_scenes(self, platform_scenes: list[PlatformScene]) -> dict[str, Scene]:
        known = {scene.action_set_id: scene for scene in self._scenes.values()}
        merged: dict[str, Scene] = {}

        for info in platform_scenes:
            scene = known.get(info.id)
            if scene is None:
                scene = Scene(
                    name=info.name,
                    action_set_id=info.id,
                    total_devices=len(info.device_ids()),
                )
            scene.name = info.name
            merged[scene.id] = scene
        return merged

    def devices_needing_attention(self) -> list[Device]:
        flagged = (DeviceHealthStatus.DEGRADED, DeviceHealthStatus.UNREACHABLE)
        return [
            device
            for device in self.devices()
            if device.health_status in flagged or not device.is_reachable
        ]

    def room_summaries(self) -> list[RoomSummary]:
        rooms: dict[str, RoomSummary] = {}
        for device in self._devices.values():
            if device.room is None:
                continue
            summary = rooms.setdefault(device.room, RoomSummary(name=device.room))
            summary.total_devices += 1
            if device.health_status == DeviceHealthStatus.HEALTHY:
                summary.healthy_devices += 1
            elif device.health_status == DeviceHealthStatus.DEGRADED:
                summary.degraded_devices += 1
            elif device.health_status == DeviceHealthStatus.UNREACHABLE:
                summary.unreachable_devices += 1
        return sorted(rooms.values(), key=lambda summary: summary.name)

    def manufacturer_summaries(self) -> list[ManufacturerSummary]:
        grouped: dict[str, list[Device]] = {}
        for device in self._devices.values():
            grouped.setdefault(device.manufacturer, []).append(device)

        summaries = []
        for devices in grouped.values():
            statuses = [device.health_status for device in devices]
            summaries.append(
                ManufacturerSummary(
                    manufacturer=devices[0].manufacturer,
                    device_count=len(devices),
                    healthy_count=statuses.count(DeviceHealthStatus.HEALTHY),
                    degraded_count=statuses.count(DeviceHealthStatus.DEGRADED),
                    unreachable_count=statuses.count(DeviceHealthStatus.UNREACHABLE),
                    average_reliability=sum(d.reliability_score for d in devices)
                    / len(devices),
                )
            )
        return sorted(summaries, key=lambda summary: summary.device_count, reverse=True)
