"""YAML-backed home platform for development, demos and tests."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from .platform import (
    CharacteristicError,
    DeviceNotFoundError,
    PlatformDevice,
    PlatformError,
    PlatformScene,
    SceneNotFoundError,
)

logger = logging.getLogger(__name__)

SAMPLE_HOME: dict[str, Any] = {
    "devices": [
        {
            "id": "living-lamp",
            "name": "Living Room Lamp",
            "room": "Living Room",
            "manufacturer": "Signify Netherlands B.V.",
            "category": "light",
            "model": "LCA001",
        },
        {
            "id": "tv-backlight",
            "name": "TV Backlight",
            "room": "Living Room",
            "manufacturer": "Nanoleaf",
            "category": "light",
        },
        {
            "id": "porch-plug",
            "name": "Porch Plug",
            "room": "Porch",
            "manufacturer": "TP-Link Kasa",
            "category": "outlet",
            "reachable": False,
        },
        {
            "id": "front-door",
            "name": "Front Door Lock",
            "room": "Hallway",
            "manufacturer": "August Home",
            "category": "lock",
        },
        {
            "id": "hall-sensor",
            "name": "Hall Motion",
            "room": "Hallway",
            "manufacturer": "Aqara",
            "category": "sensor",
            "has_power_state": False,
        },
    ],
    "scenes": [
        {
            "id": "movie-night",
            "name": "Movie Night",
            "actions": [
                {"device_id": "living-lamp", "target_value": False},
                {"device_id": "tv-backlight", "target_value": True},
                {"device_id": "porch-plug", "target_value": False},
            ],
        },
        {
            "id": "good-night",
            "name": "Good Night",
            "actions": [
                {"device_id": "living-lamp", "target_value": False},
                {"device_id": "porch-plug", "target_value": False},
            ],
        },
    ],
}


class HomeDocument(BaseModel):
    model_config = {"extra": "forbid"}

    devices: list[PlatformDevice] = Field(default_factory=list)
    scenes: list[PlatformScene] = Field(default_factory=list)


def _normalize(data: dict[str, Any]) -> dict[str, Any]:
    """Fill in action ids and device names left out of a hand-written file."""
    data = copy.deepcopy(data)
    names = {d.get("id"): d.get("name") for d in data.get("devices", [])}
    for scene in data.get("scenes", []):
        for index, action in enumerate(scene.get("actions", [])):
            action.setdefault("id", f"{scene.get('id')}:{index}")
            device_id = action.get("device_id")
            action.setdefault("device_name", names.get(device_id) or device_id)
    return data


class FileHomePlatform:
    """Home platform whose state lives in memory and, optionally, a YAML file.

    Mutations are written back to ``path`` when one is set. The ``fail_*``
    sets inject failures: reads or writes for the listed device ids, and
    removals for the listed action ids, raise ``PlatformError``.
    """

    def __init__(
        self,
        devices: list[PlatformDevice] | None = None,
        scenes: list[PlatformScene] | None = None,
        path: Path | None = None,
    ) -> None:
        self._devices = {device.id: device for device in devices or []}
        self._scenes = {scene.id: scene for scene in scenes or []}
        self.path = path

        self.fail_reads: set[str] = set()
        self.fail_writes: set[str] = set()
        self.fail_removals: set[str] = set()
        self.writes: list[tuple[str, bool]] = []

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], path: Path | None = None
    ) -> FileHomePlatform:
        document = HomeDocument.model_validate(_normalize(data))
        return cls(document.devices, document.scenes, path=path)

    @classmethod
    def load(cls, path: Path) -> FileHomePlatform:
        if not path.exists():
            raise FileNotFoundError(f"Home file not found: {path}")

        with path.open("r") as handle:
            try:
                data = yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in home file: {path}\n{exc}") from exc

        try:
            return cls.from_dict(data, path=path)
        except ValidationError as exc:
            raise ValueError(f"Invalid home file: {path}\n{exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        document = HomeDocument(
            devices=list(self._devices.values()), scenes=list(self._scenes.values())
        )
        return document.model_dump(mode="json")

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w") as handle:
            yaml.safe_dump(
                self.to_dict(), handle, default_flow_style=False, sort_keys=False
            )

    def set_reachable(self, device_id: str, reachable: bool) -> None:
        self._device(device_id).reachable = reachable

    def set_power_state(self, device_id: str, on: bool) -> None:
        self._device(device_id).power_state = on

    def power_state(self, device_id: str) -> bool:
        return self._device(device_id).power_state

    def _device(self, device_id: str) -> PlatformDevice:
        try:
            return self._devices[device_id]
        except KeyError:
            raise DeviceNotFoundError(device_id) from None

    def _scene(self, scene_id: str) -> PlatformScene:
        try:
            return self._scenes[scene_id]
        except KeyError:
            raise SceneNotFoundError(scene_id) from None

    def _controllable(self, device_id: str) -> PlatformDevice:
        device = self._device(device_id)
        if not device.has_power_state:
            raise CharacteristicError(f"{device.name} has no power characteristic")
        if not device.reachable:
            raise CharacteristicError(f"{device.name} is not reachable")
        return device

    async def list_devices(self) -> list[PlatformDevice]:
        return [device.model_copy() for device in self._devices.values()]

    async def list_scenes(self) -> list[PlatformScene]:
        return [scene.model_copy(deep=True) for scene in self._scenes.values()]

    async def get_scene(self, scene_id: str) -> PlatformScene:
        return self._scene(scene_id).model_copy(deep=True)

    async def is_reachable(self, device_id: str) -> bool:
        return self._device(device_id).reachable

    async def read_characteristic(self, device_id: str) -> bool:
        device = self._controllable(device_id)
        if device_id in self.fail_reads:
            raise CharacteristicError(f"Read failed for {device.name}")
        return device.power_state

    async def write_characteristic(self, device_id: str, value: bool) -> None:
        device = self._controllable(device_id)
        self.writes.append((device_id, value))
        if device_id in self.fail_writes:
            raise CharacteristicError(f"Write failed for {device.name}")
        device.power_state = value
        self.save()

    async def execute_scene(self, scene_id: str) -> None:
        scene = self._scene(scene_id)
        failed: list[str] = []
        for action in scene.actions:
            try:
                await self.write_characteristic(action.device_id, action.target_value)
            except PlatformError as exc:
                logger.debug("Scene action '%s' failed: %s", action.id, exc)
                failed.append(action.device_name)
        if failed:
            raise PlatformError(
                f"Scene '{scene.name}' partially failed: {', '.join(failed)}"
            )

    async def remove_scene_action(self, scene_id: str, action_id: str) -> None:
        scene = self._scene(scene_id)
        if action_id in self.fail_removals:
            raise PlatformError(f"Failed to remove action {action_id}")
        remaining = [action for action in scene.actions if action.id != action_id]
        if len(remaining) == len(scene.actions):
            raise PlatformError(
                f"Action {action_id} not found in scene '{scene.name}'"
            )
        scene.actions = remaining
        self.save()
