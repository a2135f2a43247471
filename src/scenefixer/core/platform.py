"""Boundary to the home-automation platform.

The engine never talks to devices directly. Whatever binding sits behind
``HomePlatform`` owns the wire protocol, timeouts and bridge quirks; the engine
only relies on the calls below and on ``PlatformError`` for failures.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field


class PlatformError(Exception):
    """Base class for failures reported by the home platform."""


class DeviceNotFoundError(PlatformError):
    def __init__(self, device_id: str) -> None:
        super().__init__(f"Device not found: {device_id}")
        self.device_id = device_id


class SceneNotFoundError(PlatformError):
    def __init__(self, scene_id: str) -> None:
        super().__init__(f"Scene not found: {scene_id}")
        self.scene_id = scene_id


class CharacteristicError(PlatformError):
    """Reading or writing a device characteristic failed."""


class PlatformDevice(BaseModel):
    model_config = {"extra": "forbid"}

    id: str
    name: str
    room: str | None = None
    manufacturer: str | None = None
    category: str | None = None
    model: str | None = None
    firmware_version: str | None = None
    reachable: bool = True
    has_power_state: bool = True
    power_state: bool = False


class SceneAction(BaseModel):
    """One instruction inside a scene, targeting a single device."""

    model_config = {"extra": "forbid"}

    id: str
    device_id: str
    device_name: str
    target_value: bool = True


class PlatformScene(BaseModel):
    model_config = {"extra": "forbid"}

    id: str
    name: str
    actions: list[SceneAction] = Field(default_factory=list)

    def device_ids(self) -> list[str]:
        """Distinct target devices, in first-reference order."""
        seen: dict[str, None] = {}
        for action in self.actions:
            seen.setdefault(action.device_id, None)
        return list(seen)


@runtime_checkable
class HomePlatform(Protocol):
    async def list_devices(self) -> list[PlatformDevice]: ...

    async def list_scenes(self) -> list[PlatformScene]: ...

    async def get_scene(self, scene_id: str) -> PlatformScene: ...

    async def is_reachable(self, device_id: str) -> bool: ...

    async def read_characteristic(self, device_id: str) -> bool: ...

    async def write_characteristic(self, device_id: str, value: bool) -> None: ...

    async def execute_scene(self, scene_id: str) -> None: ...

    async def remove_scene_action(self, scene_id: str, action_id: str) -> None: ...
