"""Wiring of the health engine components."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from scenefixer.config import (
    Settings,
    backups_path_from_settings,
    home_file_from_settings,
)
from scenefixer.core import (
    DeviceProber,
    FileHomePlatform,
    HomeInventory,
    HomePlatform,
    RepairOrchestrator,
    SceneAuditor,
    retention_for,
)
from scenefixer.storage import BackupStore


@dataclass
class Engine:
    """One fully wired set of components sharing a platform and inventory.

    Build it once per process and pass it (or its parts) to whoever needs
    them; nothing here is a module-level singleton.
    """

    platform: HomePlatform
    inventory: HomeInventory
    prober: DeviceProber
    auditor: SceneAuditor
    repairs: RepairOrchestrator
    store: BackupStore

    async def start(self) -> bool:
        """Load persisted backups and the current device/scene catalog."""
        self.store.load()
        return await self.inventory.refresh()


def build_engine(
    settings: Settings,
    platform: HomePlatform | None = None,
    backups_path: Path | None = None,
) -> Engine:
    if platform is None:
        platform = FileHomePlatform.load(home_file_from_settings(settings))

    inventory = HomeInventory(platform)
    prober = DeviceProber(
        platform,
        inventory,
        settings.probing,
        retention=retention_for(settings.retention.max_test_history),
    )
    auditor = SceneAuditor(platform, inventory, settings.auditing)
    store = BackupStore(
        backups_path or backups_path_from_settings(settings),
        retention=retention_for(settings.retention.max_backups),
    )
    repairs = RepairOrchestrator(platform, inventory, auditor, store)

    return Engine(
        platform=platform,
        inventory=inventory,
        prober=prober,
        auditor=auditor,
        repairs=repairs,
        store=store,
    )
