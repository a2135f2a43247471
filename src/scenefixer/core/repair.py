from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from scenefixer.models import RepairAction, RepairActionType, Scene, SceneBackup

from .auditor import SceneAuditor
from .inventory import HomeInventory
from .platform import HomePlatform, PlatformError
from .progress import ProgressCallback, report

if TYPE_CHECKING:
    from scenefixer.storage import BackupStore

logger = logging.getLogger(__name__)

MANUAL_RESTORE_MESSAGE = "Full restore requires manual recreation of scene actions"
BACKUP_NOT_SAVED_MESSAGE = "Backup could not be saved; scene left unchanged"


class RepairOrchestrator:
    """Backs up a scene, then strips actions that target unreachable devices.

    A scene is never mutated before its backup has been written; if the
    backup file cannot be written the repair stops there. Removal is
    best effort: individual failures are logged and the remaining actions are
    still attempted, and the repair as a whole is recorded as successful.
    """

    def __init__(
        self,
        platform: HomePlatform,
        inventory: HomeInventory,
        auditor: SceneAuditor,
        store: BackupStore,
    ) -> None:
        self._platform = platform
        self._inventory = inventory
        self._auditor = auditor
        self._store = store
        self._history: list[RepairAction] = []

    @property
    def backups(self) -> list[SceneBackup]:
        return self._store.backups

    @property
    def repair_history(self) -> list[RepairAction]:
        return list(self._history)

    def backups_for(self, scene_id: str) -> list[SceneBackup]:
        return self._store.for_scene(scene_id)

    def _log(self, scene_id: str, scene_name: str, **fields: Any) -> RepairAction:
        action = RepairAction(scene_id=scene_id, scene_name=scene_name, **fields)
        self._history.append(action)
        return action

    def backup_scene(self, scene: Scene) -> bool:
        """Capture the scene's device names; False if the backup was not written."""
        backup = SceneBackup(
            scene_id=scene.id,
            scene_name=scene.name,
            device_names=scene.reachable_device_names + scene.unreachable_device_names,
        )
        if not self._store.append(backup):
            logger.error("Backup for scene '%s' was not persisted", scene.name)
            return False
        logger.info("Created backup for scene '%s'", scene.name)
        return True

    async def repair(self, scene: Scene, remove_unreachable: bool = True) -> bool:
        if not scene.unreachable_device_names:
            logger.info("Scene '%s' has no unreachable devices", scene.name)
            return True

        if not self.backup_scene(scene):
            self._log(
                scene.id,
                scene.name,
                action_type=RepairActionType.REMOVE_DEVICE,
                success=False,
                message=BACKUP_NOT_SAVED_MESSAGE,
            )
            return False

        try:
            actions = await self._auditor.unreachable_actions(scene)
        except PlatformError as exc:
            logger.error(
                "Failed to get action set for scene '%s': %s", scene.name, exc
            )
            self._log(
                scene.id,
                scene.name,
                action_type=RepairActionType.REMOVE_DEVICE,
                success=False,
                message=str(exc),
            )
            return False

        if not remove_unreachable:
            return False

        for action in actions:
            try:
                await self._platform.remove_scene_action(scene.action_set_id, action.id)
            except PlatformError as exc:
                logger.warning(
                    "Failed to remove action for '%s' from scene '%s': %s",
                    action.device_name,
                    scene.name,
                    exc,
                )

        self._log(
            scene.id,
            scene.name,
            action_type=RepairActionType.REMOVE_DEVICE,
            removed_count=len(actions),
            success=True,
            message=f"Removed {len(actions)} actions for unreachable devices",
        )

        await self._inventory.refresh()
        refreshed = self._inventory.get_scene(scene.id) or scene
        await self._auditor.audit_scene(refreshed)

        logger.info(
            "Repaired scene '%s' - removed %d actions", scene.name, len(actions)
        )
        return True

    async def repair_all_broken(
        self, progress: ProgressCallback | None = None
    ) -> dict[str, bool]:
        broken = self._auditor.scenes_needing_repair()
        logger.info("Repairing %d broken scenes", len(broken))

        outcomes: dict[str, bool] = {}
        for index, scene in enumerate(broken):
            report(progress, index, len(broken), scene.name)
            outcomes[scene.id] = await self.repair(scene)
        report(progress, len(broken), len(broken), "")
        return outcomes

    async def restore(self, backup: SceneBackup) -> bool:
        """Restoring scene actions is not supported; the attempt is recorded."""
        self._log(
            backup.scene_id,
            backup.scene_name,
            action_type=RepairActionType.FULL_RESTORE,
            success=False,
            message=MANUAL_RESTORE_MESSAGE,
        )
        logger.warning(
            "Restore requested for scene '%s' - manual intervention required",
            backup.scene_name,
        )
        return False
