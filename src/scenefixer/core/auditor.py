from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable

from scenefixer.config import AuditingConfig
from scenefixer.models import AuditResult, Scene, SceneHealthStatus, TestResult
from scenefixer.models.device import utcnow

from .health import classify_scene, health_percentage
from .inventory import HomeInventory
from .platform import (
    DeviceNotFoundError,
    HomePlatform,
    PlatformError,
    PlatformScene,
    SceneAction,
    SceneNotFoundError,
)
from .progress import ProgressCallback, report

logger = logging.getLogger(__name__)

SCENE_NOT_FOUND = "Scene not found"
REBUILD_RECOMMENDATION = (
    "Consider rebuilding this scene - more than half of devices are unavailable"
)


def build_recommendations(
    unreachable: list[str], percent: float, rebuild_threshold: float = 50.0
) -> list[str]:
    recommendations: list[str] = []
    if unreachable:
        recommendations.append(f"Remove {len(unreachable)} unreachable device(s)")
        recommendations.extend(f"  - {name} is not responding" for name in unreachable)
    if percent < rebuild_threshold:
        recommendations.append(REBUILD_RECOMMENDATION)
    return recommendations


class SceneAuditor:
    """Recomputes scene health from live device reachability.

    Each audit reads reachability fresh from the platform; cached device
    health is never consulted. The scene's previous status plays no part in
    the new one.
    """

    def __init__(
        self,
        platform: HomePlatform,
        inventory: HomeInventory,
        config: AuditingConfig | None = None,
    ) -> None:
        self._platform = platform
        self._inventory = inventory
        self._config = config or AuditingConfig()

        self.is_running = False
        self.progress = 0.0
        self.results: list[AuditResult] = []

    async def _reachability(self, platform_scene: PlatformScene) -> dict[str, bool]:
        """Map each distinct target device id to its current reachability."""
        reachability: dict[str, bool] = {}
        for device_id in platform_scene.device_ids():
            try:
                reachability[device_id] = await self._platform.is_reachable(device_id)
            except DeviceNotFoundError:
                reachability[device_id] = False
        return reachability

    async def unreachable_actions(self, scene: Scene) -> list[SceneAction]:
        """Live actions of ``scene`` whose target device is unreachable.

        Raises ``SceneNotFoundError`` if the scene no longer exists.
        """
        platform_scene = await self._platform.get_scene(scene.action_set_id)
        reachability = await self._reachability(platform_scene)
        return [
            action
            for action in platform_scene.actions
            if not reachability.get(action.device_id, False)
        ]

    async def audit_scene(self, scene: Scene) -> AuditResult:
        try:
            platform_scene = await self._platform.get_scene(scene.action_set_id)
            reachability = await self._reachability(platform_scene)
        except SceneNotFoundError:
            logger.warning("Scene '%s' not found on the platform", scene.name)
            return AuditResult(
                scene=scene, found=False, recommendations=[SCENE_NOT_FOUND]
            )
        except PlatformError as exc:
            logger.warning("Audit of scene '%s' failed: %s", scene.name, exc)
            return AuditResult(scene=scene, found=False, recommendations=[str(exc)])

        names: dict[str, str] = {}
        for action in platform_scene.actions:
            names.setdefault(action.device_id, action.device_name)

        reachable = [names[d] for d, ok in reachability.items() if ok]
        unreachable = [names[d] for d, ok in reachability.items() if not ok]
        total = len(reachability)

        status = classify_scene(total, len(unreachable))
        percent = health_percentage(len(reachable), total)
        audited_at = utcnow()

        def _apply(target: Scene) -> None:
            target.total_devices = total
            target.reachable_devices = len(reachable)
            target.unreachable_devices = len(unreachable)
            target.reachable_device_names = list(reachable)
            target.unreachable_device_names = list(unreachable)
            target.health_status = status
            target.last_audit = audited_at

        updated = self._inventory.update_scene(scene.id, _apply)
        if updated is None:
            _apply(scene)
            updated = scene

        return AuditResult(
            scene=updated,
            audit_date=audited_at,
            status=status,
            reachable_devices=reachable,
            unreachable_devices=unreachable,
            recommendations=build_recommendations(
                unreachable, percent, self._config.rebuild_threshold
            ),
        )

    async def audit_all(
        self,
        scenes: Iterable[Scene] | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[AuditResult]:
        if self.is_running:
            logger.info("Audit requested while another audit is running; ignoring")
            return []

        targets = list(scenes) if scenes is not None else self._inventory.scenes()
        total = len(targets)
        logger.info("Starting audit of %d scenes", total)

        self.is_running = True
        self.results = []
        try:
            for index, scene in enumerate(targets):
                self.progress = report(progress, index, total, scene.name).fraction
                self.results.append(await self.audit_scene(scene))
                await asyncio.sleep(self._config.audit_delay)
        finally:
            self.is_running = False

        self.progress = report(progress, total, total, "").fraction

        with_issues = sum(1 for r in self.results if r.health_percentage < 100)
        logger.info("Audit complete. %d scenes have issues", with_issues)
        return list(self.results)

    async def run_scene(self, scene: Scene) -> TestResult:
        """Execute a scene once and time it."""
        start = time.perf_counter()
        try:
            await self._platform.execute_scene(scene.action_set_id)
        except PlatformError as exc:
            logger.warning("Failed to execute scene '%s': %s", scene.name, exc)
            return TestResult(
                success=False,
                response_time=(time.perf_counter() - start) * 1000,
                error_message=str(exc),
            )
        elapsed = (time.perf_counter() - start) * 1000
        return TestResult(success=True, response_time=elapsed)

    def scenes_needing_repair(self) -> list[Scene]:
        flagged = (SceneHealthStatus.BROKEN, SceneHealthStatus.DEGRADED)
        return [
            scene
            for scene in self._inventory.scenes()
            if scene.health_status in flagged
        ]
