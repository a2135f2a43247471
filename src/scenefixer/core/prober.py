from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable

from scenefixer.config import ProbingConfig
from scenefixer.models import Device, DeviceHealthStatus, TestResult

from .health import RetentionPolicy, apply_test_result
from .inventory import HomeInventory
from .platform import HomePlatform, PlatformError
from .progress import ProgressCallback, report

logger = logging.getLogger(__name__)

DANGEROUS_SKIP_MESSAGE = "Skipped: dangerous device category"
NOT_REACHABLE_MESSAGE = "Device not reachable"


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _mark_testing(device: Device) -> None:
    device.health_status = DeviceHealthStatus.TESTING


class DeviceProber:
    """Connectivity and toggle tests against individual devices.

    Sweeps run one device at a time with a pause in between, since most
    bridges serialize commands. Only one sweep runs at a time; starting a
    second while ``is_running`` is set returns an empty list.
    """

    def __init__(
        self,
        platform: HomePlatform,
        inventory: HomeInventory,
        config: ProbingConfig | None = None,
        retention: RetentionPolicy | None = None,
    ) -> None:
        self._platform = platform
        self._inventory = inventory
        self._config = config or ProbingConfig()
        self._retention = retention

        self.is_running = False
        self.progress = 0.0
        self.current_device = ""
        self.results: list[TestResult] = []

    async def probe(self, device: Device) -> TestResult:
        """Read the device's primary characteristic and record the outcome."""
        self._inventory.update_device(device.id, _mark_testing)
        start = time.perf_counter()

        try:
            if device.has_power_state:
                await self._platform.read_characteristic(device.accessory_id)
            reachable = await self._platform.is_reachable(device.accessory_id)
        except PlatformError as exc:
            logger.debug("Probe of '%s' failed: %s", device.name, exc)
            result = TestResult(
                success=False, response_time=_elapsed_ms(start), error_message=str(exc)
            )
        else:
            result = TestResult(
                success=reachable,
                response_time=_elapsed_ms(start),
                error_message=None if reachable else NOT_REACHABLE_MESSAGE,
            )

        self._record(device, result)
        return result

    def _record(self, device: Device, result: TestResult) -> None:
        def _apply(target: Device) -> None:
            apply_test_result(
                target, result, self._retention, self._config.health_window
            )

        if self._inventory.update_device(device.id, _apply) is None:
            _apply(device)

    def _is_dangerous(self, device: Device) -> bool:
        stored = self._inventory.get_device(device.id)
        return device.category.is_dangerous or (
            stored is not None and stored.category.is_dangerous
        )

    async def toggle_probe(self, device: Device) -> TestResult:
        """Switch a device on, off and back to where it was.

        Locks and garage doors are refused before any platform call is made.
        """
        if self._is_dangerous(device):
            logger.warning("Skipping dangerous device: %s", device.name)
            return TestResult(success=False, error_message=DANGEROUS_SKIP_MESSAGE)

        start = time.perf_counter()
        accessory_id = device.accessory_id
        try:
            original = await self._platform.read_characteristic(accessory_id)

            await self._platform.write_characteristic(accessory_id, True)
            await asyncio.sleep(self._config.toggle_step_delay)

            await self._platform.write_characteristic(accessory_id, False)
            await asyncio.sleep(self._config.toggle_step_delay)

            await self._platform.write_characteristic(accessory_id, original)
        except PlatformError as exc:
            logger.warning("Toggle test of '%s' failed: %s", device.name, exc)
            return TestResult(
                success=False, response_time=_elapsed_ms(start), error_message=str(exc)
            )

        return TestResult(success=True, response_time=_elapsed_ms(start))

    async def run_full_health_check(
        self,
        devices: Iterable[Device] | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[TestResult]:
        if self.is_running:
            logger.info("Health check requested while a sweep is running; ignoring")
            return []

        targets = list(devices) if devices is not None else self._inventory.devices()
        logger.info("Starting full health check on %d devices", len(targets))

        results = await self._sweep(
            targets, self.probe, self._config.probe_delay, progress
        )

        passed = sum(1 for result in results if result.success)
        logger.info("Health check complete. %d/%d devices passed", passed, len(results))
        return results

    async def toggle_all_safe(
        self,
        devices: Iterable[Device] | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[TestResult]:
        if self.is_running:
            logger.info("Toggle test requested while a sweep is running; ignoring")
            return []

        candidates = devices if devices is not None else self._inventory.devices()
        targets = [device for device in candidates if not self._is_dangerous(device)]
        logger.info(
            "Starting toggle test on %d safe devices (excluding locks/garage doors)",
            len(targets),
        )

        return await self._sweep(
            targets, self.toggle_probe, self._config.toggle_device_delay, progress
        )

    async def _sweep(
        self,
        devices: list[Device],
        test: Callable[[Device], Awaitable[TestResult]],
        delay: float,
        callback: ProgressCallback | None,
    ) -> list[TestResult]:
        self.is_running = True
        self.results = []
        total = len(devices)

        try:
            for index, device in enumerate(devices):
                self.current_device = device.name
                self.progress = report(callback, index, total, device.name).fraction

                self.results.append(await test(device))
                await asyncio.sleep(delay)
        finally:
            self.current_device = ""
            self.is_running = False

        self.progress = report(callback, total, total, "").fraction
        return list(self.results)
