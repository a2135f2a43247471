"""Reliability scoring and health classification.

Everything here is deterministic. ``apply_test_result`` is the only function
that touches a record, and only the record it is given.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

from scenefixer.models import (
    Device,
    DeviceHealthStatus,
    SceneHealthStatus,
    TestResult,
)
from scenefixer.models.scene import percentage

HEALTH_WINDOW = 10

T = TypeVar("T")


class RetentionPolicy(Protocol):
    def apply(self, items: list[T]) -> list[T]: ...


@dataclass(frozen=True)
class KeepAll:
    """Never drop anything."""

    def apply(self, items: list[T]) -> list[T]:
        return items


@dataclass(frozen=True)
class KeepLatest:
    """Keep only the newest ``limit`` items."""

    limit: int

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError(f"Retention limit must be positive, got {self.limit}")

    def apply(self, items: list[T]) -> list[T]:
        if len(items) <= self.limit:
            return items
        return items[-self.limit :]


def retention_for(limit: int | None) -> RetentionPolicy:
    return KeepAll() if limit is None else KeepLatest(limit)


def reliability_score(history: Sequence[TestResult]) -> float:
    if not history:
        return 100.0
    successes = sum(1 for result in history if result.success)
    return successes / len(history) * 100


def average_response_time(history: Sequence[TestResult]) -> float | None:
    times = [r.response_time for r in history if r.response_time is not None]
    if not times:
        return None
    return sum(times) / len(times)


def windowed_status(
    history: Sequence[TestResult], window: int = HEALTH_WINDOW
) -> DeviceHealthStatus:
    recent = history[-window:]
    if not recent:
        return DeviceHealthStatus.UNKNOWN

    successes = sum(1 for result in recent if result.success)
    if successes == len(recent):
        return DeviceHealthStatus.HEALTHY
    if successes >= len(recent) // 2:
        return DeviceHealthStatus.DEGRADED
    return DeviceHealthStatus.UNREACHABLE


def device_status(
    history: Sequence[TestResult], is_reachable: bool, window: int = HEALTH_WINDOW
) -> DeviceHealthStatus:
    if not history:
        return DeviceHealthStatus.UNKNOWN
    if not is_reachable:
        return DeviceHealthStatus.UNREACHABLE
    return windowed_status(history, window)


def apply_test_result(
    device: Device,
    result: TestResult,
    retention: RetentionPolicy | None = None,
    window: int = HEALTH_WINDOW,
) -> None:
    """Append ``result`` to the device history and recompute derived fields."""
    history = [*device.test_history, result]
    if retention is not None:
        history = retention.apply(history)

    device.test_history = history
    device.is_reachable = result.success
    if result.success:
        device.last_seen = result.timestamp

    device.reliability_score = reliability_score(history)
    device.average_response_time = average_response_time(history)
    device.health_status = device_status(history, device.is_reachable, window)


def classify_scene(total: int, unreachable: int) -> SceneHealthStatus:
    if unreachable == 0:
        return SceneHealthStatus.HEALTHY
    if unreachable >= total // 2:
        return SceneHealthStatus.BROKEN
    return SceneHealthStatus.DEGRADED


def health_percentage(reachable: int, total: int) -> float:
    return percentage(reachable, total)
