"""Tests for health scoring."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from scenefixer.core.health import (
    KeepLatest,
    apply_test_result,
    average_response_time,
    classify_scene,
    device_status,
    health_percentage,
    reliability_score,
    windowed_status,
)
from scenefixer.models import (
    Device,
    DeviceHealthStatus,
    Scene,
    SceneHealthStatus,
    TestResult,
)


def _results(*outcomes: bool) -> list[TestResult]:
    return [TestResult(success=outcome) for outcome in outcomes]


def test_reliability_defaults_to_100_for_empty_history():
    """Test reliability of a device never probed."""
    assert reliability_score([]) == 100.0


def test_reliability_uses_entire_history():
    """Test reliability counts every result, not just the window."""
    history = _results(False, *([True] * 11))
    assert reliability_score(history) == pytest.approx(100 * 11 / 12)


@pytest.mark.parametrize(
    ("outcomes", "expected"),
    [
        ([True] * 10, DeviceHealthStatus.HEALTHY),
        ([True] * 5 + [False] * 5, DeviceHealthStatus.DEGRADED),
        ([True] * 4 + [False] * 6, DeviceHealthStatus.UNREACHABLE),
        ([False, True, True], DeviceHealthStatus.DEGRADED),
        ([False, False, True], DeviceHealthStatus.DEGRADED),
        ([False, False, False, True], DeviceHealthStatus.UNREACHABLE),
        ([], DeviceHealthStatus.UNKNOWN),
    ],
)
def test_windowed_status(outcomes, expected):
    """Test status over the recent window."""
    assert windowed_status(_results(*outcomes)) == expected


def test_eleventh_result_pushes_the_first_out_of_the_window():
    """Test that only the last ten results decide status."""
    history = _results(False, *([True] * 9))
    assert windowed_status(history) == DeviceHealthStatus.DEGRADED

    history.append(TestResult(success=True))
    assert windowed_status(history) == DeviceHealthStatus.HEALTHY


def test_current_unreachability_overrides_window():
    """Test that a failed latest probe marks the device unreachable."""
    history = _results(*([True] * 10))
    assert device_status(history, is_reachable=False) == DeviceHealthStatus.UNREACHABLE
    assert device_status([], is_reachable=False) == DeviceHealthStatus.UNKNOWN


def test_average_response_time_skips_missing_values():
    """Test average response time."""
    history = [
        TestResult(success=True, response_time=10.0),
        TestResult(success=False),
        TestResult(success=True, response_time=30.0),
    ]
    assert average_response_time(history) == pytest.approx(20.0)
    assert average_response_time(_results(True)) is None


def test_apply_test_result_updates_derived_fields():
    """Test fields recomputed after each result."""
    device = Device(accessory_id="lamp", name="Lamp")
    seen_at = datetime(2026, 1, 1, tzinfo=timezone.utc)

    apply_test_result(device, TestResult(success=True, timestamp=seen_at))
    assert device.last_seen == seen_at
    assert device.health_status == DeviceHealthStatus.HEALTHY

    apply_test_result(device, TestResult(success=False, error_message="boom"))
    assert device.last_seen == seen_at
    assert device.is_reachable is False
    assert device.reliability_score == pytest.approx(50.0)
    assert device.health_status == DeviceHealthStatus.UNREACHABLE
    assert len(device.test_history) == 2


def test_bounded_retention_scores_only_kept_results():
    """Test scoring with a bounded history."""
    device = Device(accessory_id="lamp", name="Lamp")
    policy = KeepLatest(3)
    for outcome in (False, False, True, True, True):
        apply_test_result(device, TestResult(success=outcome), retention=policy)

    assert len(device.test_history) == 3
    assert device.reliability_score == 100.0


def test_keep_latest_rejects_non_positive_limit():
    """Test KeepLatest validation."""
    with pytest.raises(ValueError):
        KeepLatest(0)


@pytest.mark.parametrize(
    ("total", "unreachable", "expected"),
    [
        (0, 0, SceneHealthStatus.HEALTHY),
        (4, 0, SceneHealthStatus.HEALTHY),
        (4, 1, SceneHealthStatus.DEGRADED),
        (4, 2, SceneHealthStatus.BROKEN),
        (4, 3, SceneHealthStatus.BROKEN),
        (3, 1, SceneHealthStatus.BROKEN),
        (5, 1, SceneHealthStatus.DEGRADED),
        (5, 2, SceneHealthStatus.BROKEN),
    ],
)
def test_classify_scene(total, unreachable, expected):
    """Test scene classification thresholds."""
    assert classify_scene(total, unreachable) == expected


def test_scene_percentage_for_empty_scene_is_100():
    """Test health percentage of an empty scene."""
    scene = Scene(name="Empty", action_set_id="empty")
    assert scene.health_percentage == 100.0
    assert health_percentage(0, 0) == 100.0
    assert health_percentage(3, 4) == 75.0
