"""Tests for the scene auditor."""

from __future__ import annotations

import asyncio

import pytest
from conftest import lamp_home

from scenefixer.core.auditor import (
    REBUILD_RECOMMENDATION,
    SCENE_NOT_FOUND,
    build_recommendations,
)
from scenefixer.models import Scene, SceneHealthStatus


def _audit(engine, key="Evening"):
    return asyncio.run(engine.auditor.audit_scene(engine.inventory.find_scene(key)))


def test_one_of_four_unreachable_is_degraded(make_engine):
    """Test audit of a scene with one of four devices down."""
    engine = make_engine(lamp_home(unreachable=1))

    result = _audit(engine)

    assert result.found
    assert result.status == SceneHealthStatus.DEGRADED
    assert result.health_percentage == 75.0
    assert result.unreachable_devices == ["Lamp 1"]
    assert result.reachable_devices == ["Lamp 2", "Lamp 3", "Lamp 4"]
    assert result.recommendations == [
        "Remove 1 unreachable device(s)",
        "  - Lamp 1 is not responding",
    ]

    stored = engine.inventory.find_scene("Evening")
    assert stored.health_status == SceneHealthStatus.DEGRADED
    assert stored.unreachable_devices == 1
    assert stored.last_audit == result.audit_date


def test_one_of_three_unreachable_is_broken(make_engine):
    """With an odd device count, half rounds down."""
    engine = make_engine(lamp_home(unreachable=1, count=3))

    result = _audit(engine)

    assert result.status == SceneHealthStatus.BROKEN
    assert engine.inventory.find_scene("Evening").health_status == (
        SceneHealthStatus.BROKEN
    )


def test_three_of_four_unreachable_is_broken(make_engine):
    """Test audit of a scene with three of four devices down."""
    engine = make_engine(lamp_home(unreachable=3))

    result = _audit(engine)

    assert result.status == SceneHealthStatus.BROKEN
    assert result.health_percentage == 25.0
    assert result.recommendations[0] == "Remove 3 unreachable device(s)"
    assert result.recommendations[-1] == REBUILD_RECOMMENDATION


def test_empty_scene_is_healthy(make_engine):
    """Test that a scene without actions is fully healthy."""
    engine = make_engine({"devices": [], "scenes": [{"id": "s", "name": "Empty"}]})

    result = _audit(engine, "Empty")

    assert result.status == SceneHealthStatus.HEALTHY
    assert result.health_percentage == 100.0
    assert result.recommendations == []


def test_repeated_device_counts_once(make_engine):
    """Test that a device targeted twice is counted once."""
    data = lamp_home(unreachable=1, count=2)
    data["scenes"][0]["actions"].append({"device_id": "lamp-1"})
    engine = make_engine(data)

    result = _audit(engine)

    assert result.scene.total_devices == 2
    assert result.unreachable_devices == ["Lamp 1"]


def test_unknown_device_counts_as_unreachable(make_engine):
    """Test that a device missing from the platform is unreachable."""
    data = lamp_home(count=3)
    data["scenes"][0]["actions"].append(
        {"device_id": "gone", "device_name": "Old Plug"}
    )
    engine = make_engine(data)

    result = _audit(engine)

    assert result.unreachable_devices == ["Old Plug"]
    assert result.status == SceneHealthStatus.DEGRADED


def test_audit_ignores_cached_device_health(make_engine):
    """Test that audits read reachability live from the platform."""
    engine = make_engine(lamp_home())
    assert _audit(engine).status == SceneHealthStatus.HEALTHY

    engine.platform.set_reachable("lamp-2", False)

    assert _audit(engine).unreachable_devices == ["Lamp 2"]


def test_missing_scene_is_not_mutated(make_engine):
    """Test auditing a scene the platform no longer has."""
    engine = make_engine(lamp_home())
    ghost = Scene(name="Ghost", action_set_id="ghost")

    result = asyncio.run(engine.auditor.audit_scene(ghost))

    assert not result.found
    assert result.recommendations == [SCENE_NOT_FOUND]
    assert ghost.health_status == SceneHealthStatus.UNKNOWN
    assert ghost.last_audit is None


def test_audit_all_reports_progress_and_flags_scenes(make_engine):
    """Test audit sweep progress and repair candidates."""
    data = lamp_home(unreachable=1)
    data["scenes"].append({"id": "morning", "name": "Morning", "actions": []})
    engine = make_engine(data)
    updates = []

    results = asyncio.run(engine.auditor.audit_all(progress=updates.append))

    assert [r.scene.name for r in results] == ["Evening", "Morning"]
    assert [u.fraction for u in updates] == [0.0, 0.5, 1.0]
    assert [s.name for s in engine.auditor.scenes_needing_repair()] == ["Evening"]


def test_run_scene(make_engine):
    """Test executing a scene."""
    engine = make_engine(lamp_home(count=2))

    result = asyncio.run(
        engine.auditor.run_scene(engine.inventory.find_scene("Evening"))
    )

    assert result.success
    assert engine.platform.power_state("lamp-1") is True


def test_run_scene_partial_failure(make_engine):
    """Test executing a scene with an unreachable member."""
    engine = make_engine(lamp_home(unreachable=1, count=2))

    result = asyncio.run(
        engine.auditor.run_scene(engine.inventory.find_scene("Evening"))
    )

    assert not result.success
    assert "Lamp 1" in result.error_message


@pytest.mark.parametrize(
    ("percent", "rebuild"), [(50.0, False), (49.9, True), (100.0, False)]
)
def test_rebuild_threshold(percent, rebuild):
    """Test when the rebuild recommendation is added."""
    lines = build_recommendations([], percent)
    assert (REBUILD_RECOMMENDATION in lines) is rebuild


def test_audit_all_while_running_is_a_no_op(make_engine):
    """A second audit sweep does nothing while one is in progress."""
    data = lamp_home(unreachable=1)
    data["scenes"].append({"id": "morning", "name": "Morning", "actions": []})
    engine = make_engine(data)
    engine.auditor.is_running = True

    assert asyncio.run(engine.auditor.audit_all()) == []
    assert engine.auditor.results == []
    assert all(scene.last_audit is None for scene in engine.inventory.scenes())
    assert all(
        scene.health_status == SceneHealthStatus.UNKNOWN
        for scene in engine.inventory.scenes()
    )
