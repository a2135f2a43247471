"""Tests for the device prober."""

from __future__ import annotations

import asyncio

from conftest import lamp_home

from scenefixer.core.prober import DANGEROUS_SKIP_MESSAGE
from scenefixer.models import DeviceCategory, DeviceHealthStatus

MIXED_HOME = {
    "devices": [
        {"id": "lamp", "name": "Lamp", "category": "light"},
        {"id": "lock", "name": "Front Door", "category": "lock"},
        {"id": "garage", "name": "Garage", "category": "garage door"},
        {
            "id": "motion",
            "name": "Motion",
            "category": "sensor",
            "has_power_state": False,
        },
    ],
    "scenes": [],
}


def test_probe_records_success(make_engine):
    """Test a successful probe is recorded."""
    engine = make_engine(lamp_home())
    device = engine.inventory.find_device("lamp-1")

    result = asyncio.run(engine.prober.probe(device))

    assert result.success
    assert result.response_time is not None
    stored = engine.inventory.get_device(device.id)
    assert stored.test_history == [result]
    assert stored.reliability_score == 100.0
    assert stored.health_status == DeviceHealthStatus.HEALTHY
    assert stored.last_seen == result.timestamp


def test_probe_of_unreachable_device_fails(make_engine):
    """Test probing an unreachable device."""
    engine = make_engine(lamp_home(unreachable=1))
    device = engine.inventory.find_device("lamp-1")

    result = asyncio.run(engine.prober.probe(device))

    assert not result.success
    assert "not reachable" in result.error_message
    stored = engine.inventory.get_device(device.id)
    assert stored.health_status == DeviceHealthStatus.UNREACHABLE
    assert stored.reliability_score == 0.0
    assert stored.last_seen is None


def test_probe_without_power_characteristic_checks_reachability_only(make_engine):
    """Test probing a device with no power characteristic."""
    engine = make_engine(MIXED_HOME)
    engine.platform.fail_reads.add("motion")

    result = asyncio.run(engine.prober.probe(engine.inventory.find_device("Motion")))

    assert result.success


def test_probe_read_failure_is_recorded(make_engine):
    """Test a failed characteristic read."""
    engine = make_engine(lamp_home())
    engine.platform.fail_reads.add("lamp-2")
    device = engine.inventory.find_device("lamp-2")

    result = asyncio.run(engine.prober.probe(device))

    assert not result.success
    assert result.error_message == "Read failed for Lamp 2"
    assert len(engine.inventory.get_device(device.id).test_history) == 1


def test_reliability_reflects_every_probe(make_engine):
    """Test reliability after mixed probe outcomes."""
    engine = make_engine(lamp_home())
    device = engine.inventory.find_device("lamp-1")

    for reachable in (True, False, True, True):
        engine.platform.set_reachable("lamp-1", reachable)
        asyncio.run(engine.prober.probe(device))

    stored = engine.inventory.get_device(device.id)
    assert stored.reliability_score == 75.0
    assert stored.health_status == DeviceHealthStatus.DEGRADED


def test_toggle_restores_original_state(make_engine):
    """Test toggle sequence and state restore."""
    engine = make_engine(lamp_home())
    engine.platform.set_power_state("lamp-1", True)
    device = engine.inventory.find_device("lamp-1")

    result = asyncio.run(engine.prober.toggle_probe(device))

    assert result.success
    assert engine.platform.writes == [
        ("lamp-1", True),
        ("lamp-1", False),
        ("lamp-1", True),
    ]
    assert engine.platform.power_state("lamp-1") is True


def test_toggle_result_is_not_added_to_history(make_engine):
    """Test toggle results stay out of history."""
    engine = make_engine(lamp_home())
    device = engine.inventory.find_device("lamp-1")

    asyncio.run(engine.prober.toggle_probe(device))

    assert engine.inventory.get_device(device.id).test_history == []


def test_toggle_write_failure_stops_sequence(make_engine):
    """Test toggle stops at the first failed write."""
    engine = make_engine(lamp_home())
    engine.platform.fail_writes.add("lamp-1")

    result = asyncio.run(
        engine.prober.toggle_probe(engine.inventory.find_device("lamp-1"))
    )

    assert not result.success
    assert result.error_message == "Write failed for Lamp 1"
    assert engine.platform.writes == [("lamp-1", True)]


def test_dangerous_devices_are_never_toggled(make_engine):
    """Test locks and garage doors are refused."""
    engine = make_engine(MIXED_HOME)

    for key in ("Front Door", "Garage"):
        result = asyncio.run(
            engine.prober.toggle_probe(engine.inventory.find_device(key))
        )
        assert not result.success
        assert result.error_message == DANGEROUS_SKIP_MESSAGE

    assert engine.platform.writes == []


def test_stored_category_guards_relabelled_copy(make_engine):
    """Test the stored category is checked too."""
    engine = make_engine(MIXED_HOME)
    disguised = engine.inventory.find_device("Front Door")
    disguised.category = DeviceCategory.LIGHT

    result = asyncio.run(engine.prober.toggle_probe(disguised))

    assert result.error_message == DANGEROUS_SKIP_MESSAGE
    assert engine.platform.writes == []


def test_toggle_all_safe_excludes_dangerous_devices(make_engine):
    """Test toggle sweep skips dangerous devices."""
    engine = make_engine(MIXED_HOME)

    results = asyncio.run(engine.prober.toggle_all_safe())

    # lamp succeeds, the motion sensor has nothing to toggle
    assert [r.success for r in results] == [True, False]
    assert {device_id for device_id, _ in engine.platform.writes} == {"lamp"}


def test_full_health_check_reports_progress(make_engine):
    """Test health check sweep progress."""
    engine = make_engine(lamp_home(count=2))
    updates = []

    results = asyncio.run(
        engine.prober.run_full_health_check(progress=updates.append)
    )

    assert len(results) == 2
    assert [u.fraction for u in updates] == [0.0, 0.5, 1.0]
    assert [u.current for u in updates] == ["Lamp 1", "Lamp 2", ""]
    assert updates[-1].done
    assert engine.prober.progress == 1.0
    assert engine.prober.is_running is False


def test_sweep_while_running_is_a_no_op(make_engine):
    """Test sweeps do nothing while one is running."""
    engine = make_engine(lamp_home())
    engine.prober.is_running = True

    assert asyncio.run(engine.prober.run_full_health_check()) == []
    assert asyncio.run(engine.prober.toggle_all_safe()) == []
    assert all(not d.test_history for d in engine.inventory.devices())
    assert engine.platform.writes == []
