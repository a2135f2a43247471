"""Tests for the backup store."""

from __future__ import annotations

from scenefixer.core import KeepLatest
from scenefixer.models import SceneBackup
from scenefixer.storage import BackupStore


def _backup(scene_id="s1", name="Evening") -> SceneBackup:
    return SceneBackup(scene_id=scene_id, scene_name=name, device_names=["Lamp"])


def test_missing_file_loads_empty(tmp_path):
    """Test loading without a backups file."""
    store = BackupStore(tmp_path / "missing.json")
    assert store.load() == []


def test_corrupt_file_loads_empty(tmp_path):
    """Test loading a corrupt backups file."""
    path = tmp_path / "backups.json"
    path.write_text("{not json")
    assert BackupStore(path).load() == []

    path.write_text('[{"scene_id": 3}]')
    assert BackupStore(path).load() == []


def test_appended_backups_survive_reload(tmp_path):
    """Test backups persist across stores."""
    path = tmp_path / "nested" / "backups.json"
    store = BackupStore(path)
    first, second = _backup(), _backup()
    store.append(first)
    store.append(second)

    reloaded = BackupStore(path)
    reloaded.load()
    assert reloaded.backups == [first, second]
    assert [b.id for b in reloaded.for_scene("s1")] == [first.id, second.id]
    assert reloaded.get(second.id) == second
    assert reloaded.get("nope") is None


def test_bounded_retention_drops_oldest(tmp_path):
    """Test bounded backup retention."""
    store = BackupStore(tmp_path / "backups.json", retention=KeepLatest(2))
    backups = [_backup(scene_id=f"s{i}") for i in range(3)]
    for backup in backups:
        store.append(backup)

    assert store.backups == backups[1:]


def test_write_failure_keeps_memory_copy(tmp_path):
    """Test an unwritable backups file."""
    path = tmp_path / "backups.json"
    path.mkdir()
    store = BackupStore(path)

    assert store.append(_backup()) is False

    assert len(store.backups) == 1
    assert store.save() is False
