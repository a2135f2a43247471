from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from scenefixer.core.health import KeepAll, RetentionPolicy
from scenefixer.models import SceneBackup

logger = logging.getLogger(__name__)

_backup_list = TypeAdapter(list[SceneBackup])


class BackupStore:
    """Append-only collection of scene backups kept in a single JSON file.

    The whole collection is rewritten after every append. A missing or
    unreadable file loads as an empty collection; write failures are logged
    and leave the in-memory collection intact.
    """

    def __init__(self, path: Path, retention: RetentionPolicy | None = None) -> None:
        self._path = path
        self._retention = retention or KeepAll()
        self._backups: list[SceneBackup] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def backups(self) -> list[SceneBackup]:
        return list(self._backups)

    def load(self) -> list[SceneBackup]:
        self._backups = self._read()
        logger.info("Loaded %d scene backups", len(self._backups))
        return list(self._backups)

    def _read(self) -> list[SceneBackup]:
        if not self._path.exists():
            return []

        try:
            with self._path.open("r") as handle:
                data = json.load(handle)
            return _backup_list.validate_python(data)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable backup file %s: %s", self._path, exc)
            return []

    def append(self, backup: SceneBackup) -> bool:
        """Add ``backup`` and rewrite the file; False if the write failed."""
        self._backups = self._retention.apply([*self._backups, backup])
        return self.save()

    def save(self) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            payload = _backup_list.dump_python(self._backups, mode="json")
            with self._path.open("w") as handle:
                json.dump(payload, handle, indent=2)
        except OSError as exc:
            logger.error("Failed to save backups to %s: %s", self._path, exc)
            return False
        return True

    def for_scene(self, scene_id: str) -> list[SceneBackup]:
        return [backup for backup in self._backups if backup.scene_id == scene_id]

    def get(self, backup_id: str) -> SceneBackup | None:
        for backup in self._backups:
            if backup.id == backup_id:
                return backup
        return None
