from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from scenefixer.config import AuditingConfig, ProbingConfig, Settings, get_settings
from scenefixer.core import FileHomePlatform
from scenefixer.services import Engine, build_engine

FAST_SETTINGS = Settings(
    probing=ProbingConfig(probe_delay=0, toggle_step_delay=0, toggle_device_delay=0),
    auditing=AuditingConfig(audit_delay=0),
)


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("SCENEFIXER_CONFIG", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def lamp_home(unreachable: int = 0, count: int = 4) -> dict[str, Any]:
    """A home with ``count`` lamps in one scene; the first ``unreachable`` are down."""
    devices = [
        {
            "id": f"lamp-{i}",
            "name": f"Lamp {i}",
            "room": "Living Room",
            "manufacturer": "Signify Netherlands B.V.",
            "category": "light",
            "reachable": i > unreachable,
        }
        for i in range(1, count + 1)
    ]
    return {
        "devices": devices,
        "scenes": [
            {
                "id": "evening",
                "name": "Evening",
                "actions": [{"device_id": d["id"]} for d in devices],
            }
        ],
    }


@pytest.fixture
def make_engine(tmp_path) -> Callable[..., Engine]:
    def _make(data: dict[str, Any], settings: Settings = FAST_SETTINGS) -> Engine:
        platform = FileHomePlatform.from_dict(data)
        engine = build_engine(
            settings, platform=platform, backups_path=tmp_path / "backups.json"
        )
        asyncio.run(engine.start())
        return engine

    return _make
