from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from scenefixer.config import home_file_from_settings

from .common import load_settings_or_exit, resolve_config_path_or_exit, start_engine


def register(app: typer.Typer) -> None:
    @app.command()
    def info() -> None:
        """Show configuration, data locations and catalog stats."""
        settings = load_settings_or_exit()
        engine = asyncio.run(start_engine(settings))
        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)

        console = Console()

        console.print("[bold]SceneFixer Info[/bold]\n")
        console.print(f"Home file: {home_file_from_settings(settings)}")
        console.print(f"Backups: {engine.store.path}")
        console.print(f"Config file: {config_path if config_exists else 'defaults'}")

        console.print("\n[bold]Configuration[/bold]")
        console.print(f"Probe delay: {settings.probing.probe_delay}s")
        console.print(f"Toggle delay: {settings.probing.toggle_device_delay}s")
        console.print(f"Audit delay: {settings.auditing.audit_delay}s")
        console.print(f"Health window: {settings.probing.health_window} results")

        console.print("\n[bold]Statistics[/bold]")
        console.print(f"Devices: {len(engine.inventory.devices())}")
        console.print(f"Scenes: {len(engine.inventory.scenes())}")
        console.print(f"Backups stored: {len(engine.store.backups)}")
