from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from scenefixer.config import Settings
from scenefixer.models import TestResult

from .common import load_settings_or_exit, start_engine
from .devices import device_table
from .progress import sweep_progress


def _results_table(names: list[str], results: list[TestResult]) -> Table:
    table = Table()
    table.add_column("Device", style="cyan")
    table.add_column("Result")
    table.add_column("Time (ms)", justify="right")
    table.add_column("Error")

    for name, result in zip(names, results, strict=False):
        elapsed = result.response_time
        table.add_row(
            name,
            "[green]pass[/green]" if result.success else "[red]fail[/red]",
            "" if elapsed is None else f"{elapsed:.1f}",
            result.error_message or "",
        )
    return table


async def _health_check(settings: Settings, console: Console) -> None:
    engine = await start_engine(settings)
    with sweep_progress(console, "Health check") as progress:
        results = await engine.prober.run_full_health_check(progress=progress)

    passed = sum(1 for result in results if result.success)
    console.print(device_table(engine.inventory.devices()))
    console.print(f"\n[green]{passed}/{len(results)} device(s) passed[/green]")


async def _toggle_test(settings: Settings, console: Console) -> None:
    engine = await start_engine(settings)
    safe = [d for d in engine.inventory.devices() if not d.category.is_dangerous]
    with sweep_progress(console, "Toggle test") as progress:
        results = await engine.prober.toggle_all_safe(safe, progress=progress)

    console.print(_results_table([device.name for device in safe], results))
    skipped = len(engine.inventory.devices()) - len(safe)
    if skipped:
        console.print(
            f"[yellow]![/yellow] Skipped {skipped} lock/garage door device(s)"
        )


def register(app: typer.Typer) -> None:
    @app.command()
    def check() -> None:
        """Probe every device once and show updated health."""
        settings = load_settings_or_exit()
        asyncio.run(_health_check(settings, Console()))

    @app.command()
    def toggle() -> None:
        """Switch every non-dangerous device on, off and back."""
        settings = load_settings_or_exit()
        asyncio.run(_toggle_test(settings, Console()))
