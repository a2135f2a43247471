from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from scenefixer.config import Settings
from scenefixer.models import AuditResult, Scene, SceneHealthStatus
from scenefixer.services import Engine

from .common import load_settings_or_exit, start_engine
from .progress import sweep_progress

SCENE_STYLES = {
    SceneHealthStatus.HEALTHY: "green",
    SceneHealthStatus.DEGRADED: "yellow",
    SceneHealthStatus.BROKEN: "red",
    SceneHealthStatus.UNKNOWN: "dim",
}


def _audit_table(results: list[AuditResult]) -> Table:
    table = Table()
    table.add_column("Scene", style="cyan")
    table.add_column("Health")
    table.add_column("Reachable", justify="right")
    table.add_column("Recommendations")

    for result in results:
        status = result.status
        total = len(result.reachable_devices) + len(result.unreachable_devices)
        table.add_row(
            result.scene.name,
            f"[{SCENE_STYLES[status]}]{status.value}[/] "
            f"({result.health_percentage:.0f}%)",
            f"{len(result.reachable_devices)}/{total}",
            "\n".join(result.recommendations),
        )
    return table


def _scene_or_exit(engine: Engine, key: str) -> Scene:
    scene = engine.inventory.find_scene(key)
    if scene is None:
        typer.echo(f"Scene '{key}' not found", err=True)
        raise typer.Exit(1)
    return scene


async def _audit(settings: Settings, console: Console) -> list[AuditResult]:
    engine = await start_engine(settings)
    with sweep_progress(console, "Auditing scenes") as progress:
        results = await engine.auditor.audit_all(progress=progress)
    console.print(_audit_table(results))
    return results


async def _repair(
    settings: Settings, console: Console, scene_key: str | None, repair_all: bool
) -> bool:
    engine = await start_engine(settings)
    await engine.auditor.audit_all()

    if repair_all:
        outcomes = await engine.repairs.repair_all_broken()
        if not outcomes:
            console.print("No scenes need repair.")
        ok = all(outcomes.values())
    elif scene_key is not None:
        scene = engine.inventory.find_scene(scene_key)
        if scene is None:
            console.print(f"[red]✗[/red] Scene '{scene_key}' not found")
            return False
        ok = await engine.repairs.repair(scene)
    else:
        console.print("Give a scene name or use --all")
        return False

    for action in engine.repairs.repair_history:
        mark = "[green]✓[/green]" if action.success else "[red]✗[/red]"
        console.print(f"{mark} {action.scene_name}: {action.message}")
    return ok


async def _run_scene(settings: Settings, console: Console, scene_key: str) -> bool:
    engine = await start_engine(settings)
    scene = _scene_or_exit(engine, scene_key)
    result = await engine.auditor.run_scene(scene)
    if result.success:
        console.print(
            f"[green]✓[/green] Ran '{scene.name}' in {result.response_time:.1f} ms"
        )
    else:
        console.print(f"[red]✗[/red] {result.error_message}")
    return result.success


async def _restore(settings: Settings, console: Console, backup_id: str) -> bool:
    engine = await start_engine(settings)
    backup = engine.store.get(backup_id)
    if backup is None:
        console.print(f"[red]✗[/red] Backup '{backup_id}' not found")
        return False

    ok = await engine.repairs.restore(backup)
    for action in engine.repairs.repair_history:
        console.print(f"[yellow]![/yellow] {action.scene_name}: {action.message}")
    console.print("Devices in backup:")
    for name in backup.device_names:
        console.print(f"  • {name}")
    return ok


def register(app: typer.Typer) -> None:
    @app.command()
    def audit() -> None:
        """Audit every scene against live device reachability."""
        settings = load_settings_or_exit()
        asyncio.run(_audit(settings, Console()))

    @app.command()
    def repair(
        scene: Annotated[
            str | None, typer.Argument(help="Scene name or id to repair")
        ] = None,
        repair_all: Annotated[
            bool, typer.Option("--all", help="Repair every broken or degraded scene")
        ] = False,
    ) -> None:
        """Back up a scene, then remove its unreachable devices."""
        settings = load_settings_or_exit()
        if not asyncio.run(_repair(settings, Console(), scene, repair_all)):
            raise typer.Exit(1)

    @app.command("run")
    def run_scene(
        scene: Annotated[str, typer.Argument(help="Scene name or id to run")],
    ) -> None:
        """Execute a scene once."""
        settings = load_settings_or_exit()
        if not asyncio.run(_run_scene(settings, Console(), scene)):
            raise typer.Exit(1)

    @app.command()
    def backups() -> None:
        """List stored scene backups."""
        settings = load_settings_or_exit()
        engine = asyncio.run(start_engine(settings))

        console = Console()
        stored = engine.store.backups
        if not stored:
            console.print("No backups stored.")
            return

        table = Table()
        table.add_column("ID", style="cyan")
        table.add_column("Scene")
        table.add_column("Created")
        table.add_column("Devices")
        for backup in stored:
            table.add_row(
                backup.id,
                backup.scene_name,
                backup.backup_date.strftime("%Y-%m-%d %H:%M:%S"),
                ", ".join(backup.device_names),
            )
        console.print(table)

    @app.command()
    def restore(
        backup_id: Annotated[str, typer.Argument(help="Backup id")],
    ) -> None:
        """Attempt to restore a scene from a backup."""
        settings = load_settings_or_exit()
        if not asyncio.run(_restore(settings, Console(), backup_id)):
            raise typer.Exit(1)
