from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from scenefixer.models import Device, DeviceHealthStatus

from .common import load_settings_or_exit, start_engine

STATUS_STYLES = {
    DeviceHealthStatus.HEALTHY: "green",
    DeviceHealthStatus.DEGRADED: "yellow",
    DeviceHealthStatus.UNREACHABLE: "red",
    DeviceHealthStatus.UNKNOWN: "dim",
    DeviceHealthStatus.TESTING: "blue",
}


def status_text(status: DeviceHealthStatus) -> str:
    return f"[{STATUS_STYLES[status]}]{status.value}[/]"


def device_table(devices: list[Device]) -> Table:
    table = Table()
    table.add_column("Name", style="cyan")
    table.add_column("Room")
    table.add_column("Category")
    table.add_column("Manufacturer")
    table.add_column("Protocol")
    table.add_column("Reachable")
    table.add_column("Health")
    table.add_column("Reliability", justify="right")
    table.add_column("Avg ms", justify="right")
    table.add_column("Scenes", justify="right")

    for device in sorted(devices, key=lambda d: (d.room or "", d.name)):
        avg = device.average_response_time
        table.add_row(
            device.name,
            device.room or "",
            device.category.value,
            device.manufacturer.value,
            device.protocol.value,
            "yes" if device.is_reachable else "[red]no[/red]",
            status_text(device.health_status),
            f"{device.reliability_score:.0f}%",
            "" if avg is None else f"{avg:.1f}",
            str(device.scene_count),
        )
    return table


def list_devices() -> None:
    """List devices with their health."""
    settings = load_settings_or_exit()
    engine = asyncio.run(start_engine(settings))
    devices = engine.inventory.devices()

    console = Console()
    if not devices:
        console.print("No devices found in home file.")
        return
    console.print(device_table(devices))


def summary() -> None:
    """Summarize device health by room and by manufacturer."""
    settings = load_settings_or_exit()
    engine = asyncio.run(start_engine(settings))

    console = Console()

    rooms = Table(title="Rooms")
    rooms.add_column("Room", style="cyan")
    for column in ("Devices", "Healthy", "Degraded", "Unreachable"):
        rooms.add_column(column, justify="right")
    for room in engine.inventory.room_summaries():
        rooms.add_row(
            room.name,
            str(room.total_devices),
            str(room.healthy_devices),
            str(room.degraded_devices),
            str(room.unreachable_devices),
        )
    console.print(rooms)

    brands = Table(title="Manufacturers")
    brands.add_column("Manufacturer", style="cyan")
    for column in ("Devices", "Healthy", "Degraded", "Unreachable", "Reliability"):
        brands.add_column(column, justify="right")
    for brand in engine.inventory.manufacturer_summaries():
        brands.add_row(
            brand.manufacturer.value,
            str(brand.device_count),
            str(brand.healthy_count),
            str(brand.degraded_count),
            str(brand.unreachable_count),
            f"{brand.average_reliability:.0f}%",
        )
    console.print(brands)


def register(app: typer.Typer) -> None:
    app.command("devices")(list_devices)
    app.command("summary")(summary)
