from __future__ import annotations

from pathlib import Path

import typer

from scenefixer.config import Settings, get_settings, resolve_config_path
from scenefixer.services import Engine, build_engine


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def build_engine_or_exit(settings: Settings) -> Engine:
    try:
        return build_engine(settings)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        typer.echo("Run 'scenefixer init' to create a sample home file.", err=True)
        raise typer.Exit(1) from exc


async def start_engine(settings: Settings) -> Engine:
    engine = build_engine_or_exit(settings)
    if not await engine.start():
        typer.echo(f"Failed to load home: {engine.inventory.error_message}", err=True)
        raise typer.Exit(1)
    return engine
