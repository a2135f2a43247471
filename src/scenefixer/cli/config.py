from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from scenefixer.config import (
    Settings,
    backups_path_from_settings,
    home_file_from_settings,
    render_settings_toml,
    write_settings,
)

from .common import load_settings_or_exit, resolve_config_path_or_exit

SECTIONS = ("database", "home", "probing", "auditing", "retention")

app = typer.Typer(
    help="Inspect or create the SceneFixer config file.", no_args_is_help=True
)


def _section_table(settings: Settings, section: str) -> Table:
    table = Table(title=section)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in getattr(settings, section).model_dump().items():
        table.add_row(key, "unlimited" if value is None else str(value))
    return table


@app.command("show")
def show_config(
    section: Annotated[
        str | None,
        typer.Option(
            "--section",
            "-s",
            help=f"Only show one section: {', '.join(SECTIONS)}",
        ),
    ] = None,
) -> None:
    """Print the effective settings as TOML, or one section as a table."""
    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    if section is not None:
        if section not in SECTIONS:
            typer.echo(f"Unknown section '{section}'", err=True)
            raise typer.Exit(1)
        Console().print(_section_table(settings, section))
        return

    typer.echo(f"Config source: {path if exists else 'defaults'}")
    typer.echo(render_settings_toml(settings))


@app.command("path")
def config_path() -> None:
    """Print where the config file is read from."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)
    typer.echo(f"{path}{'' if exists else ' (not created yet)'}")


@app.command("init")
def init_config(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace an existing config file"),
    ] = False,
) -> None:
    """Write a config file with default probing, auditing and retention values."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    if exists and not force:
        typer.echo(f"Config already exists at {path} (use --force to replace it)")
        return

    settings = Settings()
    write_settings(settings, path)
    typer.echo(f"Wrote default config to {path}")
    typer.echo(f"  home file: {home_file_from_settings(settings)}")
    typer.echo(f"  backups:   {backups_path_from_settings(settings)}")
