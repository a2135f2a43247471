from __future__ import annotations

from typing import Annotated

import typer

from scenefixer.utils.logging import setup_logging

from . import config as config_cmd
from .checks import register as register_checks
from .devices import register as register_devices
from .info import register as register_info
from .init_cmd import register as register_init
from .scenes import register as register_scenes

app = typer.Typer(
    help="SceneFixer - smart-home device health and scene repair",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config")

register_init(app)
register_info(app)
register_devices(app)
register_checks(app)
register_scenes(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
) -> None:
    """SceneFixer CLI."""
    setup_logging()

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"scenefixer version {get_version('scenefixer')}")
        raise typer.Exit()
