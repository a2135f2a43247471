from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from scenefixer.config import data_dir_from_settings, home_file_from_settings
from scenefixer.core.file_home import SAMPLE_HOME, FileHomePlatform

from .common import load_settings_or_exit, resolve_config_path_or_exit


def register(app: typer.Typer) -> None:
    @app.command()
    def init(
        force: Annotated[
            bool,
            typer.Option("--force", "-f", help="Overwrite an existing home file"),
        ] = False,
    ) -> None:
        """Create the data directory and a sample home file."""
        console = Console()

        settings = load_settings_or_exit()
        data_dir = data_dir_from_settings(settings)
        data_dir.mkdir(parents=True, exist_ok=True)

        home_file = home_file_from_settings(settings)
        if home_file.exists() and not force:
            console.print(f"Home file already exists at {home_file}")
        else:
            FileHomePlatform.from_dict(SAMPLE_HOME, path=home_file).save()
            console.print(f"[green]✓[/green] Wrote sample home to {home_file}")

        console.print(f"  • {data_dir} - Data directory")

        config_path, config_exists = resolve_config_path_or_exit(allow_missing=True)
        if not config_exists:
            console.print(
                "\nConfig not found. Run 'scenefixer config init' to create one."
            )
        else:
            console.print(f"  • {config_path} - Configuration")
