from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn

from scenefixer.core import ProgressCallback, SweepProgress


@contextmanager
def sweep_progress(console: Console, label: str) -> Iterator[ProgressCallback]:
    """Render sweep progress as a rich progress bar."""
    with Progress(
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TextColumn("{task.fields[current]}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(label, total=1.0, current="")

        def _update(update: SweepProgress) -> None:
            progress.update(task, completed=update.fraction, current=update.current)

        yield _update
