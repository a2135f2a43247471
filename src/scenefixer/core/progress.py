from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class SweepProgress:
    """Position of a sequential sweep: ``fraction`` runs from 0.0 to 1.0."""

    fraction: float
    current: str
    index: int
    total: int

    @property
    def done(self) -> bool:
        return self.fraction >= 1.0


ProgressCallback = Callable[[SweepProgress], None]


def report(
    callback: ProgressCallback | None, index: int, total: int, current: str
) -> SweepProgress:
    fraction = 1.0 if total == 0 or index >= total else index / total
    progress = SweepProgress(
        fraction=fraction, current=current, index=index, total=total
    )
    if callback is not None:
        callback(progress)
    return progress
