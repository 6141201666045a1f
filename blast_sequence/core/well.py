"""Well model for blast-sequence planning."""

from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np


@dataclass(frozen=True)
class Well:
    """A single drilled blast hole on the pattern grid.

    Wells are immutable; the scheduler publishes a new collection whenever
    a detonation flag changes instead of mutating records in place.
    """

    id: int
    row: int
    col: int
    x: float
    y: float
    delay: int  # ms from sequence start
    exploded: bool = False

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    def detonated(self) -> Well:
        return self if self.exploded else replace(self, exploded=True)

    def cleared(self) -> Well:
        return replace(self, exploded=False) if self.exploded else self
