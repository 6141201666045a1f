"""Grid generator: layout parameters to an ordered well set.

The generator is the only producer of well identity.  Output order is
row-major and significant: it is the id-assignment order and the
reference for delay computation.
"""

from __future__ import annotations

from typing import Iterator, Sequence

import numpy as np

from .layout import LayoutParameters
from .well import Well


def generate(params: LayoutParameters) -> tuple[Well, ...]:
    """Build the full well set for *params*.

    Well ``(row, col)`` sits at ``(col * well_spacing, row * row_spacing)``
    and fires ``(row * cols + col) * inter_well_delay`` ms after the start.
    Ids restart at ``0`` on every call, so identical parameters always give
    identical output.

    Parameters are not range-checked; a grid with ``rows * cols == 0``
    yields an empty tuple.
    """
    wells: list[Well] = []
    for r in range(params.rows):
        for c in range(params.cols):
            wid = r * params.cols + c
            wells.append(Well(
                id=wid,
                row=r,
                col=c,
                x=c * params.well_spacing,
                y=r * params.row_spacing,
                delay=wid * params.inter_well_delay,
            ))
    return tuple(wells)


def max_delay(wells: Sequence[Well]) -> int:
    """Latest detonation offset in *wells*, ``0`` when there are none."""
    return max((w.delay for w in wells), default=0)


def well_positions(wells: Sequence[Well]) -> np.ndarray:
    """Return an ``(n, 2)`` array of well coordinates in metres."""
    if not wells:
        return np.empty((0, 2), dtype=float)
    return np.array([w.position for w in wells], dtype=float)


def grid_links(wells: Sequence[Well]) -> Iterator[tuple[Well, Well]]:
    """Yield adjacent well pairs along rows, then along columns."""
    by_cell = {(w.row, w.col): w for w in wells}
    for w in wells:
        right = by_cell.get((w.row, w.col + 1))
        if right is not None:
            yield w, right
    for w in wells:
        below = by_cell.get((w.row + 1, w.col))
        if below is not None:
            yield w, below
