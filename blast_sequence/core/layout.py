"""Layout parameters, input-boundary checks and summary metrics.

The grid generator and the scheduler accept any :class:`LayoutParameters`
value.  Range checks live here, at the input boundary, so a form or CLI can
either reject (:func:`validate_layout`) or clamp (:func:`clamp_layout`)
user input before it reaches the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from ..config.constants import (
    CHARGE_PER_METRE_KG,
    DEFAULT_COLS,
    DEFAULT_DEPTH,
    DEFAULT_INTER_WELL_DELAY,
    DEFAULT_ROW_SPACING,
    DEFAULT_ROWS,
    DEFAULT_WELL_SPACING,
    DELAY_BOUNDS,
    DEPTH_BOUNDS,
    GRID_BOUNDS,
    SPACING_BOUNDS,
)


class LayoutError(ValueError):
    """Raised by :func:`validate_layout` for out-of-range parameters."""

    def __init__(self, violations: dict[str, str]) -> None:
        self.violations = violations
        detail = "; ".join(f"{name} {msg}" for name, msg in violations.items())
        super().__init__(f"invalid blast layout: {detail}")


@dataclass(frozen=True)
class LayoutParameters:
    """Geometry and timing of one blast pattern.

    Any change to these values means a new grid: the scheduler regenerates
    the full well set rather than patching it.
    """

    depth: float = DEFAULT_DEPTH
    well_spacing: float = DEFAULT_WELL_SPACING
    row_spacing: float = DEFAULT_ROW_SPACING
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    inter_well_delay: int = DEFAULT_INTER_WELL_DELAY

    @property
    def total_wells(self) -> int:
        return self.rows * self.cols


LAYOUT_BOUNDS: dict[str, tuple[float, float]] = {
    "depth": DEPTH_BOUNDS,
    "well_spacing": SPACING_BOUNDS,
    "row_spacing": SPACING_BOUNDS,
    "rows": GRID_BOUNDS,
    "cols": GRID_BOUNDS,
    "inter_well_delay": DELAY_BOUNDS,
}


def validate_layout(params: LayoutParameters) -> LayoutParameters:
    """Return *params* unchanged, or raise :class:`LayoutError`.

    Every out-of-range field is reported, not only the first one.
    """
    violations: dict[str, str] = {}
    for f in fields(params):
        lo, hi = LAYOUT_BOUNDS[f.name]
        value = getattr(params, f.name)
        if not lo <= value <= hi:
            violations[f.name] = f"must be in [{lo}, {hi}], got {value}"
    if violations:
        raise LayoutError(violations)
    return params


def clamp_layout(params: LayoutParameters) -> LayoutParameters:
    """Return a copy of *params* with every field clamped into its bounds."""
    changes = {}
    for f in fields(params):
        lo, hi = LAYOUT_BOUNDS[f.name]
        value = getattr(params, f.name)
        clamped = min(max(value, lo), hi)
        if clamped != value:
            changes[f.name] = type(value)(clamped)
    return replace(params, **changes) if changes else params


# ── Summary metrics ──────────────────────────────────────────────────


@dataclass(frozen=True)
class SummaryMetrics:
    """Planning figures derived from layout parameters alone."""

    total_wells: int
    total_explosive_mass: float  # kg
    total_sequence_duration: int  # ms
    coverage_area: float  # m²

    @property
    def total_sequence_duration_s(self) -> float:
        return self.total_sequence_duration / 1000.0


def summarize(params: LayoutParameters) -> SummaryMetrics:
    """Compute the summary metrics for *params*.

    ``total_sequence_duration`` is the offset of the last detonation, so an
    empty grid reports ``0`` rather than a negative duration.
    """
    total = params.total_wells
    return SummaryMetrics(
        total_wells=total,
        total_explosive_mass=params.depth * CHARGE_PER_METRE_KG * total,
        total_sequence_duration=max(total - 1, 0) * params.inter_well_delay,
        coverage_area=(
            (params.rows - 1) * params.row_spacing
            * (params.cols - 1) * params.well_spacing
        ),
    )
