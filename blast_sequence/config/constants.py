"""Domain constants for blast-sequence planning.

Timing constants drive the scheduler; bounds are enforced at the input
boundary only (see :mod:`blast_sequence.core.layout`).
"""

from __future__ import annotations

# ── Timing ───────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 50
"""Wall-clock tick interval; one tick advances simulated time by the same amount."""

COMPLETION_TAIL_MS = 1000
"""Time a run keeps going after the last scheduled detonation."""

IMMINENT_WINDOW_MS = 200
"""A well within this many ms of the elapsed time is about to fire."""

# ── Charge ───────────────────────────────────────────────────────────

CHARGE_PER_METRE_KG = 0.8
"""Explosive mass per metre of well depth."""

# ── Default layout ───────────────────────────────────────────────────

DEFAULT_DEPTH = 12
DEFAULT_WELL_SPACING = 5
DEFAULT_ROW_SPACING = 6
DEFAULT_ROWS = 4
DEFAULT_COLS = 5
DEFAULT_INTER_WELL_DELAY = 25

# ── Input bounds (inclusive) ─────────────────────────────────────────

DEPTH_BOUNDS: tuple[float, float] = (5, 30)
SPACING_BOUNDS: tuple[float, float] = (2, 10)
GRID_BOUNDS: tuple[int, int] = (1, 10)
DELAY_BOUNDS: tuple[int, int] = (10, 100)

DELAY_STEP_MS = 5
"""Granularity of the delay slider."""
