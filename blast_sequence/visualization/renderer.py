"""Matplotlib-based 2D visualization of a blast sequence."""

from __future__ import annotations

from collections import Counter
from typing import Any

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from ..config.constants import COMPLETION_TAIL_MS
from ..core.grid import grid_links, well_positions
from ..core.well import Well
from ..simulation.clock import ManualTickSource
from ..simulation.scheduler import BlastSequence, SequenceSnapshot, WellStatus

STATUS_COLORS: dict[WellStatus, str] = {
    WellStatus.IDLE: "#6366f1",
    WellStatus.IMMINENT: "#0ea5e9",
    WellStatus.EXPLODED: "#f97316",
}
STATUS_LABELS: dict[WellStatus, str] = {
    WellStatus.IDLE: "Waiting",
    WellStatus.IMMINENT: "About to fire",
    WellStatus.EXPLODED: "Detonated",
}


def display_status(snapshot: SequenceSnapshot, well: Well) -> WellStatus:
    """Status to draw: a well reads as detonating only while the run is live."""
    status = snapshot.status_of(well)
    if status is WellStatus.EXPLODED and not snapshot.is_running:
        return WellStatus.IDLE
    return status


def _status_colors(snapshot: SequenceSnapshot) -> list[str]:
    return [STATUS_COLORS[display_status(snapshot, w)] for w in snapshot.wells]


def _annotate_delays(ax: Any, snapshot: SequenceSnapshot) -> None:
    for w in snapshot.wells:
        ax.annotate(
            f"{w.delay} ms", (w.x, w.y),
            textcoords="offset points", xytext=(0, 9),
            ha="center", fontsize=7, color="#94a3b8",
            family="monospace",
        )


class SequenceRenderer:
    """Renders a snapshot or animation of a blast sequence."""

    def __init__(self, sequence: BlastSequence) -> None:
        self.sequence = sequence

    def _draw_links(self, ax: Any, snapshot: SequenceSnapshot) -> None:
        for a, b in grid_links(snapshot.wells):
            ax.plot(
                [a.x, b.x], [a.y, b.y],
                color="#334155", linewidth=0.6, linestyle=(0, (3, 3)), zorder=1,
            )

    def _frame_axes(self, ax: Any, snapshot: SequenceSnapshot) -> None:
        p = snapshot.params
        ax.set_xlim(-p.well_spacing, max(p.cols - 1, 0) * p.well_spacing + p.well_spacing)
        # Row 0 at the top, like a plan drawing.
        ax.set_ylim(max(p.rows - 1, 0) * p.row_spacing + p.row_spacing, -p.row_spacing)
        ax.set_aspect("equal")
        ax.set_xlabel("x (m)")
        ax.set_ylabel("y (m)")

    def render_snapshot(
        self,
        snapshot: SequenceSnapshot | None = None,
        *,
        title: str | None = None,
        show_delays: bool = True,
        show_links: bool = True,
        show_legend: bool = True,
        ax: Any = None,
    ) -> Any:
        """Draw wells colored by status at one instant."""
        snap = snapshot or self.sequence.snapshot()
        if ax is None:
            _fig, ax = plt.subplots(1, 1, figsize=(8, 8))

        if show_links:
            self._draw_links(ax, snap)

        pos = well_positions(snap.wells)

        # Blast halo only while the run is live.
        if snap.is_running:
            blasting = [w for w in snap.wells if w.exploded]
            if blasting:
                ax.scatter(
                    [w.x for w in blasting], [w.y for w in blasting],
                    s=600, c="#f97316", alpha=0.25,
                    edgecolors="none", zorder=2,
                )

        ax.scatter(
            pos[:, 0], pos[:, 1], c=_status_colors(snap), s=120,
            edgecolors="#0ea5e9", linewidths=0.8, zorder=3,
        )

        if show_delays:
            _annotate_delays(ax, snap)

        if show_legend:
            for status, color in STATUS_COLORS.items():
                ax.scatter([], [], c=color, label=STATUS_LABELS[status], s=60)
            ax.legend(loc="upper right", fontsize=8)

        self._frame_axes(ax, snap)
        ax.set_title(title or f"Blast sequence — {snap.elapsed} ms")
        return ax

    def render_progress(self, snapshot: SequenceSnapshot | None = None, ax: Any = None) -> Any:
        """Horizontal progress bar for the current run."""
        snap = snapshot or self.sequence.snapshot()
        if ax is None:
            _fig, ax = plt.subplots(1, 1, figsize=(8, 1))
        ax.barh([0], [snap.progress], color="#f97316", height=0.6)
        ax.set_xlim(0, 1)
        ax.set_yticks([])
        ax.set_title(f"Progress {snap.progress * 100:.0f}%", fontsize=9)
        return ax

    def animate(
        self,
        *,
        interval_ms: int | None = None,
        show_delays: bool = True,
        title: str = "Blast sequence",
    ) -> FuncAnimation:
        """Start a run and animate it frame by frame.

        Each frame advances the sequence's :class:`ManualTickSource` by one
        tick, so the animation plays simulated time at the tick cadence.
        """
        clock = self.sequence.tick_source
        if not isinstance(clock, ManualTickSource):
            raise TypeError("animate() needs a sequence driven by ManualTickSource")

        step = self.sequence.tick_interval
        if not self.sequence.start():
            raise RuntimeError("sequence is already running")
        run_max = self.sequence.run_state.max_delay
        n_frames = -(-(run_max + COMPLETION_TAIL_MS) // step) + 1

        fig, ax = plt.subplots(1, 1, figsize=(8, 8))
        snap = self.sequence.snapshot()
        if show_delays:
            _annotate_delays(ax, snap)
        self._draw_links(ax, snap)
        pos = well_positions(snap.wells)
        sc = ax.scatter(
            pos[:, 0], pos[:, 1], c=_status_colors(snap), s=120,
            edgecolors="#0ea5e9", linewidths=0.8, zorder=3,
        )
        self._frame_axes(ax, snap)
        title_obj = ax.set_title(f"{title} — 0 ms")

        def update(frame: int) -> Any:
            if frame > 0:
                clock.advance(step)
            current = self.sequence.snapshot()
            if current.wells:
                sc.set_facecolor(_status_colors(current))
            if current.is_running:
                title_obj.set_text(f"{title} — {current.elapsed} ms")
            else:
                title_obj.set_text(f"{title} — complete")
            return (sc, title_obj)

        return FuncAnimation(
            fig, update, frames=n_frames,
            interval=interval_ms or step, blit=False, repeat=False,
        )


def status_counts(snapshot: SequenceSnapshot) -> dict[WellStatus, int]:
    """Number of wells in each display status."""
    counts = Counter(display_status(snapshot, w) for w in snapshot.wells)
    return {s: counts.get(s, 0) for s in WellStatus}
