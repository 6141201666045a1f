"""Tests for the matplotlib renderer and the demo script."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from blast_sequence.core.layout import LayoutParameters
from blast_sequence.examples.sequence_demo import main as demo_main
from blast_sequence.simulation.clock import AsyncioTickSource, ManualTickSource
from blast_sequence.simulation.scheduler import BlastSequence, WellStatus
from blast_sequence.visualization.renderer import (
    STATUS_COLORS,
    SequenceRenderer,
    _status_colors,
    display_status,
    status_counts,
)


class TestSequenceRenderer:
    def test_render_snapshot(self):
        seq = BlastSequence(LayoutParameters(rows=3, cols=3))
        ax = SequenceRenderer(seq).render_snapshot()
        assert ax.get_title() == "Blast sequence — 0 ms"
        assert len(ax.texts) == 9
        plt.close("all")

    def test_render_running_snapshot(self):
        clock = ManualTickSource()
        seq = BlastSequence(LayoutParameters(rows=2, cols=2), tick_source=clock)
        seq.start()
        clock.advance(50)
        ax = SequenceRenderer(seq).render_snapshot(show_delays=False)
        assert len(ax.texts) == 0
        assert "50 ms" in ax.get_title()
        plt.close("all")

    def test_render_progress(self):
        clock = ManualTickSource()
        seq = BlastSequence(LayoutParameters(rows=1, cols=1), tick_source=clock)
        seq.start()
        clock.advance(500)
        ax = SequenceRenderer(seq).render_progress()
        assert ax.get_title() == "Progress 50%"
        plt.close("all")

    def test_animate_runs_sequence(self):
        clock = ManualTickSource()
        seq = BlastSequence(LayoutParameters(rows=2, cols=2), tick_source=clock)
        anim = SequenceRenderer(seq).animate()
        assert seq.is_running
        for frame in range(30):
            anim._func(frame)
            if not seq.is_running:
                break
        assert not seq.is_running
        assert all(w.exploded for w in seq.wells)
        plt.close("all")

    def test_animate_title_follows_elapsed(self):
        clock = ManualTickSource()
        seq = BlastSequence(LayoutParameters(rows=2, cols=2), tick_source=clock)
        anim = SequenceRenderer(seq).animate()
        for frame in range(4):
            _, title = anim._func(frame)
        assert title.get_text() == f"Blast sequence — {seq.elapsed} ms"
        assert seq.elapsed == 150
        frame = 4
        while seq.is_running:
            _, title = anim._func(frame)
            frame += 1
        assert title.get_text() == "Blast sequence — complete"
        plt.close("all")

    def test_animate_rejects_running_sequence(self):
        clock = ManualTickSource()
        seq = BlastSequence(LayoutParameters(rows=2, cols=2), tick_source=clock)
        seq.start()
        with pytest.raises(RuntimeError):
            SequenceRenderer(seq).animate()
        assert clock.pending == 1

    def test_delay_labels_monospace(self):
        seq = BlastSequence(LayoutParameters(rows=2, cols=2))
        ax = SequenceRenderer(seq).render_snapshot()
        assert all(t.get_fontfamily() == ["monospace"] for t in ax.texts)
        plt.close("all")

    def test_animate_requires_manual_clock(self):
        seq = BlastSequence(LayoutParameters(), tick_source=AsyncioTickSource())
        with pytest.raises(TypeError):
            SequenceRenderer(seq).animate()
        assert not seq.is_running


class TestStatusCounts:
    def test_counts(self):
        clock = ManualTickSource()
        seq = BlastSequence(LayoutParameters(rows=1, cols=10, inter_well_delay=100),
                            tick_source=clock)
        seq.start()
        clock.advance(100)
        counts = status_counts(seq.snapshot())
        assert counts == {
            WellStatus.IDLE: 6,
            WellStatus.IMMINENT: 2,
            WellStatus.EXPLODED: 2,
        }

    def test_empty(self):
        seq = BlastSequence(LayoutParameters(rows=0, cols=0))
        assert sum(status_counts(seq.snapshot()).values()) == 0


class TestDisplayStatus:
    def test_completed_run_draws_idle(self):
        clock = ManualTickSource()
        seq = BlastSequence(LayoutParameters(rows=2, cols=2), tick_source=clock)
        seq.start()
        clock.run_until_idle()
        snap = seq.snapshot()
        assert all(w.exploded for w in snap.wells)
        assert all(display_status(snap, w) is WellStatus.IDLE for w in snap.wells)
        assert _status_colors(snap) == [STATUS_COLORS[WellStatus.IDLE]] * 4
        assert status_counts(snap)[WellStatus.IDLE] == 4

    def test_live_run_draws_exploded(self):
        clock = ManualTickSource()
        seq = BlastSequence(LayoutParameters(rows=1, cols=3, inter_well_delay=100),
                            tick_source=clock)
        seq.start()
        clock.advance(50)
        snap = seq.snapshot()
        assert display_status(snap, snap.wells[0]) is WellStatus.EXPLODED


class TestDemo:
    def test_demo_writes_png(self, tmp_path):
        out = tmp_path / "demo.png"
        frames = demo_main(str(out), show=False)
        assert out.exists()
        assert len(frames) == 3
        assert not frames[0].is_running
        assert frames[1].is_running
        assert all(w.exploded for w in frames[2].wells)
