"""Blast sequence demo.

Plans the default 4x5 pattern (25 ms between wells), runs the sequence on a
simulated clock and renders it before the start, mid-sequence and after
the last detonation.
"""

from __future__ import annotations

import matplotlib.pyplot as plt

from ..core.layout import LayoutParameters
from ..reporting.export import delay_matrix, summary_table
from ..simulation.clock import ManualTickSource
from ..simulation.scheduler import BlastSequence, SequenceSnapshot
from ..utils.logging import configure_logging
from ..visualization.renderer import SequenceRenderer


def main(output: str = "sequence_demo.png", show: bool = True) -> list[SequenceSnapshot]:
    configure_logging()
    clock = ManualTickSource()
    seq = BlastSequence(LayoutParameters(), tick_source=clock)

    print(summary_table(seq.params).to_string(index=False))
    print(delay_matrix(seq.snapshot()).to_string())

    # Before the start, mid-sequence, just after the last detonation.
    frames: list[SequenceSnapshot] = [seq.snapshot()]
    seq.start()
    clock.advance(seq.run_state.max_delay // 2)
    frames.append(seq.snapshot())
    clock.advance(seq.run_state.max_delay + seq.tick_interval - seq.elapsed)
    frames.append(seq.snapshot())

    renderer = SequenceRenderer(seq)
    fig, axes = plt.subplots(1, 3, figsize=(18, 6))
    for ax, snap in zip(axes, frames):
        renderer.render_snapshot(snap, ax=ax, show_legend=ax is axes[0])
    plt.tight_layout()
    plt.savefig(output, dpi=150)
    if show:
        plt.show()
    plt.close(fig)
    return frames


if __name__ == "__main__":
    main()
