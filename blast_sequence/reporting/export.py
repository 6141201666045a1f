"""Tabular views of a blast sequence for reporting collaborators.

These functions only shape data; how a table is printed or saved is up to
the caller (``DataFrame.to_csv``, ``to_markdown``, ...).
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

import pandas as pd

from ..core.layout import LayoutParameters, summarize
from ..simulation.scheduler import SequenceSnapshot

WELL_COLUMNS = ["id", "row", "col", "x", "y", "delay", "exploded"]


def report_records(snapshot: SequenceSnapshot) -> list[dict[str, Any]]:
    """One plain dict per well, in row-major order."""
    return [
        {**asdict(w), "status": snapshot.status_of(w).value}
        for w in snapshot.wells
    ]


def well_table(snapshot: SequenceSnapshot) -> pd.DataFrame:
    """Per-well table (row, col, delay, ...) indexed by well id."""
    df = pd.DataFrame(
        [asdict(w) for w in snapshot.wells], columns=WELL_COLUMNS
    )
    return df.set_index("id")


def summary_table(params: LayoutParameters) -> pd.DataFrame:
    """Summary metrics as a one-row frame."""
    metrics = summarize(params)
    row = asdict(metrics)
    row["total_sequence_duration_s"] = metrics.total_sequence_duration_s
    return pd.DataFrame([row])


def delay_matrix(snapshot: SequenceSnapshot) -> pd.DataFrame:
    """Delays pivoted to the grid shape: one row per pattern row."""
    table = well_table(snapshot)
    if table.empty:
        return pd.DataFrame()
    return table.pivot(index="row", columns="col", values="delay")
