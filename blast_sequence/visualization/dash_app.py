"""Interactive Dash UI for blast-sequence planning.

Run with:
    python -m blast_sequence.visualization.dash_app

Opens at http://127.0.0.1:7860
"""

from __future__ import annotations

import os

import plotly.graph_objects as go

import dash
from dash import dcc, html, ctx, Input, Output, no_update

from blast_sequence.config.constants import (
    DEFAULT_COLS,
    DEFAULT_DEPTH,
    DEFAULT_INTER_WELL_DELAY,
    DEFAULT_ROW_SPACING,
    DEFAULT_ROWS,
    DEFAULT_WELL_SPACING,
    DELAY_BOUNDS,
    DELAY_STEP_MS,
    DEPTH_BOUNDS,
    GRID_BOUNDS,
    SPACING_BOUNDS,
    TICK_INTERVAL_MS,
)
from blast_sequence.core.grid import grid_links
from blast_sequence.core.layout import LayoutParameters, clamp_layout
from blast_sequence.simulation.clock import ManualTickSource
from blast_sequence.simulation.scheduler import BlastSequence, SequenceSnapshot
from blast_sequence.utils.logging import configure_logging, get_logger
from blast_sequence.visualization.renderer import STATUS_COLORS, STATUS_LABELS, display_status

logger = get_logger(__name__)

# ═══════════════════════════════════════════════════════════════════════
#  Dark plotly theme
# ═══════════════════════════════════════════════════════════════════════

_LAYOUT_DEFAULTS = dict(
    template="plotly_dark",
    paper_bgcolor="#0a0a0f",
    plot_bgcolor="#0a0a0f",
    font=dict(family="Inter, -apple-system, sans-serif", color="#e8eaed"),
    margin=dict(l=20, r=20, t=50, b=20),
    height=600,
    uirevision="stable",
)


# ═══════════════════════════════════════════════════════════════════════
#  Server-side state (single user)
# ═══════════════════════════════════════════════════════════════════════

# Each browser interval event advances the simulated clock by one tick.
_clock = ManualTickSource()
_sequence = BlastSequence(LayoutParameters(), tick_source=_clock)


def _layout_from_inputs(depth, well_spacing, row_spacing, rows, cols, delay) -> LayoutParameters:
    raw = LayoutParameters(
        depth=depth if depth is not None else DEFAULT_DEPTH,
        well_spacing=well_spacing if well_spacing is not None else DEFAULT_WELL_SPACING,
        row_spacing=row_spacing if row_spacing is not None else DEFAULT_ROW_SPACING,
        rows=int(rows) if rows is not None else DEFAULT_ROWS,
        cols=int(cols) if cols is not None else DEFAULT_COLS,
        inter_well_delay=int(delay) if delay is not None else DEFAULT_INTER_WELL_DELAY,
    )
    return clamp_layout(raw)


# ═══════════════════════════════════════════════════════════════════════
#  Plotly rendering helpers
# ═══════════════════════════════════════════════════════════════════════


def _link_trace(snap: SequenceSnapshot) -> go.Scatter:
    xs: list[float | None] = []
    ys: list[float | None] = []
    for a, b in grid_links(snap.wells):
        xs += [a.x, b.x, None]
        ys += [a.y, b.y, None]
    return go.Scatter(
        x=xs, y=ys, mode="lines",
        line=dict(width=0.7, color="rgba(51,65,85,0.8)", dash="dot"),
        hoverinfo="none", showlegend=False,
    )


def _sequence_figure(snap: SequenceSnapshot) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(_link_trace(snap))

    if snap.is_running:
        blasting = [w for w in snap.wells if w.exploded]
        fig.add_trace(go.Scatter(
            x=[w.x for w in blasting], y=[w.y for w in blasting],
            mode="markers",
            marker=dict(size=42, color="rgba(249,115,22,0.3)"),
            hoverinfo="none", showlegend=False,
        ))

    for status, color in STATUS_COLORS.items():
        group = [w for w in snap.wells if display_status(snap, w) is status]
        fig.add_trace(go.Scatter(
            x=[w.x for w in group],
            y=[w.y for w in group],
            mode="markers+text",
            text=[f"{w.delay} ms" for w in group],
            textposition="top center",
            textfont=dict(family="monospace", size=10, color="#94a3b8"),
            marker=dict(size=16, color=color, line=dict(width=1, color="#0ea5e9")),
            customdata=[[w.id, w.row, w.col] for w in group],
            hovertemplate="well %{customdata[0]} (r%{customdata[1]}, c%{customdata[2]})<extra></extra>",
            name=STATUS_LABELS[status],
        ))

    p = snap.params
    fig.update_xaxes(
        range=[-p.well_spacing, (p.cols - 1) * p.well_spacing + p.well_spacing],
        title="x (m)", zeroline=False,
    )
    fig.update_yaxes(
        range=[(p.rows - 1) * p.row_spacing + p.row_spacing, -p.row_spacing],
        title="y (m)", zeroline=False, scaleanchor="x",
    )
    fig.update_layout(
        title=f"Blast pattern -- {snap.elapsed} ms",
        legend=dict(orientation="h", y=-0.08),
        **_LAYOUT_DEFAULTS,
    )
    return fig


def _metric(label: str, value: str) -> html.Div:
    return html.Div([
        html.Span(label, className="metric-label"),
        html.Span(value, className="metric-value"),
    ], className="metric")


def _metrics_panel(snap: SequenceSnapshot) -> list[html.Div]:
    m = snap.summary
    return [
        _metric("Total wells", str(m.total_wells)),
        _metric("Explosive mass", f"{m.total_explosive_mass:.1f} kg"),
        _metric("Sequence duration", f"{m.total_sequence_duration_s:.2f} s"),
        _metric("Coverage area", f"{m.coverage_area:.0f} m²"),
    ]


def _progress_bar(snap: SequenceSnapshot) -> list:
    if not snap.is_running:
        return []
    pct = snap.progress * 100
    return [
        html.Div([html.Span("Blast progress"), html.Span(f"{pct:.0f}%")],
                 className="progress-header"),
        html.Div(html.Div(style={"width": f"{pct:.1f}%"}, className="progress-fill"),
                 className="progress-track"),
    ]


# ═══════════════════════════════════════════════════════════════════════
#  Dash app + dark theme
# ═══════════════════════════════════════════════════════════════════════

app = dash.Dash(
    __name__,
    title="Blast Sequence Planner",
    suppress_callback_exceptions=True,
)

app.index_string = """<!DOCTYPE html>
<html>
<head>
    {%metas%}
    <title>{%title%}</title>
    {%favicon%}
    {%css%}
    <style>
        body { background: #0a0a0f; color: #e8eaed; font-family: Inter, -apple-system, sans-serif; margin: 0; }
        .page { display: flex; gap: 24px; padding: 24px; }
        .sidebar { width: 320px; flex-shrink: 0; }
        .main-area { flex: 1; }
        .sidebar label { display: block; margin-top: 14px; color: #9aa0a6; font-size: 0.9em; }
        .metric { display: flex; justify-content: space-between; padding: 8px 12px;
                  margin: 6px 0; background: rgba(25,25,45,0.6); border-radius: 8px; }
        .metric-label { color: #9aa0a6; }
        .metric-value { font-family: monospace; font-weight: bold; }
        .control-bar button { margin-right: 8px; padding: 8px 16px; border-radius: 8px;
                              border: 1px solid rgba(255,255,255,0.15); background: #19192d; color: #e8eaed; }
        .control-bar button.primary { background: #f97316; border-color: #f97316; }
        .control-bar button:disabled { opacity: 0.4; }
        .progress-header { display: flex; justify-content: space-between; font-size: 0.85em; color: #9aa0a6; }
        .progress-track { width: 100%; height: 8px; background: #19192d; border-radius: 4px; overflow: hidden; }
        .progress-fill { height: 100%; background: #f97316; }
    </style>
</head>
<body>
    {%app_entry%}
    <footer>
        {%config%}
        {%scripts%}
        {%renderer%}
    </footer>
</body>
</html>"""


def _simulator_layout():
    return html.Div([
        # ── Sidebar ──────────────────────────────────────────────────
        html.Div([
            html.H2("Blast Sequence"),
            html.Label("Well depth (m)"),
            dcc.Slider(id="depth-slider", min=DEPTH_BOUNDS[0], max=DEPTH_BOUNDS[1], step=1,
                       value=DEFAULT_DEPTH, marks={5: "5", 15: "15", 30: "30"}),
            html.Label("Well spacing (m)"),
            dcc.Input(id="well-spacing-input", type="number", value=DEFAULT_WELL_SPACING,
                      min=SPACING_BOUNDS[0], max=SPACING_BOUNDS[1]),
            html.Label("Row spacing (m)"),
            dcc.Input(id="row-spacing-input", type="number", value=DEFAULT_ROW_SPACING,
                      min=SPACING_BOUNDS[0], max=SPACING_BOUNDS[1]),
            html.Label("Rows"),
            dcc.Input(id="rows-input", type="number", value=DEFAULT_ROWS,
                      min=GRID_BOUNDS[0], max=GRID_BOUNDS[1]),
            html.Label("Wells per row"),
            dcc.Input(id="cols-input", type="number", value=DEFAULT_COLS,
                      min=GRID_BOUNDS[0], max=GRID_BOUNDS[1]),
            html.Label("Inter-well delay (ms)"),
            dcc.Slider(id="delay-slider", min=DELAY_BOUNDS[0], max=DELAY_BOUNDS[1], step=DELAY_STEP_MS,
                       value=DEFAULT_INTER_WELL_DELAY, marks={10: "10", 50: "50", 100: "100"}),
            html.Div(id="metrics", style={"marginTop": "20px"}),
            html.Div([
                html.Button("Start blast", id="btn-start", className="primary", n_clicks=0),
                html.Button("Reset", id="btn-reset", n_clicks=0),
            ], className="control-bar", style={"marginTop": "16px"}),
        ], className="sidebar"),

        # ── Main area ────────────────────────────────────────────────
        html.Div([
            dcc.Graph(id="main-graph", config={"displayModeBar": False}),
            html.Div(id="progress"),
            dcc.Interval(id="tick-interval", interval=TICK_INTERVAL_MS, disabled=True),
        ], className="main-area"),
    ], className="page")


app.layout = _simulator_layout()


# ═══════════════════════════════════════════════════════════════════════
#  Callbacks
# ═══════════════════════════════════════════════════════════════════════


@app.callback(
    Output("main-graph", "figure"),
    Output("metrics", "children"),
    Output("progress", "children"),
    Output("tick-interval", "disabled"),
    Output("btn-start", "disabled"),
    Input("depth-slider", "value"),
    Input("well-spacing-input", "value"),
    Input("row-spacing-input", "value"),
    Input("rows-input", "value"),
    Input("cols-input", "value"),
    Input("delay-slider", "value"),
    Input("btn-start", "n_clicks"),
    Input("btn-reset", "n_clicks"),
    Input("tick-interval", "n_intervals"),
)
def sequence_update(depth, well_spacing, row_spacing, rows, cols, delay,
                    _start_clicks, _reset_clicks, _ticks):
    triggered = ctx.triggered_id

    if triggered == "btn-start":
        _sequence.start()
    elif triggered == "btn-reset":
        _sequence.reset()
    elif triggered == "tick-interval":
        if not _sequence.is_running:
            return (no_update,) * 3 + (True, False)
        _clock.advance(TICK_INTERVAL_MS)
    else:
        params = _layout_from_inputs(depth, well_spacing, row_spacing, rows, cols, delay)
        if params != _sequence.params or triggered is None:
            _sequence.regenerate(params)

    snap = _sequence.snapshot()
    running = snap.is_running
    return (
        _sequence_figure(snap),
        _metrics_panel(snap),
        _progress_bar(snap),
        not running,
        running,
    )


server = app.server

if __name__ == "__main__":
    configure_logging()
    port = int(os.environ.get("PORT", 7860))
    app.run(host="0.0.0.0", debug=False, port=port)
