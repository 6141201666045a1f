"""Tests for layout bounds and summary metrics."""

from __future__ import annotations

import pytest

from blast_sequence.core.layout import (
    LayoutError,
    LayoutParameters,
    clamp_layout,
    summarize,
    validate_layout,
)


class TestBounds:
    def test_defaults_are_valid(self):
        params = LayoutParameters()
        assert validate_layout(params) is params

    def test_validate_reports_every_violation(self):
        params = LayoutParameters(depth=40, rows=0, inter_well_delay=5)
        with pytest.raises(LayoutError) as exc:
            validate_layout(params)
        assert set(exc.value.violations) == {"depth", "rows", "inter_well_delay"}

    def test_layout_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_layout(LayoutParameters(well_spacing=1))

    def test_bounds_inclusive(self):
        validate_layout(LayoutParameters(
            depth=5, well_spacing=10, row_spacing=2, rows=1, cols=10, inter_well_delay=100,
        ))

    def test_clamp(self):
        clamped = clamp_layout(LayoutParameters(rows=0, cols=15, inter_well_delay=5))
        assert (clamped.rows, clamped.cols, clamped.inter_well_delay) == (1, 10, 10)
        validate_layout(clamped)

    def test_clamp_keeps_valid_params(self):
        params = LayoutParameters(rows=3)
        assert clamp_layout(params) is params


class TestSummary:
    def test_example_metrics(self):
        m = summarize(LayoutParameters(depth=12, rows=4, cols=5, inter_well_delay=25))
        assert m.total_wells == 20
        assert m.total_explosive_mass == pytest.approx(192.0)
        assert m.total_sequence_duration == 475
        assert m.total_sequence_duration_s == pytest.approx(0.475)

    def test_coverage_area(self):
        m = summarize(LayoutParameters(rows=4, cols=5, well_spacing=5, row_spacing=6))
        assert m.coverage_area == 3 * 6 * 4 * 5

    def test_single_well(self):
        m = summarize(LayoutParameters(rows=1, cols=1))
        assert m.total_sequence_duration == 0
        assert m.coverage_area == 0

    def test_empty_grid_duration_not_negative(self):
        m = summarize(LayoutParameters(rows=0, cols=4))
        assert m.total_wells == 0
        assert m.total_sequence_duration == 0
        assert m.total_explosive_mass == 0
