import math

import pytest
from matplotlib.colors import to_rgb

from conftest import make_rows
from tempmatrix.compute import parse_rows
from tempmatrix.config import Settings
from tempmatrix.models import DailyIndex, DisplayMode, HeatmapData, LegendDomain, MatrixCell, ViewState
from tempmatrix.renderers.layout import (
    FIXED_DOMAIN,
    NAN_COLOR,
    BandScale,
    ColorScale,
    build_layout,
    color_domain,
    format_temp,
    legend_stops,
    legend_ticks,
    sparkline_path,
    sparkline_points,
    tooltip_lines,
)


class TestBandScale:
    def test_outer_padding_matches_inner(self):
        scale = BandScale(domain=tuple(range(2015, 2025)), start=0, stop=880)

        step = 880 / 10.05
        assert scale.step == pytest.approx(step)
        assert scale.bandwidth == pytest.approx(step * 0.95)
        assert scale(2015) == pytest.approx(step * 0.05)
        assert scale(2024) + scale.bandwidth + step * 0.05 == pytest.approx(880)

    def test_bands_do_not_overlap(self):
        scale = BandScale(domain=tuple(range(12)), start=0, stop=520)

        for m in range(11):
            assert scale(m) + scale.bandwidth < scale(m + 1)


class TestColorScale:
    def test_hot_is_red_cold_is_blue(self):
        scale = ColorScale(0, 40)

        hot, cold = to_rgb(scale(40)), to_rgb(scale(0))

        assert hot[0] > hot[2]
        assert cold[2] > cold[0]

    def test_clamped_outside_domain(self):
        scale = ColorScale(0, 40)

        assert scale(-15) == scale(0)
        assert scale(55) == scale(40)

    def test_nan_is_grey(self):
        assert ColorScale(0, 40)(math.nan) == NAN_COLOR


class TestColorDomain:
    def _heatmap(self, *means):
        cells = tuple(MatrixCell(2020, i, v, v + 5, v - 5, 1) for i, v in enumerate(means))
        return HeatmapData(cells=cells, daily=DailyIndex(), latest_year=2020, window_years=10)

    def test_fixed(self):
        assert color_domain(self._heatmap(3.0, 9.0), LegendDomain.FIXED) == FIXED_DOMAIN

    def test_data_extent(self):
        assert color_domain(self._heatmap(3.0, 9.0, math.nan), LegendDomain.DATA) == (3.0, 9.0)

    def test_data_falls_back_when_degenerate(self):
        assert color_domain(self._heatmap(4.0, 4.0), LegendDomain.DATA) == FIXED_DOMAIN
        assert color_domain(self._heatmap(math.nan), LegendDomain.DATA) == FIXED_DOMAIN


def test_legend_stops_span_domain():
    scale = ColorScale(0, 40)

    stops = legend_stops(scale)

    assert len(stops) == 10
    assert stops[0] == (0.0, scale(0))
    assert stops[-1] == (1.0, scale(40))


def test_legend_ticks_fixed_domain():
    ticks = legend_ticks(0, 40, 520)

    labels = [label for _, label in ticks]
    assert "0°C" in labels
    assert "20°C" in labels
    assert "40°C" in labels
    assert ticks[0] == (520, "0°C")
    assert ticks[-1] == (0, "40°C")
    ys = [y for y, _ in ticks]
    assert ys == sorted(ys, reverse=True)


def test_format_temp():
    assert format_temp(12) == "12.0°C"
    assert format_temp(-2.25) == "-2.2°C"
    assert format_temp(math.nan) == "n/a"


def test_tooltip_lines():
    cell = MatrixCell(2020, 0, 5.0, 12.0, -2.0, 3)

    assert tooltip_lines(cell) == ("Jan 2020", ("Max: 12.0°C", "Min: -2.0°C", "Avg: 5.0°C"))
    title, lines = tooltip_lines(cell, "ko")
    assert title == "1월 2020"
    assert lines[0] == "최고: 12.0°C"


class TestSparkline:
    def test_points_span_band(self):
        days = tuple(parse_rows(make_rows(
            ("2020-01-01", "40", "40"),
            ("2020-01-02", "20", "20"),
            ("2020-01-03", "0", "0"),
        )))

        points = sparkline_points(days, 50, 30, (0, 40))

        assert points == ((2, 2), (25, 15), (48, 28))

    def test_values_are_not_clamped(self):
        days = tuple(parse_rows(make_rows(("2020-01-01", "50", "50"), ("2020-01-02", "0", "0"))))

        points = sparkline_points(days, 50, 30, (0, 40))

        assert points[0][1] < 2

    def test_single_day_is_centred(self):
        days = tuple(parse_rows(make_rows(("2020-01-01", "20", "20"))))

        (point,) = sparkline_points(days, 50, 30, (0, 40))

        assert point == (25, 15)

    def test_nan_breaks_the_line(self):
        days = tuple(parse_rows(make_rows(
            ("2020-01-01", "10", "10"),
            ("2020-01-02", "x", "10"),
            ("2020-01-03", "10", "10"),
            ("2020-01-04", "10", "10"),
        )))

        points = sparkline_points(days, 50, 30, (0, 40))
        path = sparkline_path(points)

        assert points[1] is None
        assert path.count("M") == 2
        assert path.count("L") == 1

    def test_lone_point_path(self):
        assert sparkline_path(((3.0, 4.0),)) == "M3.00,4.00l0,0"
        assert sparkline_path((None,)) == ""


class TestBuildLayout:
    def test_one_shape_per_cell(self, two_year_heatmap):
        layout = build_layout(two_year_heatmap)

        assert len(layout.cells) == len(two_year_heatmap.cells)
        assert len(layout.sparklines) == len(two_year_heatmap.cells)
        assert [lbl.text for lbl in layout.year_labels] == ["2020", "2021"]
        assert len(layout.month_labels) == 12
        assert (layout.width, layout.height) == (1000, 600)

    def test_fill_follows_mode(self, two_year_heatmap):
        max_layout = build_layout(two_year_heatmap, ViewState(DisplayMode.MAX))
        min_layout = build_layout(two_year_heatmap, ViewState(DisplayMode.MIN))

        assert all(c.fill == c.fill_max for c in max_layout.cells)
        assert all(c.fill == c.fill_min for c in min_layout.cells)
        assert [c.fill_max for c in max_layout.cells] == [c.fill_max for c in min_layout.cells]

    def test_cells_stay_inside_chart_area(self, two_year_heatmap):
        layout = build_layout(two_year_heatmap)

        for c in layout.cells:
            assert 0 <= c.x and c.x + c.width <= layout.inner_width
            assert 0 <= c.y and c.y + c.height <= layout.inner_height

    def test_data_legend_domain(self, two_year_heatmap):
        layout = build_layout(two_year_heatmap, settings=Settings(legend_domain=LegendDomain.DATA))

        assert layout.legend.domain == two_year_heatmap.mean_extent()
        assert layout.color_scale.lo == layout.legend.domain[0]

    def test_title_names_mode_and_source(self, two_year_heatmap):
        layout = build_layout(two_year_heatmap, ViewState(DisplayMode.MIN))

        assert layout.title == "Minimum temperature · two_years.csv"

    def test_sparklines_ignore_legend_domain(self, two_year_heatmap):
        fixed = build_layout(two_year_heatmap, settings=Settings(legend_domain=LegendDomain.FIXED))
        data = build_layout(two_year_heatmap, settings=Settings(legend_domain=LegendDomain.DATA))

        assert data.legend.domain != fixed.legend.domain
        assert [s.path for s in data.sparklines] == [s.path for s in fixed.sparklines]
