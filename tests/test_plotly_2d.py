import math

import plotly.graph_objects as go

from conftest import make_rows
from tempmatrix.compute import run
from tempmatrix.config import Settings
from tempmatrix.models import DisplayMode, LegendDomain, ViewState
from tempmatrix.renderers.plotly_2d import render_plotly_chart


def test_figure_traces(two_year_heatmap):
    fig = render_plotly_chart(two_year_heatmap)

    assert isinstance(fig, go.Figure)
    heat, spark = fig.data
    assert heat.type == "heatmap"
    assert spark.type == "scatter"
    assert (heat.zmin, heat.zmax) == (0.0, 40.0)
    assert list(fig.layout.xaxis.ticktext) == ["2020", "2021"]
    assert fig.layout.yaxis.ticktext[0] == "Jan"


def test_z_follows_mode(january_2020_rows):
    heatmap = run(january_2020_rows)

    fig_max = render_plotly_chart(heatmap)
    fig_min = render_plotly_chart(heatmap, ViewState(DisplayMode.MIN))

    assert fig_max.data[0].z[0][0] == 12
    assert fig_min.data[0].z[0][0] == -2
    assert fig_max.data[0].z[1][0] is None


def test_toggle_buttons_swap_z(january_2020_rows):
    fig = render_plotly_chart(run(january_2020_rows))

    max_button, min_button = fig.layout.updatemenus[0].buttons
    assert max_button.args[0]["z"][0][0][0] == 12
    assert min_button.args[0]["z"][0][0][0] == -2
    assert min_button.args[1]["title.text"] == "Minimum temperature"
    assert fig.layout.transition.duration == 400


def test_nan_cells_are_gaps():
    heatmap = run(make_rows(("2020-01-01", "?", "0"), ("2020-02-01", "5", "0")))

    fig = render_plotly_chart(heatmap)

    assert fig.data[0].z[0][0] is None
    assert fig.data[0].z[1][0] == 5


def test_hover_text(january_2020_rows):
    fig = render_plotly_chart(run(january_2020_rows))

    assert fig.data[0].text[0][0] == "<b>Jan 2020</b><br>Max: 12.0°C<br>Min: -2.0°C<br>Avg: 5.0°C"


def test_sparkline_segments_are_separated(two_year_heatmap):
    fig = render_plotly_chart(two_year_heatmap)

    xs = fig.data[1].x
    assert xs[-1] is None
    assert sum(1 for x in xs if x is None) == len(two_year_heatmap.cells)
    assert all(not math.isnan(x) for x in xs if x is not None)


def test_sparklines_ignore_legend_domain(two_year_heatmap):
    fixed = render_plotly_chart(two_year_heatmap, settings=Settings(legend_domain=LegendDomain.FIXED))
    data = render_plotly_chart(two_year_heatmap, settings=Settings(legend_domain=LegendDomain.DATA))

    assert data.data[0].zmax != fixed.data[0].zmax
    assert data.data[1].y == fixed.data[1].y
