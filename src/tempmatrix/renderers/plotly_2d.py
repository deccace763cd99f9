"""Plotly interactive temperature matrix renderer.

Cells are a single Heatmap trace on numeric axes (x = year index, y = month
index, reversed so January is on top). Sparklines are overlaid as one
Scatter trace using None separators. Two update-menu buttons swap the
heatmap's z values between the max and min statistics.
"""

import math

import plotly.graph_objects as go

from tempmatrix.config import Settings
from tempmatrix.i18n import month_names, t
from tempmatrix.models import DisplayMode, HeatmapData, ViewState
from tempmatrix.renderers.layout import FIXED_DOMAIN, color_domain, tooltip_lines

_BG = "#ffffff"
_SPARK_COLOR = "rgba(0,0,0,0.65)"
_CELL_SPAN = 0.9  # fraction of a category occupied by the sparkline


def _z_matrix(
    heatmap: HeatmapData, years: tuple[int, ...], mode: DisplayMode
) -> list[list[float | None]]:
    col = {y: i for i, y in enumerate(years)}
    z: list[list[float | None]] = [[None] * len(years) for _ in range(12)]
    for cell in heatmap.cells:
        v = cell.value(mode)
        z[cell.month][col[cell.year]] = None if math.isnan(v) else v
    return z


def render_plotly_chart(
    heatmap: HeatmapData,
    view_state: ViewState | None = None,
    settings: Settings | None = None,
    lang: str = "en",
) -> go.Figure:
    """Render HeatmapData as a Plotly heatmap with sparklines and a max/min toggle.

    Args:
        heatmap: Fully computed matrix and daily index.
        view_state: Initial display mode (default: maximum).
        settings: Supplies the legend domain policy.
        lang: Language code for axis labels and hover text.

    Returns:
        Plotly Figure object.
    """
    view_state = view_state or ViewState()
    settings = settings or Settings()
    years = heatmap.years
    lo, hi = color_domain(heatmap, settings.legend_domain)
    col = {y: i for i, y in enumerate(years)}

    hover: list[list[str]] = [[""] * len(years) for _ in range(12)]
    for cell in heatmap.cells:
        title, lines = tooltip_lines(cell, lang)
        hover[cell.month][col[cell.year]] = f"<b>{title}</b><br>" + "<br>".join(lines)

    z_max = _z_matrix(heatmap, years, DisplayMode.MAX)
    z_min = _z_matrix(heatmap, years, DisplayMode.MIN)

    cells_trace = go.Heatmap(
        x=list(range(len(years))),
        y=list(range(12)),
        z=z_max if view_state.mode is DisplayMode.MAX else z_min,
        text=hover,
        hoverinfo="text",
        colorscale="RdYlBu",
        reversescale=True,
        zmin=lo,
        zmax=hi,
        xgap=2,
        ygap=2,
        colorbar=dict(
            ticksuffix="°C",
            nticks=8,
            thickness=20,
        ),
        name="cells",
    )

    # Sparklines: single trace, each cell scaled into its own category box
    sx: list[float | None] = []
    sy: list[float | None] = []
    half = _CELL_SPAN / 2
    spark_lo, spark_hi = FIXED_DOMAIN
    for cell in heatmap.cells:
        days = heatmap.daily.get(cell.year, cell.month)
        if not days:
            continue
        n = len(days)
        cx = col[cell.year]
        for i, day in enumerate(days):
            v = day.mean_temperature
            if math.isnan(v):
                sx.append(None)
                sy.append(None)
                continue
            fx = i / (n - 1) if n > 1 else 0.5
            fy = (v - spark_lo) / (spark_hi - spark_lo)
            sx.append(cx - half + fx * _CELL_SPAN)
            # reversed y axis: larger values sit higher, i.e. at smaller y
            sy.append(cell.month + half - fy * _CELL_SPAN)
        sx.append(None)
        sy.append(None)

    spark_trace = go.Scatter(
        x=sx,
        y=sy,
        mode="lines",
        line=dict(color=_SPARK_COLOR, width=1.5),
        hoverinfo="skip",
        connectgaps=False,
        name="sparklines",
    )

    fig = go.Figure(data=[cells_trace, spark_trace])

    title_text = {
        DisplayMode.MAX: t("mode_max", lang),
        DisplayMode.MIN: t("mode_min", lang),
    }
    suffix = f" · {heatmap.source}" if heatmap.source else ""

    fig.update_layout(
        paper_bgcolor=_BG,
        plot_bgcolor=_BG,
        showlegend=False,
        width=1000,
        height=600,
        margin=dict(l=60, r=60, t=80, b=40),
        title=dict(text=title_text[view_state.mode] + suffix, x=0.01),
        xaxis=dict(
            tickmode="array",
            tickvals=list(range(len(years))),
            ticktext=[str(y) for y in years],
            side="top",
            showgrid=False,
            zeroline=False,
        ),
        yaxis=dict(
            tickmode="array",
            tickvals=list(range(12)),
            ticktext=list(month_names(lang)),
            autorange="reversed",
            showgrid=False,
            zeroline=False,
        ),
        updatemenus=[
            dict(
                type="buttons",
                direction="left",
                x=1.0,
                xanchor="right",
                y=1.12,
                yanchor="bottom",
                active=0 if view_state.mode is DisplayMode.MAX else 1,
                buttons=[
                    dict(
                        label=title_text[DisplayMode.MAX],
                        method="update",
                        args=[
                            {"z": [z_max]},
                            {"title.text": title_text[DisplayMode.MAX] + suffix},
                            [0],
                        ],
                    ),
                    dict(
                        label=title_text[DisplayMode.MIN],
                        method="update",
                        args=[
                            {"z": [z_min]},
                            {"title.text": title_text[DisplayMode.MIN] + suffix},
                            [0],
                        ],
                    ),
                ],
            )
        ],
        transition=dict(duration=400),
    )

    return fig
