"""Scene layout — turns HeatmapData + ViewState into drawable primitives.

Every renderer draws from the same MatrixLayout so position, colour, and
tooltip text agree across SVG, Plotly, and PNG output.

Coordinate system (pixels, SVG convention):
  origin at the top-left of the chart area (inside the margins),
  x grows right (years), y grows down (January at the top).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import matplotlib
from matplotlib.colors import Normalize, to_hex
from matplotlib.ticker import MaxNLocator

from tempmatrix.config import Settings
from tempmatrix.i18n import month_names, t
from tempmatrix.models import (
    DailyRecord,
    DisplayMode,
    HeatmapData,
    LegendDomain,
    MatrixCell,
    ViewState,
)

CANVAS_WIDTH = 1000
CANVAS_HEIGHT = 600
BAND_PADDING = 0.05
FIXED_DOMAIN = (0.0, 40.0)
LEGEND_STOPS = 10
LEGEND_WIDTH = 20
LEGEND_TICKS = 8
SPARK_INSET = 2
COLORMAP = "RdYlBu_r"  # cold = blue, hot = red
NAN_COLOR = "#cccccc"


@dataclass(frozen=True)
class Margin:
    top: int = 40
    right: int = 60
    bottom: int = 40
    left: int = 60


@dataclass(frozen=True)
class BandScale:
    """Ordinal → pixel band mapping with equal inner and outer padding."""

    domain: tuple
    start: float
    stop: float
    padding: float = BAND_PADDING

    @property
    def step(self) -> float:
        n = len(self.domain)
        return (self.stop - self.start) / max(1.0, n - self.padding + 2 * self.padding)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def __call__(self, value) -> float:
        n = len(self.domain)
        offset = (self.stop - self.start - self.step * (n - self.padding)) / 2
        return self.start + offset + self.step * self.domain.index(value)


@dataclass(frozen=True)
class ColorScale:
    """Sequential colour scale over a temperature domain, clamped at both ends."""

    lo: float
    hi: float
    cmap_name: str = COLORMAP

    def __call__(self, value: float) -> str:
        if value is None or math.isnan(value):
            return NAN_COLOR
        norm = Normalize(vmin=self.lo, vmax=self.hi, clip=True)
        return to_hex(matplotlib.colormaps[self.cmap_name](norm(value)))


@dataclass(frozen=True)
class CellShape:
    year: int
    month: int
    x: float
    y: float
    width: float
    height: float
    fill: str  # colour for the current mode
    fill_max: str
    fill_min: str
    title: str  # "Jan 2020"
    lines: tuple[str, ...]  # Max / Min / Avg lines


@dataclass(frozen=True)
class Sparkline:
    year: int
    month: int
    x: float  # band origin
    y: float
    path: str  # SVG path data in band-local coordinates
    points: tuple[tuple[float, float] | None, ...]  # None breaks the line


@dataclass(frozen=True)
class AxisLabel:
    text: str
    x: float
    y: float


@dataclass(frozen=True)
class LegendSpec:
    x: float  # relative to the canvas
    y: float
    width: float
    height: float
    domain: tuple[float, float]
    stops: tuple[tuple[float, str], ...]  # (offset 0..1 bottom→top, colour)
    ticks: tuple[tuple[float, str], ...]  # (y within legend, label)


@dataclass(frozen=True)
class MatrixLayout:
    """Everything a renderer needs. Fully computed, no further lookups required."""

    width: int
    height: int
    margin: Margin
    mode: DisplayMode
    color_scale: ColorScale
    cells: tuple[CellShape, ...]
    sparklines: tuple[Sparkline, ...]
    month_labels: tuple[AxisLabel, ...]
    year_labels: tuple[AxisLabel, ...]
    legend: LegendSpec
    title: str

    @property
    def inner_width(self) -> float:
        return self.width - self.margin.left - self.margin.right

    @property
    def inner_height(self) -> float:
        return self.height - self.margin.top - self.margin.bottom


def color_domain(heatmap: HeatmapData, policy: LegendDomain) -> tuple[float, float]:
    """Resolve the colour/legend domain.

    DATA uses the extent of the cells' mean temperature and falls back to the
    fixed [0, 40] range when that extent is missing or zero-width.
    """
    if policy is LegendDomain.DATA:
        extent = heatmap.mean_extent()
        if extent is not None and extent[1] > extent[0]:
            return extent
    return FIXED_DOMAIN


def legend_stops(scale: ColorScale, steps: int = LEGEND_STOPS) -> tuple[tuple[float, str], ...]:
    """Evenly spaced gradient stops from the low end (offset 0) to the high end (offset 1)."""
    return tuple(
        (i / (steps - 1), scale(scale.lo + i * (scale.hi - scale.lo) / (steps - 1)))
        for i in range(steps)
    )


def legend_ticks(
    lo: float, hi: float, length: float, count: int = LEGEND_TICKS
) -> tuple[tuple[float, str], ...]:
    """Nice tick values inside [lo, hi], mapped onto a vertical axis of `length` px."""
    values = MaxNLocator(nbins=count).tick_values(lo, hi)
    eps = (hi - lo) * 1e-9
    ticks = []
    for v in values:
        if v < lo - eps or v > hi + eps:
            continue
        y = length - (v - lo) / (hi - lo) * length
        ticks.append((y, f"{float(v):g}°C"))
    return tuple(ticks)


def format_temp(value: float) -> str:
    if value is None or math.isnan(value):
        return "n/a"
    return f"{value:.1f}°C"


def tooltip_lines(cell: MatrixCell, lang: str = "en") -> tuple[str, tuple[str, ...]]:
    """Tooltip title and body lines for one cell, one decimal place."""
    title = f"{month_names(lang)[cell.month]} {cell.year}"
    lines = (
        f"{t('tooltip_max', lang)}: {format_temp(cell.max_of_max)}",
        f"{t('tooltip_min', lang)}: {format_temp(cell.min_of_min)}",
        f"{t('tooltip_avg', lang)}: {format_temp(cell.mean_of_means)}",
    )
    return title, lines


def sparkline_points(
    days: tuple[DailyRecord, ...],
    band_width: float,
    band_height: float,
    domain: tuple[float, float] = FIXED_DOMAIN,
) -> tuple[tuple[float, float] | None, ...]:
    """Band-local points for the daily mean temperature trace.

    x spans [inset, width - inset] by day index; y maps the domain onto
    [height - inset, inset] without clamping. nan days become None.
    build_layout always passes the fixed [0, 40] range, independent of the
    legend domain.
    """
    n = len(days)
    x0, x1 = SPARK_INSET, band_width - SPARK_INSET
    y0, y1 = band_height - SPARK_INSET, SPARK_INSET
    lo, hi = domain
    points: list[tuple[float, float] | None] = []
    for i, day in enumerate(days):
        value = day.mean_temperature
        if math.isnan(value):
            points.append(None)
            continue
        # a single day has no span; centre it like a degenerate linear scale does
        fx = i / (n - 1) if n > 1 else 0.5
        fy = (value - lo) / (hi - lo)
        points.append((x0 + fx * (x1 - x0), y0 + fy * (y1 - y0)))
    return tuple(points)


def sparkline_path(points: tuple[tuple[float, float] | None, ...]) -> str:
    """SVG path data; each run of defined points becomes its own subpath."""
    parts: list[str] = []
    pen_down = False
    for p in points:
        if p is None:
            pen_down = False
            continue
        cmd = "L" if pen_down else "M"
        parts.append(f"{cmd}{p[0]:.2f},{p[1]:.2f}")
        pen_down = True
    # zero-length subpath so a lone point still shows with round caps
    if len(parts) == 1:
        parts.append("l0,0")
    return "".join(parts)


def build_layout(
    heatmap: HeatmapData,
    view_state: ViewState | None = None,
    settings: Settings | None = None,
    lang: str = "en",
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
) -> MatrixLayout:
    """Compute the full set of visual primitives for one render.

    Args:
        heatmap: Fully computed matrix and daily index.
        view_state: Current display mode (default: maximum).
        settings: Supplies the legend domain policy (default settings if None).
        lang: Language code for month names and tooltip labels.
        width: Canvas width in pixels.
        height: Canvas height in pixels.

    Returns:
        MatrixLayout with one CellShape per MatrixCell, in cell order.
    """
    view_state = view_state or ViewState()
    settings = settings or Settings()
    margin = Margin()
    inner_w = width - margin.left - margin.right
    inner_h = height - margin.top - margin.bottom

    years = heatmap.years
    x_scale = BandScale(domain=years, start=0, stop=inner_w)
    y_scale = BandScale(domain=tuple(range(12)), start=0, stop=inner_h)

    lo, hi = color_domain(heatmap, settings.legend_domain)
    scale = ColorScale(lo, hi)

    cells: list[CellShape] = []
    sparks: list[Sparkline] = []
    for cell in heatmap.cells:
        x, y = x_scale(cell.year), y_scale(cell.month)
        fill_max = scale(cell.value(DisplayMode.MAX))
        fill_min = scale(cell.value(DisplayMode.MIN))
        title, lines = tooltip_lines(cell, lang)
        cells.append(
            CellShape(
                year=cell.year,
                month=cell.month,
                x=x,
                y=y,
                width=x_scale.bandwidth,
                height=y_scale.bandwidth,
                fill=fill_max if view_state.mode is DisplayMode.MAX else fill_min,
                fill_max=fill_max,
                fill_min=fill_min,
                title=title,
                lines=lines,
            )
        )

        days = heatmap.daily.get(cell.year, cell.month)
        if not days:
            continue
        points = sparkline_points(days, x_scale.bandwidth, y_scale.bandwidth, FIXED_DOMAIN)
        sparks.append(
            Sparkline(
                year=cell.year,
                month=cell.month,
                x=x,
                y=y,
                path=sparkline_path(points),
                points=points,
            )
        )

    names = month_names(lang)
    month_labels = tuple(
        AxisLabel(text=names[m], x=-10, y=y_scale(m) + y_scale.bandwidth / 2)
        for m in range(12)
    )
    year_labels = tuple(
        AxisLabel(text=str(yr), x=x_scale(yr) + x_scale.bandwidth / 2, y=-10)
        for yr in years
    )

    legend = LegendSpec(
        x=inner_w + margin.left + 20,
        y=margin.top,
        width=LEGEND_WIDTH,
        height=inner_h,
        domain=(lo, hi),
        stops=legend_stops(scale),
        ticks=legend_ticks(lo, hi, inner_h),
    )

    mode_key = "mode_max" if view_state.mode is DisplayMode.MAX else "mode_min"
    title = t(mode_key, lang)
    if heatmap.source:
        title = f"{title} · {heatmap.source}"

    return MatrixLayout(
        width=width,
        height=height,
        margin=margin,
        mode=view_state.mode,
        color_scale=scale,
        cells=tuple(cells),
        sparklines=tuple(sparks),
        month_labels=month_labels,
        year_labels=year_labels,
        legend=legend,
        title=title,
    )
