"""Matplotlib static PNG renderer."""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.colors import ListedColormap
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from tempmatrix.config import Settings
from tempmatrix.models import HeatmapData, ViewState
from tempmatrix.renderers.layout import build_layout

_ROOT = Path(__file__).parent.parent.parent.parent
_DPI = 100


def render_static_chart(
    heatmap: HeatmapData,
    view_state: ViewState | None = None,
    settings: Settings | None = None,
    lang: str = "en",
) -> Figure:
    """Render HeatmapData as a static matplotlib image.

    Draws the same layout as the SVG renderer, in pixel coordinates with the
    y axis flipped so January sits on top.

    Args:
        heatmap: Fully computed matrix and daily index.
        view_state: Display mode to colour by (default: maximum).
        settings: Supplies the legend domain policy.
        lang: Language code for labels.

    Returns:
        matplotlib Figure object.
    """
    layout = build_layout(heatmap, view_state, settings, lang)
    m = layout.margin

    fig = plt.figure(figsize=(layout.width / _DPI, layout.height / _DPI), dpi=_DPI)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.axis("off")

    for c in layout.cells:
        ax.add_patch(
            Rectangle((m.left + c.x, m.top + c.y), c.width, c.height, color=c.fill, linewidth=0)
        )

    segments = []
    dots: list[tuple[float, float]] = []
    for s in layout.sparklines:
        runs: list[list[tuple[float, float]]] = [[]]
        for p in s.points:
            if p is None:
                runs.append([])
                continue
            runs[-1].append((m.left + s.x + p[0], m.top + s.y + p[1]))
        for run in runs:
            if len(run) > 1:
                segments.append(run)
            elif run:
                dots.append(run[0])
    ax.add_collection(
        LineCollection(segments, colors=(0, 0, 0, 0.65), linewidths=1.2, gid="sparklines")
    )
    # runs of a single day have no length; draw them as dots
    if dots:
        ax.plot(
            [x for x, _ in dots],
            [y for _, y in dots],
            "o",
            ms=1.5,
            color=(0, 0, 0, 0.65),
            gid="sparkline-dots",
        )

    for lbl in layout.month_labels:
        ax.text(m.left + lbl.x, m.top + lbl.y, lbl.text, ha="right", va="center", fontsize=8)
    for lbl in layout.year_labels:
        ax.text(m.left + lbl.x, m.top + lbl.y, lbl.text, ha="center", va="bottom", fontsize=8)

    # legend: vertical gradient with the high end on top
    lg = layout.legend
    gradient_cmap = ListedColormap([color for _, color in lg.stops])
    gradient = np.linspace(1, 0, 256).reshape(-1, 1)
    ax.imshow(
        gradient,
        aspect="auto",
        cmap=gradient_cmap,
        extent=(lg.x, lg.x + lg.width, lg.y + lg.height, lg.y),
        interpolation="bilinear",
    )
    for y, label in lg.ticks:
        ax.plot([lg.x + lg.width, lg.x + lg.width + 6], [lg.y + y, lg.y + y], color="#333333", lw=0.8)
        ax.text(lg.x + lg.width + 9, lg.y + y, label, va="center", fontsize=7)

    ax.text(m.left, 14, layout.title, fontsize=10, fontweight="bold", va="center")
    # imshow autoscales to the legend extent; pin the pixel frame last
    ax.set_xlim(0, layout.width)
    ax.set_ylim(layout.height, 0)
    return fig


def save_static_chart(
    heatmap: HeatmapData,
    view_state: ViewState | None = None,
    settings: Settings | None = None,
    output_path: Path | None = None,
) -> Path:
    """Save HeatmapData as a PNG file.

    Args:
        heatmap: Fully computed matrix and daily index.
        view_state: Display mode to colour by.
        settings: Supplies the legend domain policy.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    view_state = view_state or ViewState()
    if output_path is None:
        stem = Path(heatmap.source).stem or "temperature"
        filename = f"{stem}__{heatmap.latest_year}_{view_state.mode.value}.png"
        output_path = _ROOT / "results" / filename

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_chart(heatmap, view_state, settings)
    fig.savefig(output_path, facecolor="white")
    plt.close(fig)
    return output_path
