"""SVG interactive temperature matrix renderer.

Produces a self-contained HTML string (SVG + JS) that works both as a
standalone page served by tempmatrix.server and embedded via
st.components.v1.html().

Interaction:
  hover a cell   → tooltip with month, year, max, min, avg
  move           → tooltip follows the cursor (+10, -28 px)
  leave          → tooltip hidden
  click anywhere → toggle max/min colouring with a 400 ms transition
"""

from __future__ import annotations

import html
import json

from tempmatrix.config import Settings
from tempmatrix.i18n import t
from tempmatrix.models import HeatmapData, ViewState
from tempmatrix.renderers.layout import MatrixLayout, build_layout

_BG = "#ffffff"
_TEXT_COLOR = "#333333"
_SPARK_COLOR = "rgba(0,0,0,0.65)"
_TRANSITION_MS = 400


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _cells_svg(layout: MatrixLayout) -> str:
    parts: list[str] = []
    for c in layout.cells:
        parts.append(
            f'<rect class="cell" x="{c.x:.2f}" y="{c.y:.2f}"'
            f' width="{c.width:.2f}" height="{c.height:.2f}" fill="{c.fill}"'
            f' data-fill-max="{c.fill_max}" data-fill-min="{c.fill_min}"'
            f' data-title="{_attr(c.title)}" data-lines="{_attr(json.dumps(c.lines, ensure_ascii=False))}"/>'
        )
    return "\n      ".join(parts)


def _sparklines_svg(layout: MatrixLayout) -> str:
    parts = [
        f'<path transform="translate({s.x:.2f},{s.y:.2f})" d="{s.path}"/>'
        for s in layout.sparklines
    ]
    return "\n        ".join(parts)


def _labels_svg(layout: MatrixLayout) -> str:
    parts: list[str] = []
    for lbl in layout.month_labels:
        parts.append(
            f'<text class="month-label" x="{lbl.x:.2f}" y="{lbl.y:.2f}"'
            f' text-anchor="end" dominant-baseline="middle">{_attr(lbl.text)}</text>'
        )
    for lbl in layout.year_labels:
        parts.append(
            f'<text class="year-label" x="{lbl.x:.2f}" y="{lbl.y:.2f}"'
            f' text-anchor="middle">{_attr(lbl.text)}</text>'
        )
    return "\n      ".join(parts)


def _legend_svg(layout: MatrixLayout) -> tuple[str, str]:
    """Return (gradient defs, legend group)."""
    lg = layout.legend
    # gradient runs bottom (low) → top (high)
    stops = "\n      ".join(
        f'<stop offset="{offset * 100:.1f}%" stop-color="{color}"/>'
        for offset, color in lg.stops
    )
    defs = (
        '<linearGradient id="legend-gradient" x1="0%" y1="100%" x2="0%" y2="0%">\n'
        f"      {stops}\n    </linearGradient>"
    )
    ticks = "\n      ".join(
        f'<g transform="translate({lg.width},{y:.2f})">'
        f'<line x2="6" stroke="{_TEXT_COLOR}"/>'
        f'<text x="9" dy="0.32em">{_attr(label)}</text></g>'
        for y, label in lg.ticks
    )
    group = (
        f'<g class="legend" transform="translate({lg.x:.2f},{lg.y:.2f})">\n'
        f'      <rect width="{lg.width}" height="{lg.height:.2f}" fill="url(#legend-gradient)"/>\n'
        f'      <line x1="{lg.width}" x2="{lg.width}" y2="{lg.height:.2f}" stroke="{_TEXT_COLOR}"/>\n'
        f"      {ticks}\n    </g>"
    )
    return defs, group


def render_svg_html(
    heatmap: HeatmapData,
    view_state: ViewState | None = None,
    settings: Settings | None = None,
    lang: str = "en",
) -> str:
    """Return a self-contained HTML page with the temperature matrix.

    Cells carry both colourings as data attributes, so the click toggle only
    swaps fills in the browser; nothing is recomputed.

    Args:
        heatmap: Fully computed matrix and daily index.
        view_state: Initial display mode (default: maximum).
        settings: Supplies the legend domain policy.
        lang: Language code ('ko' or 'en') for labels and tooltips.

    Returns:
        HTML string suitable for writing to index.html or st.components.v1.html().
    """
    view_state = view_state or ViewState()
    layout = build_layout(heatmap, view_state, settings, lang)
    m = layout.margin

    defs_svg, legend_svg = _legend_svg(layout)
    mode_labels = json.dumps(
        {"max": t("mode_max", lang), "min": t("mode_min", lang)}, ensure_ascii=False
    )
    initial_mode = view_state.mode.value
    mode_text = t(f"mode_{initial_mode}", lang)
    source = f" · {_attr(heatmap.source)}" if heatmap.source else ""

    return f"""<!DOCTYPE html>
<html lang="{_attr(lang)}">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{_attr(t("page_title", lang))}</title>
<style>
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
body {{
    background: {_BG};
    color: {_TEXT_COLOR};
    font-family: -apple-system, 'Segoe UI', 'Apple SD Gothic Neo', 'Malgun Gothic', sans-serif;
    font-size: 12px;
    padding: 1rem;
}}
h1 {{ font-size: 1rem; font-weight: 600; margin-bottom: 0.25rem; }}
p.hint {{ color: #888888; margin-bottom: 0.5rem; }}
svg#matrix-chart {{ cursor: pointer; display: block; }}
rect.cell {{ transition: fill {_TRANSITION_MS}ms ease; }}
g.sparklines path {{
    fill: none;
    stroke: {_SPARK_COLOR};
    stroke-width: 1.5;
    stroke-linecap: round;
    pointer-events: none;
}}
text {{ fill: {_TEXT_COLOR}; }}
#tooltip {{
    position: absolute;
    background: rgba(255,255,255,0.95);
    border: 1px solid #999999;
    border-radius: 4px;
    padding: 0.4rem 0.6rem;
    pointer-events: none;
    line-height: 1.5;
    box-shadow: 0 2px 6px rgba(0,0,0,0.15);
}}
#tooltip.hidden {{ display: none; }}
</style>
</head>
<body>
<h1><span id="mode-label">{_attr(mode_text)}</span>{source}</h1>
<p class="hint">{_attr(t("hint_toggle", lang))}</p>
<svg id="matrix-chart" width="{layout.width}" height="{layout.height}"
     xmlns="http://www.w3.org/2000/svg" data-mode="{initial_mode}">
  <defs>
    {defs_svg}
  </defs>
  <g id="chart" transform="translate({m.left},{m.top})">
    <g class="cells">
      {_cells_svg(layout)}
    </g>
    <g class="sparklines">
        {_sparklines_svg(layout)}
    </g>
    <g class="labels">
      {_labels_svg(layout)}
    </g>
  </g>
  {legend_svg}
</svg>
<div id="tooltip" class="hidden"></div>
<script>
(function() {{
  var MODE_LABELS = {mode_labels};
  var svg = document.getElementById('matrix-chart');
  var tooltip = document.getElementById('tooltip');
  var modeLabel = document.getElementById('mode-label');
  var cells = svg.querySelectorAll('rect.cell');
  var mode = svg.getAttribute('data-mode');

  function escapeHtml(s) {{
    return s.replace(/&/g, '&amp;').replace(/</g, '&lt;').replace(/>/g, '&gt;');
  }}

  // ── tooltip ──────────────────────────────────────────────────
  cells.forEach(function(cell) {{
    cell.addEventListener('mouseover', function() {{
      var lines = JSON.parse(cell.getAttribute('data-lines'));
      tooltip.innerHTML = '<strong>' + escapeHtml(cell.getAttribute('data-title')) + '</strong><br>' +
        lines.map(escapeHtml).join('<br>');
      tooltip.classList.remove('hidden');
    }});
    cell.addEventListener('mousemove', function(e) {{
      tooltip.style.left = (e.pageX + 10) + 'px';
      tooltip.style.top = (e.pageY - 28) + 'px';
    }});
    cell.addEventListener('mouseout', function() {{
      tooltip.classList.add('hidden');
    }});
  }});

  // ── max/min toggle ───────────────────────────────────────────
  // Only fills change; the CSS transition animates them.
  svg.addEventListener('click', function() {{
    mode = mode === 'max' ? 'min' : 'max';
    svg.setAttribute('data-mode', mode);
    cells.forEach(function(cell) {{
      var fill = cell.getAttribute('data-fill-' + mode);
      cell.setAttribute('fill', fill);
      cell.style.fill = fill;
    }});
    modeLabel.textContent = MODE_LABELS[mode];
  }});
}})();
</script>
</body>
</html>"""
