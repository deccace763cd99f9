"""CLI entry point for building the temperature matrix site.

Reads TEMPMATRIX_* settings (see .env), then writes index.html and a PNG
snapshot into the site directory:
    uv run python src/tempmatrix/heatmap.py
Serve the result with:
    uv run python -m tempmatrix.server
"""

import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from tempmatrix.compute import TempMatrixError, load_heatmap  # noqa: E402
from tempmatrix.config import ConfigError, load_settings  # noqa: E402
from tempmatrix.renderers.static import save_static_chart  # noqa: E402
from tempmatrix.renderers.svg_2d import render_svg_html  # noqa: E402

logger = logging.getLogger(__name__)

LANG = "en"


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        settings = load_settings()
        heatmap = load_heatmap(
            settings.data_path,
            window_years=settings.window_years,
            policy=settings.malformed_policy,
        )
    except (ConfigError, TempMatrixError):
        # nothing is rendered on a failed load
        logger.exception("Could not build the temperature matrix")
        return 1

    settings.site_dir.mkdir(parents=True, exist_ok=True)
    index_path = settings.site_dir / "index.html"
    index_path.write_text(render_svg_html(heatmap, settings=settings, lang=LANG), encoding="utf-8")
    png_path = save_static_chart(
        heatmap, settings=settings, output_path=settings.site_dir / "temperature_matrix.png"
    )
    logger.info(f"Saved: {index_path}")
    logger.info(f"Saved: {png_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
