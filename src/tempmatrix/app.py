"""Temperature Matrix — Streamlit app for the monthly temperature heatmap."""

import dataclasses
import html
import logging

import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv
from streamlit_js_eval import streamlit_js_eval

load_dotenv()

from tempmatrix.compute import TempMatrixError, load_heatmap  # noqa: E402
from tempmatrix.config import ConfigError, Settings, load_settings  # noqa: E402
from tempmatrix.i18n import t  # noqa: E402
from tempmatrix.models import DisplayMode, LegendDomain, ViewState  # noqa: E402
from tempmatrix.renderers.plotly_2d import render_plotly_chart  # noqa: E402
from tempmatrix.renderers.svg_2d import render_svg_html  # noqa: E402

logger = logging.getLogger(__name__)

# --- UI language from the browser ---
# streamlit_js_eval returns None until its own rerun delivers navigator.language.
if "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ko" if _browser_lang.lower().startswith("ko") else "en"

_lang: str = st.session_state.get("lang", "en")

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="🌡️",
    layout="wide",
)

# --- Session state initialization ---

if "settings" not in st.session_state:
    try:
        st.session_state.settings = load_settings()
    except ConfigError as e:
        logger.warning(f"Ignoring invalid environment settings: {e}")
        st.session_state.settings = Settings()
if "heatmap" not in st.session_state:
    st.session_state.heatmap = None
if "view_state" not in st.session_state:
    st.session_state.view_state = ViewState()
if "error_msg" not in st.session_state:
    st.session_state.error_msg = None

st.markdown(
    """
    <style>
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    [data-testid="stMainBlockContainer"] {
        padding-top: 1.5rem !important;
    }
    label, [data-testid="stWidgetLabel"] p {
        color: #666666 !important;
        font-size: 0.85rem !important;
    }
    .error-box {
        border: 1px solid #ff6b6b;
        color: #cc3333;
        border-radius: 6px;
        padding: 0.8rem 1.2rem;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

_settings: Settings = st.session_state.settings

# --- Input panel ---
with st.sidebar:
    st.header(t("page_title", _lang))
    uploaded = st.file_uploader(t("label_upload", _lang), type=["csv"])
    data_path = st.text_input(t("label_source", _lang), value=str(_settings.data_path))
    domain_choice = st.radio(
        t("label_legend_domain", _lang),
        options=[LegendDomain.FIXED, LegendDomain.DATA],
        index=0 if _settings.legend_domain is LegendDomain.FIXED else 1,
        format_func=lambda d: t(f"legend_{d.value}", _lang),
    )
    renderer = st.radio(
        t("label_renderer", _lang),
        options=["svg", "plotly"],
        format_func=lambda r: t(f"renderer_{r}", _lang),
        horizontal=True,
    )
    window_years = st.number_input(
        t("label_window", _lang), min_value=1, max_value=100, value=_settings.window_years, step=1
    )
    if st.button(
        t("mode_min", _lang)
        if st.session_state.view_state.mode is DisplayMode.MAX
        else t("mode_max", _lang),
        use_container_width=True,
    ):
        st.session_state.view_state = st.session_state.view_state.toggled()
        st.rerun()

_settings = dataclasses.replace(
    _settings, legend_domain=domain_choice, window_years=int(window_years)
)

# --- Load (rebuilt from scratch on every change) ---
source = uploaded if uploaded is not None else data_path.strip()
st.session_state.heatmap = None
st.session_state.error_msg = None
if uploaded is not None:
    uploaded.seek(0)
if uploaded is not None or source:
    try:
        st.session_state.heatmap = load_heatmap(
            source,
            window_years=_settings.window_years,
            policy=_settings.malformed_policy,
        )
    except TempMatrixError as e:
        logger.exception("Could not load temperature data")
        st.session_state.error_msg = t("error_load", _lang).format(error=html.escape(str(e)))

# --- Chart area ---
if st.session_state.error_msg:
    st.markdown(
        f"<div class='error-box'>{st.session_state.error_msg}</div>",
        unsafe_allow_html=True,
    )
elif st.session_state.heatmap is not None and renderer == "plotly":
    fig = render_plotly_chart(
        st.session_state.heatmap,
        view_state=st.session_state.view_state,
        settings=_settings,
        lang=_lang,
    )
    st.plotly_chart(fig, use_container_width=False, config={"displayModeBar": False})
elif st.session_state.heatmap is not None:
    svg_html = render_svg_html(
        st.session_state.heatmap,
        view_state=st.session_state.view_state,
        settings=_settings,
        lang=_lang,
    )
    components.html(svg_html, height=720, scrolling=False)
else:
    st.markdown(
        f"<div style='height:60vh; display:flex; align-items:center; justify-content:center;"
        f" color:#999999; font-size:1.1rem;'>{t('placeholder', _lang)}</div>",
        unsafe_allow_html=True,
    )
