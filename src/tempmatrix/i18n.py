"""Simple two-language (ko/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "월별 기온 매트릭스",
        "en": "Temperature Matrix",
    },
    "label_source": {
        "ko": "데이터 파일",
        "en": "Data file",
    },
    "label_upload": {
        "ko": "CSV 업로드",
        "en": "Upload CSV",
    },
    "label_legend_domain": {
        "ko": "색상 범위",
        "en": "Colour range",
    },
    "legend_fixed": {
        "ko": "고정 (0–40°C)",
        "en": "Fixed (0–40°C)",
    },
    "legend_data": {
        "ko": "데이터 평균기온 범위",
        "en": "Data mean-temperature range",
    },
    "label_window": {
        "ko": "최근 연도 수",
        "en": "Recent years",
    },
    "label_renderer": {
        "ko": "차트 방식",
        "en": "Chart style",
    },
    "renderer_svg": {
        "ko": "SVG (클릭으로 전환)",
        "en": "SVG (click to toggle)",
    },
    "renderer_plotly": {
        "ko": "Plotly",
        "en": "Plotly",
    },
    "hint_toggle": {
        "ko": "차트를 클릭하면 최고/최저 기온이 전환돼요",
        "en": "Click the chart to switch between maximum and minimum temperature",
    },
    "mode_max": {
        "ko": "최고 기온",
        "en": "Maximum temperature",
    },
    "mode_min": {
        "ko": "최저 기온",
        "en": "Minimum temperature",
    },
    "tooltip_max": {
        "ko": "최고",
        "en": "Max",
    },
    "tooltip_min": {
        "ko": "최저",
        "en": "Min",
    },
    "tooltip_avg": {
        "ko": "평균",
        "en": "Avg",
    },
    "placeholder": {
        "ko": "일별 기온 CSV를 선택하면 매트릭스를 그려요",
        "en": "Choose a daily temperature CSV to draw the matrix",
    },
    "error_load": {
        "ko": "데이터를 불러오지 못했어요. ({error})",
        "en": "Could not load the data. ({error})",
    },
}

_MONTHS: dict[str, tuple[str, ...]] = {
    "en": (
        "Jan", "Feb", "Mar", "Apr", "May", "Jun",
        "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
    ),
    "ko": tuple(f"{m}월" for m in range(1, 13)),
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key


def month_names(lang: str) -> tuple[str, ...]:
    """Short month names, January first. Unknown languages fall back to 'en'."""
    return _MONTHS.get(lang, _MONTHS["en"])
