"""Shared fixtures for tempmatrix tests."""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from tempmatrix.compute import run  # noqa: E402

SAMPLE_CSV = Path(__file__).parent.parent / "data" / "temperature_daily.csv"


def make_rows(*days: tuple[str, object, object]) -> list[dict[str, object]]:
    """Build raw row mappings from (date, max, min) tuples."""
    return [
        {"date": d, "max_temperature": hi, "min_temperature": lo} for d, hi, lo in days
    ]


@pytest.fixture
def january_2020_rows():
    return make_rows(
        ("2020-01-01", "10", "0"),
        ("2020-01-02", "12", "2"),
        ("2020-01-03", "8", "-2"),
    )


@pytest.fixture
def two_year_rows():
    """Two years, a few months each, deliberately out of chronological order."""
    return make_rows(
        ("2021-03-01", "15", "5"),
        ("2020-12-31", "6", "-1"),
        ("2021-03-02", "17", "7"),
        ("2020-01-15", "4", "-4"),
        ("2021-01-10", "3", "-3"),
        ("2020-12-01", "8", "1"),
        ("2021-03-03", "16", "6"),
    )


@pytest.fixture
def two_year_heatmap(two_year_rows):
    return run(two_year_rows, source="two_years.csv")


@pytest.fixture
def sample_csv() -> Path:
    return SAMPLE_CSV


@pytest.fixture
def csv_file(tmp_path):
    """Write CSV text to a temporary file and return its path."""

    def _write(text: str, name: str = "daily.csv") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
