"""Aggregation layer — CSV loading, parsing, windowing, and monthly statistics."""

import logging
import math
from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from pathlib import Path
from typing import IO

import numpy as np
import pandas as pd

from tempmatrix.models import (
    DailyIndex,
    DailyRecord,
    HeatmapData,
    MatrixCell,
    MonthlyAggregate,
    RawRow,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
REQUIRED_COLUMNS = ("date", "max_temperature", "min_temperature")
DEFAULT_WINDOW_YEARS = 10


class TempMatrixError(Exception):
    """Base class for pipeline failures."""


class DataLoadError(TempMatrixError):
    """The input file could not be read or lacks required columns."""


class EmptyDatasetError(TempMatrixError):
    """No record carries a usable year, so no window can be computed."""


class MalformedRowError(TempMatrixError):
    """A row failed parsing under the 'raise' policy."""


def _source_name(source: str | Path | IO) -> str:
    if hasattr(source, "read"):
        return Path(getattr(source, "name", "") or "upload.csv").name
    return Path(source).name


def load_daily_csv(source: str | Path | IO) -> list[RawRow]:
    """Read a delimited daily temperature file into RawRows.

    The header row is required. Every column is read as text so that the
    parser alone decides how malformed values are handled. Extra columns are
    ignored.

    Args:
        source: CSV file path or an open file-like object (e.g. an upload).

    Returns:
        RawRows in file order.

    Raises:
        DataLoadError: If the file is missing, unreadable, or lacks a required column.
    """
    name = _source_name(source)
    if not hasattr(source, "read"):
        source = Path(source)
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"Cannot read {name}: {exc}") from exc

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataLoadError(f"{name} is missing column(s): {', '.join(missing)}")

    rows = [
        RawRow(date=d, max_temperature=hi, min_temperature=lo)
        for d, hi, lo in zip(df["date"], df["max_temperature"], df["min_temperature"])
    ]
    logger.info(f"Loaded {len(rows)} rows from {name}")
    return rows


def _parse_date(value: object) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def _to_float(value: object) -> float:
    if value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _field(row: RawRow | Mapping[str, object], name: str) -> object:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def parse_row(row: RawRow | Mapping[str, object]) -> DailyRecord:
    """Turn one raw row into a DailyRecord.

    An unparseable date leaves date/year/month as None; an unparseable number
    becomes nan and propagates into the mean.
    """
    day = _parse_date(_field(row, "date"))
    hi = _to_float(_field(row, "max_temperature"))
    lo = _to_float(_field(row, "min_temperature"))
    return DailyRecord(
        date=day,
        year=day.year if day is not None else None,
        month=day.month - 1 if day is not None else None,
        max_temperature=hi,
        min_temperature=lo,
        mean_temperature=(hi + lo) / 2,
    )


def parse_rows(
    rows: Iterable[RawRow | Mapping[str, object]], policy: str = "propagate"
) -> list[DailyRecord]:
    """Parse raw rows in order.

    Args:
        rows: RawRows or mappings with date/max_temperature/min_temperature keys.
        policy: What to do with malformed rows. "propagate" keeps them (nan
            poisons the aggregate of their cell), "skip" drops them, "raise"
            aborts on the first one.

    Returns:
        DailyRecords in input order.

    Raises:
        MalformedRowError: Under the "raise" policy.
        ValueError: On an unknown policy.
    """
    if policy not in ("propagate", "skip", "raise"):
        raise ValueError(f"Unknown malformed-row policy: {policy!r}")

    records: list[DailyRecord] = []
    skipped = 0
    for line_no, row in enumerate(rows, start=2):  # line 1 is the header
        record = parse_row(row)
        if not record.is_well_formed:
            if policy == "raise":
                raise MalformedRowError(f"Malformed row at line {line_no}: {row!r}")
            if policy == "skip":
                skipped += 1
                logger.warning(f"Skipping malformed row at line {line_no}: {row!r}")
                continue
        records.append(record)

    logger.debug(f"Parsed {len(records)} records ({skipped} skipped)")
    return records


def window_recent_years(
    records: list[DailyRecord], years: int = DEFAULT_WINDOW_YEARS
) -> list[DailyRecord]:
    """Keep records from the trailing `years` calendar years, inclusive.

    latest = max(year); a record is kept when year >= latest - (years - 1).
    Records without a year never pass. Gaps between years are preserved.

    Raises:
        EmptyDatasetError: If no record has a usable year.
        ValueError: If years < 1.
    """
    if years < 1:
        raise ValueError(f"'years' must be >= 1 (got {years})")
    known = [r.year for r in records if r.year is not None]
    if not known:
        raise EmptyDatasetError("No dated records to window")
    first_year = max(known) - (years - 1)
    return [r for r in records if r.year is not None and r.year >= first_year]


def aggregate(
    records: list[DailyRecord],
) -> tuple[dict[int, dict[int, MonthlyAggregate]], DailyIndex]:
    """Group records by (year, month) and compute per-cell statistics.

    Returns:
        (year → month → MonthlyAggregate, DailyIndex). Both keep first-occurrence
        key order; records inside a group keep input order.
    """
    groups: dict[tuple[int, int], list[DailyRecord]] = defaultdict(list)
    for r in records:
        if r.year is None or r.month is None:
            continue
        groups[(r.year, r.month)].append(r)

    grouped: dict[int, dict[int, MonthlyAggregate]] = {}
    for (year, month), days in groups.items():
        # numpy reductions propagate nan, so one bad day poisons the cell
        grouped.setdefault(year, {})[month] = MonthlyAggregate(
            year=year,
            month=month,
            mean_of_means=float(np.mean([d.mean_temperature for d in days])),
            max_of_max=float(np.max([d.max_temperature for d in days])),
            min_of_min=float(np.min([d.min_temperature for d in days])),
            day_count=len(days),
        )

    daily = DailyIndex(groups={k: tuple(v) for k, v in groups.items()})
    return grouped, daily


def build_matrix(grouped: dict[int, dict[int, MonthlyAggregate]]) -> tuple[MatrixCell, ...]:
    """Flatten the nested grouping into cells sorted by (year, month)."""
    cells = [
        MatrixCell.from_aggregate(agg)
        for months in grouped.values()
        for agg in months.values()
    ]
    cells.sort(key=lambda c: (c.year, c.month))
    return tuple(cells)


def run(
    rows: Iterable[RawRow | Mapping[str, object]],
    window_years: int = DEFAULT_WINDOW_YEARS,
    policy: str = "propagate",
    source: str = "",
) -> HeatmapData:
    """Top-level entry point: raw rows in, HeatmapData out.

    Args:
        rows: Raw input rows.
        window_years: Size of the trailing year window.
        policy: Malformed-row policy passed to parse_rows.
        source: Display name of the input.

    Returns:
        Fully computed HeatmapData.
    """
    records = parse_rows(rows, policy=policy)
    recent = window_recent_years(records, window_years)
    grouped, daily = aggregate(recent)
    cells = build_matrix(grouped)
    latest_year = max(r.year for r in recent if r.year is not None)
    logger.info(
        f"Built {len(cells)} cells from {len(recent)} of {len(records)} records "
        f"({latest_year - window_years + 1}–{latest_year})"
    )
    return HeatmapData(
        cells=cells,
        daily=daily,
        latest_year=latest_year,
        window_years=window_years,
        source=source,
    )


def load_heatmap(
    source: str | Path | IO,
    window_years: int = DEFAULT_WINDOW_YEARS,
    policy: str = "propagate",
) -> HeatmapData:
    """Load a CSV file (path or file-like) and run the full pipeline on it."""
    return run(
        load_daily_csv(source),
        window_years=window_years,
        policy=policy,
        source=_source_name(source),
    )
