"""Data model definitions — explicit boundaries between input, compute, and render layers."""

import datetime
import enum
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class RawRow:
    """One row as read from the input file. Not yet validated."""

    date: str  # "YYYY-MM-DD"
    max_temperature: str
    min_temperature: str


@dataclass(frozen=True)
class DailyRecord:
    """A single parsed day. date/year/month are None when the date was unparseable."""

    date: datetime.date | None
    year: int | None
    month: int | None  # 0 = January … 11 = December
    max_temperature: float  # °C, nan if malformed
    min_temperature: float  # °C, nan if malformed
    mean_temperature: float  # (max + min) / 2

    @property
    def is_well_formed(self) -> bool:
        return (
            self.date is not None
            and math.isfinite(self.max_temperature)
            and math.isfinite(self.min_temperature)
        )


@dataclass(frozen=True)
class MonthlyAggregate:
    """Statistics for one (year, month) group with at least one day."""

    year: int
    month: int
    mean_of_means: float
    max_of_max: float
    min_of_min: float
    day_count: int


class DisplayMode(enum.Enum):
    """Which statistic drives cell colour."""

    MAX = "max"
    MIN = "min"


class LegendDomain(enum.Enum):
    """Colour-scale domain policy."""

    FIXED = "fixed"  # [0, 40] °C, comparable across datasets
    DATA = "data"  # extent of the cells' mean temperature


@dataclass(frozen=True)
class MatrixCell:
    """One heatmap cell. Same fields as MonthlyAggregate, consumed by renderers."""

    year: int
    month: int
    mean_of_means: float
    max_of_max: float
    min_of_min: float
    day_count: int

    @classmethod
    def from_aggregate(cls, agg: MonthlyAggregate) -> "MatrixCell":
        return cls(
            year=agg.year,
            month=agg.month,
            mean_of_means=agg.mean_of_means,
            max_of_max=agg.max_of_max,
            min_of_min=agg.min_of_min,
            day_count=agg.day_count,
        )

    def value(self, mode: DisplayMode) -> float:
        """Scalar used for colour encoding under the given display mode."""
        return self.max_of_max if mode is DisplayMode.MAX else self.min_of_min


@dataclass(frozen=True)
class DailyIndex:
    """Year → month → daily records lookup used for sparklines.

    Stored flat under a composite (year, month) key. A miss means the cell has
    no data and returns None rather than raising. The mapping is read-only.
    """

    groups: Mapping[tuple[int, int], tuple[DailyRecord, ...]] = field(
        default_factory=dict
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", MappingProxyType(dict(self.groups)))

    def get(self, year: int, month: int) -> tuple[DailyRecord, ...] | None:
        return self.groups.get((year, month))

    def months(self, year: int) -> dict[int, tuple[DailyRecord, ...]]:
        """Inner month mapping for one year (empty dict if the year is absent)."""
        return {m: recs for (y, m), recs in self.groups.items() if y == year}

    def keys(self) -> Iterator[tuple[int, int]]:
        return iter(self.groups)

    def __contains__(self, key: object) -> bool:
        return key in self.groups

    def __len__(self) -> int:
        return len(self.groups)


@dataclass(frozen=True)
class ViewState:
    """Render-time state. Replaced, never mutated, when the user toggles."""

    mode: DisplayMode = DisplayMode.MAX

    def toggled(self) -> "ViewState":
        other = DisplayMode.MIN if self.mode is DisplayMode.MAX else DisplayMode.MAX
        return ViewState(mode=other)


@dataclass(frozen=True)
class HeatmapData:
    """The sole input to renderers. Fully computed state."""

    cells: tuple[MatrixCell, ...]  # Sorted by (year, month)
    daily: DailyIndex
    latest_year: int
    window_years: int
    source: str = ""  # Display name of the input (file name)

    @property
    def years(self) -> tuple[int, ...]:
        """Distinct years that have at least one cell, ascending."""
        return tuple(dict.fromkeys(c.year for c in self.cells))

    def mean_extent(self) -> tuple[float, float] | None:
        """(min, max) of finite mean_of_means values, or None if there are none."""
        values = [c.mean_of_means for c in self.cells if math.isfinite(c.mean_of_means)]
        if not values:
            return None
        return min(values), max(values)
