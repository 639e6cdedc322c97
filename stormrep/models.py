"""
Data model
==========

Each row of the NOAA Storm Events CSV becomes a `RawEventRecord`. The
normalizer turns it into a `NormalizedRecord` (dates classified, damage in
dollars), the engine sums those into `AggregateRow`s, and ranking returns a
`RankedSelection` per metric.

All records are immutable (`frozen=True`): stages build new objects rather
than editing the ones they were given.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Tuple

# Metric selectors used by ranking and the report
FATALITIES = "fatalities"
INJURIES = "injuries"
TOTAL_DAMAGE = "total_damage"
METRICS = (FATALITIES, INJURIES, TOTAL_DAMAGE)

_METRIC_ALIASES = {
    "deaths": FATALITIES,
    "fatalities": FATALITIES,
    "injuries": INJURIES,
    "damage": TOTAL_DAMAGE,
    "total_damage": TOTAL_DAMAGE,
}


def metric_name(name: str) -> str:
    """Resolve a metric name or alias (e.g. 'deaths') to its selector."""
    key = name.lower().strip()
    if key not in _METRIC_ALIASES:
        raise ValueError("metric must be: fatalities, injuries, total_damage")
    return _METRIC_ALIASES[key]


@dataclass(frozen=True)
class RawEventRecord:
    """One row of the source dataset, as read."""
    event_type: str
    begin_date: str
    fatalities: int
    injuries: int
    prop_dmg: float
    prop_dmg_exp: str
    crop_dmg: float
    crop_dmg_exp: str


@dataclass(frozen=True)
class NormalizedRecord:
    """A cleaned record: dates classified and damage converted to US$.

    Use `NormalizedRecord.build` so the total is always derived from the
    two parts.
    """
    event_type: str
    fatalities: int
    injuries: int
    is_pre_1970: bool
    property_damage: float
    crop_damage: float
    total_damage: float

    def __post_init__(self) -> None:
        if self.total_damage != self.property_damage + self.crop_damage:
            raise ValueError("total_damage must equal property_damage + crop_damage")

    @classmethod
    def build(cls, event_type: str, fatalities: int, injuries: int, is_pre_1970: bool,
              property_damage: float, crop_damage: float) -> "NormalizedRecord":
        return cls(
            event_type=event_type,
            fatalities=fatalities,
            injuries=injuries,
            is_pre_1970=is_pre_1970,
            property_damage=property_damage,
            crop_damage=crop_damage,
            total_damage=property_damage + crop_damage,
        )


@dataclass(frozen=True)
class AggregateRow:
    """Summed figures for one (time period, event type) group."""
    is_pre_1970: bool
    event_type: str
    fatalities: int
    injuries: int
    total_damage: float

    @property
    def key(self) -> Tuple[bool, str]:
        return (self.is_pre_1970, self.event_type)

    def metric(self, name: str) -> float:
        return getattr(self, metric_name(name))


@dataclass(frozen=True)
class RankedSelection:
    """Top post-1970 groups for one metric, highest first.

    The accessors below feed the narrative text. `combined_top_two` and the
    `third_*` pair exist because the two largest damage categories in the
    NOAA data are two labels for the same kind of storm.
    """
    metric: str
    rows: Tuple[AggregateRow, ...]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[AggregateRow]:
        return iter(self.rows)

    def __getitem__(self, i: int) -> AggregateRow:
        return self.rows[i]

    def labels(self) -> List[str]:
        return [r.event_type for r in self.rows]

    def values(self) -> List[float]:
        return [r.metric(self.metric) for r in self.rows]

    def _label(self, i: int) -> str:
        if len(self.rows) <= i:
            raise IndexError(f"selection has only {len(self.rows)} rows")
        return self.rows[i].event_type

    def _value(self, i: int) -> float:
        if len(self.rows) <= i:
            raise IndexError(f"selection has only {len(self.rows)} rows")
        return self.rows[i].metric(self.metric)

    @property
    def top_label(self) -> str:
        return self._label(0)

    @property
    def top_value(self) -> float:
        return self._value(0)

    @property
    def second_label(self) -> str:
        return self._label(1)

    @property
    def second_value(self) -> float:
        return self._value(1)

    @property
    def third_label(self) -> str:
        return self._label(2)

    @property
    def third_value(self) -> float:
        return self._value(2)

    @property
    def combined_top_two(self) -> float:
        return self._value(0) + self._value(1)
