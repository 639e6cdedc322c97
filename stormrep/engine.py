"""
Core engine
===========

The heart of the report. The pipeline is linear:

1) Load dataset        -> list of RawEventRecord
2) Normalize           -> list of NormalizedRecord (raw rows dropped)
3) Aggregate           -> one AggregateRow per (pre-1970 flag, EVTYPE)
                          (normalized rows dropped)
4) Rank per metric     -> RankedSelection of the top post-1970 groups
5) Report              -> see `report.py`

Each stage releases its input as soon as its output exists; the raw table
is by far the largest object in the run.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import time

from .config import PipelineConfig
from .dsa import merge_sort
from .loader import load_storm_csv
from .models import (
    FATALITIES, INJURIES, METRICS, TOTAL_DAMAGE,
    AggregateRow, NormalizedRecord, RankedSelection, metric_name,
)
from .normalize import normalize_records

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 6


@dataclass
class _Sums:
    fatalities: int = 0
    injuries: int = 0
    total_damage: float = 0.0


def aggregate(records: Iterable[NormalizedRecord]) -> List[AggregateRow]:
    """Sum fatalities, injuries and damage per (is_pre_1970, event_type).

    One pass over `records`; every record lands in exactly one group.
    Event types are matched by exact string equality, so "HURRICANE" and
    "HURRICANE/TYPHOON" stay separate. Rows come back sorted by
    (event_type, is_pre_1970), which is the order ranking ties preserve.
    """
    groups: Dict[Tuple[bool, str], _Sums] = {}
    for r in records:
        key = (r.is_pre_1970, r.event_type)
        s = groups.get(key)
        if s is None:
            s = groups[key] = _Sums()
        s.fatalities += r.fatalities
        s.injuries += r.injuries
        s.total_damage += r.total_damage

    keys = sorted(groups, key=lambda k: (k[1], k[0]))
    return [
        AggregateRow(
            is_pre_1970=k[0],
            event_type=k[1],
            fatalities=groups[k].fatalities,
            injuries=groups[k].injuries,
            total_damage=groups[k].total_damage,
        )
        for k in keys
    ]


def rank(rows: Iterable[AggregateRow], metric: str, top_n: int = DEFAULT_TOP_N) -> RankedSelection:
    """Top `top_n` post-1970 groups by `metric`, highest first.

    The sort is stable, so ties keep their order in `rows`. `rows` is not
    modified.
    """
    m = metric_name(metric)
    if top_n < 0:
        raise ValueError("top_n must be >= 0")
    recent = [r for r in rows if not r.is_pre_1970]
    ordered = merge_sort(recent, key=lambda r: r.metric(m), reverse=True)
    return RankedSelection(metric=m, rows=tuple(ordered[:top_n]))


@dataclass
class ReportFigures:
    """Everything the report needs: one ranking per metric plus run totals."""
    rankings: Dict[str, RankedSelection]
    groups: int = 0
    rows_loaded: int = 0
    rows_used: int = 0
    skipped_dates: int = 0
    unrecognized_codes: Counter = field(default_factory=Counter)
    dataset_path: Optional[str] = None

    @property
    def fatalities(self) -> RankedSelection:
        return self.rankings[FATALITIES]

    @property
    def injuries(self) -> RankedSelection:
        return self.rankings[INJURIES]

    @property
    def damage(self) -> RankedSelection:
        return self.rankings[TOTAL_DAMAGE]


def summarize(rows: List[AggregateRow], top_n: int = DEFAULT_TOP_N) -> ReportFigures:
    """Rank the aggregate rows by every metric."""
    return ReportFigures(
        rankings={m: rank(rows, m, top_n=top_n) for m in METRICS},
        groups=len(rows),
    )


def run_pipeline(config: PipelineConfig) -> ReportFigures:
    """Load, normalize, aggregate and rank one dataset file."""
    t0 = time.perf_counter()
    raw = load_storm_csv(config.data_path)
    rows_loaded = len(raw)
    t1 = time.perf_counter()
    logger.debug("load: %.1fs", t1 - t0)

    norm = normalize_records(raw)
    del raw
    t2 = time.perf_counter()
    logger.debug("normalize: %.1fs", t2 - t1)

    rows_used = len(norm.records)
    skipped, codes = norm.skipped_dates, norm.unrecognized_codes
    rows = aggregate(norm.records)
    del norm
    t3 = time.perf_counter()
    logger.info("Aggregated %d records into %d groups (%.1fs)", rows_used, len(rows), t3 - t2)

    figures = summarize(rows, top_n=config.top_n)
    figures.rows_loaded = rows_loaded
    figures.rows_used = rows_used
    figures.skipped_dates = skipped
    figures.unrecognized_codes = codes
    figures.dataset_path = str(Path(config.data_path))
    return figures
