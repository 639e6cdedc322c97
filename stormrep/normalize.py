"""
Field normalizer
================

Turns `RawEventRecord`s into `NormalizedRecord`s:
- BGN_DATE is parsed with a fixed month/day/year format (the NOAA export
  always writes "4/18/1950 0:00:00"), never auto-detected.
- Each record is flagged pre-1970 or not. Older years are recorded far less
  completely, so the rankings only use 1970 onward.
- Property and crop damage are converted to dollars (see `damage.py`).

Rows with an unparseable date are excluded and counted; they never abort
the run.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List
import logging
import warnings

from .damage import DataQualityWarning, calculate_damage, is_recognized_code
from .models import NormalizedRecord, RawEventRecord

logger = logging.getLogger(__name__)

DATE_FORMATS = ("%m/%d/%Y %H:%M:%S", "%m/%d/%Y")

# Years are compared as an offset from 1900, so 70 is 1970
_CUTOFF_OFFSET = 70

_MAX_SAMPLES = 5


class ParseError(ValueError):
    """A begin date did not match the fixed format."""

    def __init__(self, value: str):
        super().__init__(f"Unparseable begin date: {value!r}")
        self.value = value


def parse_begin_date(text: str) -> datetime:
    """Parse a BGN_DATE value ("12/31/1969 23:59:59" or "12/31/1969")."""
    s = text.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    raise ParseError(text)


def is_pre_1970(dt: datetime) -> bool:
    return dt.year - 1900 < _CUTOFF_OFFSET


def normalize_record(raw: RawEventRecord) -> NormalizedRecord:
    """Normalize one row. Raises ParseError if the date is bad."""
    dt = parse_begin_date(raw.begin_date)
    return NormalizedRecord.build(
        event_type=raw.event_type,
        fatalities=raw.fatalities,
        injuries=raw.injuries,
        is_pre_1970=is_pre_1970(dt),
        property_damage=calculate_damage(raw.prop_dmg, raw.prop_dmg_exp),
        crop_damage=calculate_damage(raw.crop_dmg, raw.crop_dmg_exp),
    )


@dataclass
class NormalizationResult:
    """Normalized records plus what was skipped or zeroed on the way."""
    records: List[NormalizedRecord]
    skipped_dates: int = 0
    bad_date_samples: List[str] = field(default_factory=list)
    # exponent code -> number of damage fields carrying it
    unrecognized_codes: Counter = field(default_factory=Counter)


def normalize_records(raws: Iterable[RawEventRecord]) -> NormalizationResult:
    """Normalize every row in a single pass, excluding bad dates."""
    result = NormalizationResult(records=[])
    for raw in raws:
        try:
            rec = normalize_record(raw)
        except ParseError as e:
            result.skipped_dates += 1
            if len(result.bad_date_samples) < _MAX_SAMPLES:
                result.bad_date_samples.append(e.value)
            continue
        for code in (raw.prop_dmg_exp, raw.crop_dmg_exp):
            if not is_recognized_code(code):
                result.unrecognized_codes[code] += 1
        result.records.append(rec)

    if result.skipped_dates:
        logger.warning("Excluded %d rows with unparseable BGN_DATE (e.g. %s)",
                       result.skipped_dates, ", ".join(repr(v) for v in result.bad_date_samples))
    if result.unrecognized_codes:
        summary = ", ".join(f"{code!r}={n}" for code, n in result.unrecognized_codes.most_common())
        logger.warning("Unrecognized damage exponent codes treated as 0: %s", summary)
        warnings.warn(
            f"{sum(result.unrecognized_codes.values())} damage values had unrecognized "
            f"exponent codes and were counted as $0",
            DataQualityWarning,
            stacklevel=2,
        )
    logger.info("Normalized %d records", len(result.records))
    return result
