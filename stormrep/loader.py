"""
Dataset loader (compressed CSV -> RawEventRecord list)
======================================================

Reads the NOAA Storm Events export (`repdata_data_StormData.csv.bz2`) and
converts each row into a `RawEventRecord`.

Key ideas:
- Column names are fixed; a header missing any of them is a LoadError.
- Only the eight needed columns are read (`usecols`), the full file has
  37 columns and ~900k rows.
- pandas infers the compression (bz2/gz/zip/xz) from the file suffix.
- Event types and exponent codes are kept verbatim: " TSTM WIND" is not
  "TSTM WIND", "" stays "", "k" is not upper-cased.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Union
import logging
import math
import pandas as pd
from .models import RawEventRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "EVTYPE",
    "BGN_DATE",
    "FATALITIES",
    "INJURIES",
    "PROPDMG",
    "PROPDMGEXP",
    "CROPDMG",
    "CROPDMGEXP",
)


class LoadError(Exception):
    """The dataset could not be read. Fatal for the run."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = str(path)
        self.reason = reason


def _to_int(x) -> Optional[int]:
    """Convert a cell to int, returning None if missing/invalid."""
    v = _to_float(x)
    return int(v) if v is not None else None

def _to_float(x) -> Optional[float]:
    """Convert a cell to a finite float, returning None if missing/invalid."""
    if x is None or x == "": return None
    try: v = float(x)
    except (TypeError, ValueError): return None
    return v if math.isfinite(v) else None


def _read_frame(path: Path) -> pd.DataFrame:
    try:
        header = pd.read_csv(path, nrows=0)
    except FileNotFoundError as e:
        raise LoadError(path, "file not found") from e
    except (OSError, EOFError) as e:
        raise LoadError(path, f"unreadable ({e})") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise LoadError(path, f"not a delimited text file ({e})") from e

    cols = [str(c).strip() for c in header.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in cols]
    if missing:
        raise LoadError(path, f"missing required columns {missing}")

    try:
        # Everything as text; numbers are converted per cell below so a bad
        # cell cannot turn a whole column into NaN floats.
        return pd.read_csv(
            path,
            usecols=lambda c: str(c).strip() in REQUIRED_COLUMNS,
            dtype=str,
            keep_default_na=False,
        ).rename(columns=lambda c: str(c).strip())
    except (OSError, EOFError) as e:
        raise LoadError(path, f"unreadable ({e})") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise LoadError(path, f"malformed row data ({e})") from e


def load_storm_csv(path: Union[str, Path]) -> List[RawEventRecord]:
    """
    Load the storm events file into RawEventRecords.

    Missing or non-numeric counts and magnitudes are read as 0 and counted
    in a single warning.
    """
    path = Path(path)
    if not path.is_file():
        raise LoadError(path, "file not found")

    df = _read_frame(path)
    records: List[RawEventRecord] = []
    bad_numbers = 0
    columns = [df[c] for c in REQUIRED_COLUMNS]
    for evtype, bgn, fat, inj, pdmg, pexp, cdmg, cexp in zip(*columns):
        nums = (_to_int(fat), _to_int(inj), _to_float(pdmg), _to_float(cdmg))
        bad_numbers += sum(1 for v in nums if v is None)
        fatalities, injuries, prop_dmg, crop_dmg = (v if v is not None else 0 for v in nums)
        records.append(RawEventRecord(
            event_type=evtype,
            begin_date=bgn,
            fatalities=fatalities,
            injuries=injuries,
            prop_dmg=float(prop_dmg),
            prop_dmg_exp=pexp,
            crop_dmg=float(crop_dmg),
            crop_dmg_exp=cexp,
        ))
    del df, columns

    if bad_numbers:
        logger.warning("%d missing or non-numeric count/magnitude cells read as 0", bad_numbers)
    logger.info("Loaded %d rows from %s", len(records), path.name)
    return records
