"""Shared fixtures: small synthetic storm datasets."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import pandas as pd
import pytest

from stormrep.models import AggregateRow, NormalizedRecord, RawEventRecord


STORM_ROWS = [
    # EVTYPE, BGN_DATE, FATALITIES, INJURIES, PROPDMG, PROPDMGEXP, CROPDMG, CROPDMGEXP
    ("TORNADO", "5/1/1995 0:00:00", 10, 100, 2.5, "M", 0, ""),
    ("TORNADO", "6/1/1996 0:00:00", 5, 50, 1, "K", 3, "k"),
    ("FLOOD", "1/1/1970 00:00:00", 20, 10, 1, "B", 0, ""),
    ("HEAT", "12/31/1969 23:59:59", 100, 0, 0, "", 0, ""),
    ("HAIL", "not a date", 1, 1, 1, "K", 0, ""),
    ("WIND", "7/4/2000 0:00:00", 0, 5, 7, "?", 1, "2"),
]

COLUMNS = ["EVTYPE", "BGN_DATE", "FATALITIES", "INJURIES",
           "PROPDMG", "PROPDMGEXP", "CROPDMG", "CROPDMGEXP"]


def make_raw(event_type: str = "TORNADO", begin_date: str = "1/1/1990 0:00:00",
             fatalities: int = 0, injuries: int = 0,
             prop_dmg: float = 0.0, prop_dmg_exp: str = "",
             crop_dmg: float = 0.0, crop_dmg_exp: str = "") -> RawEventRecord:
    return RawEventRecord(event_type, begin_date, fatalities, injuries,
                          prop_dmg, prop_dmg_exp, crop_dmg, crop_dmg_exp)


def make_norm(event_type: str, fatalities: int = 0, injuries: int = 0,
              is_pre_1970: bool = False, damage: float = 0.0) -> NormalizedRecord:
    return NormalizedRecord.build(event_type, fatalities, injuries, is_pre_1970, damage, 0.0)


def make_row(event_type: str, fatalities: int = 0, injuries: int = 0,
             total_damage: float = 0.0, is_pre_1970: bool = False) -> AggregateRow:
    return AggregateRow(is_pre_1970, event_type, fatalities, injuries, total_damage)


def write_storm_csv(path: Path, rows=STORM_ROWS, columns: List[str] = COLUMNS, extra: bool = True) -> Path:
    df = pd.DataFrame(list(rows), columns=columns)
    if extra:
        # The real export carries many more columns
        df.insert(0, "STATE__", 1.0)
        df["REMARKS"] = "remark"
    df.to_csv(path, index=False)
    return path


@pytest.fixture()
def storm_csv(tmp_path: Path) -> Path:
    """The six-row dataset above as a bz2-compressed CSV."""
    return write_storm_csv(tmp_path / "StormData.csv.bz2")


@pytest.fixture(autouse=True)
def _reset_stormrep_logger():
    """Drop handlers the CLI attaches so each test starts clean."""
    yield
    logger = logging.getLogger("stormrep")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
