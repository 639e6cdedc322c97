"""
tests/test_normalize.py

Date parsing, the pre-1970 flag, and per-record normalization.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from conftest import make_raw
from stormrep.damage import DataQualityWarning
from stormrep.models import NormalizedRecord
from stormrep.normalize import (
    ParseError,
    is_pre_1970,
    normalize_record,
    normalize_records,
    parse_begin_date,
)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


class TestBeginDate:
    def test_noaa_format(self) -> None:
        assert parse_begin_date("4/18/1950 0:00:00") == datetime(1950, 4, 18)

    def test_date_only(self) -> None:
        assert parse_begin_date("11/15/2011") == datetime(2011, 11, 15)

    @pytest.mark.parametrize("text", ["", "1970-01-01", "13/01/1970 0:00:00", "1/1/70", "garbage"])
    def test_rejects_other_formats(self, text: str) -> None:
        with pytest.raises(ParseError) as ctx:
            parse_begin_date(text)
        assert ctx.value.value == text

    def test_1970_is_not_pre_1970(self) -> None:
        assert is_pre_1970(parse_begin_date("1/1/1970 00:00:00")) is False

    def test_last_second_of_1969(self) -> None:
        assert is_pre_1970(parse_begin_date("12/31/1969 23:59:59")) is True


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class TestNormalizeRecord:
    def test_copies_counts_and_converts_damage(self) -> None:
        rec = normalize_record(make_raw(
            "FLASH FLOOD", "8/1/1993 0:00:00", fatalities=3, injuries=7,
            prop_dmg=2.5, prop_dmg_exp="M", crop_dmg=4, crop_dmg_exp="K",
        ))
        assert rec.event_type == "FLASH FLOOD"
        assert (rec.fatalities, rec.injuries) == (3, 7)
        assert rec.is_pre_1970 is False
        assert rec.property_damage == 2_500_000
        assert rec.crop_damage == 4_000
        assert rec.total_damage == rec.property_damage + rec.crop_damage

    @pytest.mark.parametrize("pexp,cexp", [("", ""), ("5", "?"), ("h", "b"), ("0.5", "m")])
    def test_total_is_sum_of_parts(self, pexp: str, cexp: str) -> None:
        rec = normalize_record(make_raw(prop_dmg=1.3, prop_dmg_exp=pexp, crop_dmg=0.7, crop_dmg_exp=cexp))
        assert rec.total_damage == rec.property_damage + rec.crop_damage

    def test_bad_date_raises(self) -> None:
        with pytest.raises(ParseError):
            normalize_record(make_raw(begin_date="yesterday"))

    def test_inconsistent_total_rejected(self) -> None:
        with pytest.raises(ValueError):
            NormalizedRecord("TORNADO", 0, 0, False, 1.0, 2.0, 4.0)


class TestNormalizeRecords:
    def test_excludes_bad_dates_and_keeps_going(self) -> None:
        raws = [
            make_raw("A", "1/1/1990 0:00:00", fatalities=1),
            make_raw("B", "bad", fatalities=2),
            make_raw("C", "1/1/1960 0:00:00", fatalities=3),
        ]
        result = normalize_records(raws)
        assert [r.event_type for r in result.records] == ["A", "C"]
        assert result.skipped_dates == 1
        assert result.bad_date_samples == ["bad"]

    def test_unrecognized_codes_are_tallied_and_warned(self) -> None:
        raws = [
            make_raw(prop_dmg=5, prop_dmg_exp="?", crop_dmg=1, crop_dmg_exp="+"),
            make_raw(prop_dmg=5, prop_dmg_exp="?", crop_dmg=1, crop_dmg_exp="K"),
        ]
        with pytest.warns(DataQualityWarning):
            result = normalize_records(raws)
        assert result.unrecognized_codes == {"?": 2, "+": 1}
        assert [r.total_damage for r in result.records] == [0, 1000]

    def test_accepts_a_generator(self) -> None:
        result = normalize_records(make_raw(fatalities=i) for i in range(4))
        assert [r.fatalities for r in result.records] == [0, 1, 2, 3]

    def test_oversized_exponent_codes_do_not_stop_the_run(self) -> None:
        raws = [
            make_raw("A", prop_dmg=1.0, prop_dmg_exp="400", crop_dmg=2.0, crop_dmg_exp="K"),
            make_raw("B", fatalities=1),
            make_raw("C", prop_dmg=0.0, prop_dmg_exp="1e400"),
            make_raw("D", prop_dmg=3.0, prop_dmg_exp="M"),
        ]
        with pytest.warns(DataQualityWarning):
            result = normalize_records(raws)
        assert [r.event_type for r in result.records] == ["A", "B", "C", "D"]
        assert [r.total_damage for r in result.records] == [2000, 0, 0, 3_000_000]
        assert result.unrecognized_codes == {"400": 1, "1e400": 1}
