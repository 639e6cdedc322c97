"""
Damage calculator
=================

NOAA stores each damage figure as a magnitude plus an exponent code, e.g.
PROPDMG=2.5, PROPDMGEXP="M" means $2,500,000.

Resolution order for the code:
1) a number N (e.g. "5", "0.5")  -> 10 ** N
2) the empty string              -> 1
3) K/k, M/m, B/b                 -> thousand, million, billion
4) anything else ("H", "+", "?") -> 0, the row contributes no damage

Rule 4 is deliberate: the undocumented NOAA codes are not guessed at.
A number too large for a float ("400", "1e400") falls under rule 4 too.
Callers that care can check `is_recognized_code` and report a
`DataQualityWarning`.
"""

from __future__ import annotations
from typing import Optional
import math
import re

_NUMBER_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")

_LETTER_MULTIPLIERS = {
    "K": 1e3, "k": 1e3,
    "M": 1e6, "m": 1e6,
    "B": 1e9, "b": 1e9,
}


class DataQualityWarning(UserWarning):
    """Raised (as a warning) when exponent codes had to be treated as zero."""


def _numeric_multiplier(code: str) -> Optional[float]:
    """10 ** N for a numeric code N, None if not a number or out of float range."""
    if not _NUMBER_RE.match(code):
        return None
    n = float(code)
    if not math.isfinite(n):
        return None
    try:
        mult = 10.0 ** n
    except OverflowError:
        return None
    return mult if math.isfinite(mult) else None


def exponent_multiplier(code: str) -> float:
    """Return the dollar multiplier for an exponent code (0 if unrecognized)."""
    mult = _numeric_multiplier(code)
    if mult is not None:
        return mult
    if code == "":
        return 1.0
    return _LETTER_MULTIPLIERS.get(code, 0.0)


def is_recognized_code(code: str) -> bool:
    return _numeric_multiplier(code) is not None or code == "" or code in _LETTER_MULTIPLIERS


def calculate_damage(magnitude: float, code: str) -> float:
    """Convert (magnitude, exponent code) to a dollar amount."""
    return magnitude * exponent_multiplier(code)
