"""
Scalar helpers shared by the profiling and diff agents.

Cells arrive from CSV/XLSX/JSON decoders (or straight from a DataFrame) so a
column can hold any mix of None, NaN, str, int, float, bool and datetime.
Everything here is total: bad input gives None/False, never an exception.
"""

import math
import numbers
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

# Float literals the generic number coercion accepts besides plain decimals
_INFINITY_LITERALS = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def is_null(value: Any) -> bool:
    """None, NaN and NaT count as null. Strings never do."""
    if value is None:
        return True
    if isinstance(value, str):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # pd.isna on list-likes returns an array, those are not scalar nulls
        return False


def is_missing(value: Any) -> bool:
    """Null or empty string. 0 and False are values, not gaps."""
    return is_null(value) or (isinstance(value, str) and value == "")


def to_number(value: Any) -> Optional[float]:
    """
    Generic "convert to number".

    Returns None when the value has no numeric reading. Whitespace around
    numeric strings is fine, an empty/blank string reads as 0.
    """
    if is_null(value):
        return None

    if isinstance(value, (bool, np.bool_)):
        return 1.0 if value else 0.0

    if isinstance(value, numbers.Number):
        try:
            num = float(value)
        except (TypeError, ValueError, OverflowError):
            return None
        return None if math.isnan(num) else num

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp() * 1000.0

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp() * 1000.0

    if not isinstance(value, str):
        return None

    text = value.strip()
    if text == "":
        return 0.0
    if text in _INFINITY_LITERALS:
        return _INFINITY_LITERALS[text]

    # python's float() is more permissive than we want here
    if "_" in text or text.lower().lstrip("+-") in ("nan", "inf", "infinity"):
        return None

    if text[:2].lower() in ("0x", "0o", "0b"):
        try:
            return float(int(text, 0))
        except ValueError:
            return None

    try:
        return float(text)
    except ValueError:
        return None


def to_finite_number(value: Any) -> Optional[float]:
    num = to_number(value)
    if num is None or math.isinf(num):
        return None
    return num


def is_whole_number(value: Any) -> bool:
    num = to_number(value)
    return num is not None and math.isfinite(num) and num == math.floor(num)


def to_text(value: Any) -> str:
    """
    String-normalise a cell.

    None/NaN -> "", booleans -> "true"/"false", integral floats lose
    their trailing ".0" so 3 and 3.0 compare equal.
    """
    if is_null(value):
        return ""
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        num = float(value)
        if math.isinf(num):
            return "Infinity" if num > 0 else "-Infinity"
        if num == math.floor(num) and abs(num) < 1e21:
            return str(int(num))
        return repr(num)
    return str(value)


def round_half_up(x: float) -> int:
    """2.5 -> 3, -2.5 -> -2. Python's round() would give 2 for 2.5."""
    return int(math.floor(x + 0.5))


def as_records(data: Any) -> List[Dict[str, Any]]:
    """
    Accept a list of row dicts or a DataFrame, return a list of row dicts.

    DataFrame NaN/NaT cells come back as None. Rows are shallow copies, the
    caller's objects are never handed out.
    """
    if data is None:
        return []
    if isinstance(data, pd.DataFrame):
        frame = data.astype(object).where(data.notna(), None)
        return frame.to_dict(orient="records")
    return [dict(row) if isinstance(row, dict) else {} for row in data]
