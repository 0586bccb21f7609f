"""
Per-column detectors.

Each detector looks at the values of a single column (one cell per row, in
row order, missing keys already turned into None) and never raises on odd
input: values it cannot read are simply left out of the calculation.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Set

import numpy as np
import pandas as pd

from .dates import is_date_like
from .policies import ContextLabel, context_policy_for, domain_bounds_for
from .values import is_missing, is_null, is_whole_number, to_finite_number, to_number, to_text

logger = logging.getLogger(__name__)

# |value - mean| must be strictly greater than this many population std devs
OUTLIER_SIGMA = 3.0


class ColumnType(Enum):
    UNKNOWN = "unknown"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"
    DATE = "date"


@dataclass
class ContextCheck:
    """How many non-empty values fit the format the column name implies."""
    valid: int
    total: int
    label: ContextLabel

    @property
    def ratio(self) -> float:
        # an empty column is not penalised
        return 1.0 if self.total == 0 else self.valid / self.total


#---------0---------------------------
# TYPE INFERENCE

def infer_column_type(values: Sequence[Any]) -> ColumnType:
    """
    Classify a column from its non-empty values.

    Checks run date -> integer -> number and stop at the first one every
    value passes, so a column of epoch timestamps is a date column even
    though each value is also a whole number.
    """
    cleaned = [v for v in values if not is_missing(v)]
    if not cleaned:
        return ColumnType.UNKNOWN
    if all(is_date_like(v) for v in cleaned):
        return ColumnType.DATE
    if all(is_whole_number(v) for v in cleaned):
        return ColumnType.INTEGER
    if all(to_number(v) is not None for v in cleaned):
        return ColumnType.NUMBER
    return ColumnType.STRING


#---------0---------------------------
# MISSING / DUPLICATES

def count_missing(values: Sequence[Any]) -> int:
    return sum(1 for v in values if is_missing(v))


def count_unique(values: Sequence[Any]) -> int:
    """Distinct non-null values. Empty string counts as a value, True and 1 stay apart."""
    return len({(isinstance(v, (bool, np.bool_)), v) for v in values if not is_null(v)})


def _normalized_keys(values: Sequence[Any]) -> pd.Series:
    """Trimmed string form of every non-missing value, indexed by row."""
    keys = {idx: to_text(v).strip() for idx, v in enumerate(values) if not is_missing(v)}
    return pd.Series(keys, dtype=object)


def find_duplicate_values(values: Sequence[Any]) -> Set[str]:
    """Normalised values that occur at least twice."""
    keys = _normalized_keys(values)
    if keys.empty:
        return set()
    counts = keys.value_counts()
    return set(counts[counts > 1].index)


def duplicate_row_indices(values: Sequence[Any]) -> List[int]:
    """Every row position holding a duplicated value, first occurrence included."""
    keys = _normalized_keys(values)
    if keys.empty:
        return []
    mask = keys.duplicated(keep=False)
    return [int(idx) for idx in keys.index[mask.to_numpy()]]


def count_duplicates(values: Sequence[Any]) -> int:
    """
    Number of rows whose value is shared with another row.

    ["a", "b", "a", "c"] gives 2, both "a" rows count.
    """
    return len(duplicate_row_indices(values))


#---------0---------------------------
# OUTLIERS

def numeric_values(values: Sequence[Any]) -> Dict[int, float]:
    """Row index -> number for every cell with a finite numeric reading.

    Date objects are left out, their reading is an epoch offset.
    """
    result = {}
    for idx, v in enumerate(values):
        if is_missing(v) or isinstance(v, (date, datetime)):
            continue
        num = to_finite_number(v)
        if num is not None:
            result[idx] = num
    return result


def numeric_summary(values: Sequence[Any]) -> Optional[Dict[str, float]]:
    """Mean, population std, min and max of the numeric cells."""
    nums = numeric_values(values)
    if not nums:
        return None
    arr = np.fromiter(nums.values(), dtype=float)
    return {
        "mean": float(arr.mean()),
        "std": float(arr.std()),  # ddof=0
        "min": float(arr.min()),
        "max": float(arr.max()),
    }


def detect_outliers(values: Sequence[Any], column_type: ColumnType, column_name: str) -> List[int]:
    """
    Flag outlier rows.

    Two independent rules, results merged:
    1. 3-sigma: |value - mean| > 3 * population std (nothing flagged when std is 0)
    2. name-driven hard bounds, e.g. "age" outside [0, 120]

    Date columns only get rule 2, their numeric readings are epoch offsets.

    Returns:
        sorted row indices into the full column
    """
    nums = numeric_values(values)
    if not nums:
        return []

    indices = np.fromiter(nums.keys(), dtype=int)
    arr = np.fromiter(nums.values(), dtype=float)

    mean = arr.mean()
    sd = arr.std()
    flagged = set()
    if column_type != ColumnType.DATE:
        flagged.update(indices[np.abs(arr - mean) > OUTLIER_SIGMA * sd].tolist())

    for bounds in domain_bounds_for(column_name):
        mask = (arr < bounds.minimum) | (arr > bounds.maximum)
        flagged.update(indices[mask].tolist())

    outliers = sorted(int(i) for i in flagged)
    if outliers:
        logger.debug("column %r: %d outliers (mean=%.4g, std=%.4g)", column_name, len(outliers), mean, sd)
    return outliers


#---------0---------------------------
# CONTEXT

def check_context(values: Sequence[Any], column_name: str) -> ContextCheck:
    """
    Validate values against the format implied by the column name.

    "customer_email" -> email regex, "full_name" -> two-word name,
    "age" -> number in [0, 120], "phone" -> digits with separators,
    anything else -> non-empty is valid.
    """
    policy = context_policy_for(column_name)
    valid = 0
    total = 0
    for v in values:
        text = to_text(v).strip()
        if text == "":
            continue
        total += 1
        if policy.check(text):
            valid += 1
    return ContextCheck(valid=valid, total=total, label=policy.label)
