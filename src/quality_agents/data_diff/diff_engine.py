"""
Diff Engine - before/after comparison of an original and a cleaned dataset.

Rows are matched by position by default: row i of the original is compared
with row i of the cleaned dataset. That only holds up while cleaning never
drops or reorders rows in the middle; once it does, every later row lines up
against the wrong partner and shows as "changed". Callers that drop rows
should tag rows with a stable id first (tag_rows) and diff by that id.
"""

import json
import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..data_profiler.values import as_records, is_missing, round_half_up, to_text

logger = logging.getLogger(__name__)

DEFAULT_ID_COLUMN = "_row_id"


@dataclass
class CellDiff:
    before: Any
    after: Any


@dataclass
class RemovedRow:
    index: int                      # position in the original dataset
    original_row: Dict[str, Any]


@dataclass
class ChangedRow:
    index: int                      # position in the original dataset
    cell_diffs: Dict[str, CellDiff]
    original_row: Dict[str, Any]
    cleaned_row: Dict[str, Any]


@dataclass
class DiffResult:
    """Rows that disappeared or changed between original and cleaned."""
    removed: List[RemovedRow] = field(default_factory=list)
    changed: List[ChangedRow] = field(default_factory=list)
    matched_by: str = "position"     # "position" or the id column used

    @property
    def is_empty(self) -> bool:
        return not self.removed and not self.changed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matched_by": self.matched_by,
            "removed": [
                {"index": r.index, "original_row": r.original_row}
                for r in self.removed
            ],
            "changed": [
                {
                    "index": c.index,
                    "cell_diffs": {
                        col: {"before": d.before, "after": d.after}
                        for col, d in c.cell_diffs.items()
                    },
                    "original_row": c.original_row,
                    "cleaned_row": c.cleaned_row,
                }
                for c in self.changed
            ],
        }


#---------0---------------------------
# ROW IDENTITY

def tag_rows(data: Any, id_column: str = DEFAULT_ID_COLUMN, start: int = 0) -> List[Dict[str, Any]]:
    """Copy of the rows with a stable id (the original position) added to each."""
    return [{**row, id_column: start + idx} for idx, row in enumerate(as_records(data))]


def untag_rows(data: Any, id_column: str = DEFAULT_ID_COLUMN) -> List[Dict[str, Any]]:
    return [{k: v for k, v in row.items() if k != id_column} for row in as_records(data)]


#---------0---------------------------
# DIFFING

def _row_key(row: Dict[str, Any]) -> str:
    """Exact serialised form, key order included."""
    return json.dumps(row, default=str, separators=(",", ":"))


def _cell_diffs(original_row: Dict[str, Any], cleaned_row: Dict[str, Any], columns: List[str]) -> Dict[str, CellDiff]:
    """Columns whose string-normalised values differ ("" == None, 3 == 3.0)."""
    diffs = {}
    for col in columns:
        before = original_row.get(col)
        after = cleaned_row.get(col)
        if to_text(before) != to_text(after):
            diffs[col] = CellDiff(before=before, after=after)
    return diffs


def _diff_by_position(original, cleaned, columns) -> DiffResult:
    result = DiffResult(matched_by="position")
    cleaned_keys = {_row_key(row) for row in cleaned}

    for idx, row in enumerate(original):
        # present anywhere in the cleaned data, untouched
        if _row_key(row) in cleaned_keys:
            continue

        if idx >= len(cleaned):
            result.removed.append(RemovedRow(index=idx, original_row=row))
            continue

        cleaned_row = cleaned[idx]
        diffs = _cell_diffs(row, cleaned_row, columns)
        if diffs:
            result.changed.append(ChangedRow(
                index=idx, cell_diffs=diffs, original_row=row, cleaned_row=cleaned_row,
            ))
        # equal after normalisation (e.g. 3 vs 3.0): neither removed nor changed

    return result


def _diff_by_id(original, cleaned, columns, id_column: str) -> DiffResult:
    result = DiffResult(matched_by=id_column)
    cleaned_by_id = {}
    for row in cleaned:
        key = to_text(row.get(id_column))
        if key != "":
            cleaned_by_id.setdefault(key, row)

    untagged = 0
    for idx, row in enumerate(original):
        raw_id = row.get(id_column)
        if is_missing(raw_id):
            untagged += 1
        cleaned_row = cleaned_by_id.get(to_text(raw_id)) if not is_missing(raw_id) else None

        if cleaned_row is None:
            result.removed.append(RemovedRow(index=idx, original_row=row))
            continue

        diffs = _cell_diffs(row, cleaned_row, columns)
        if diffs:
            result.changed.append(ChangedRow(
                index=idx, cell_diffs=diffs, original_row=row, cleaned_row=cleaned_row,
            ))

    if untagged:
        warnings.warn(
            f"{untagged} original rows have no '{id_column}' value and cannot be matched; "
            f"they are reported as removed.",
            UserWarning
        )
    return result


def diff_datasets(original: Any, cleaned: Any, id_column: Optional[str] = None) -> DiffResult:
    """
    Compare an original dataset with its cleaned variant.

    Args:
        original: rows before cleaning (list of dicts or DataFrame)
        cleaned: rows after cleaning
        id_column: match rows by this column instead of by position

    Returns:
        DiffResult. Only original rows are walked, rows appended to the
        cleaned dataset are not reported.
    """
    original_rows = as_records(original)
    cleaned_rows = as_records(cleaned)

    if original_rows:
        columns = list(original_rows[0].keys())
    elif cleaned_rows:
        columns = list(cleaned_rows[0].keys())
    else:
        columns = []

    if id_column is None:
        if len(original_rows) != len(cleaned_rows):
            warnings.warn(
                f"Positional diff over datasets of different length "
                f"({len(original_rows)} vs {len(cleaned_rows)} rows): rows after the first "
                f"removal may be misreported as changed. Tag rows with tag_rows() and pass "
                f"id_column to match by identity.",
                UserWarning
            )
        result = _diff_by_position(original_rows, cleaned_rows, columns)
    else:
        result = _diff_by_id(original_rows, cleaned_rows, [c for c in columns if c != id_column], id_column)

    logger.info(
        "Diff (%s): %d removed, %d changed out of %d original rows",
        result.matched_by, len(result.removed), len(result.changed), len(original_rows),
    )
    return result


#---------0---------------------------
# SUMMARIES

def missing_summary(original: Any, cleaned: Any) -> List[Dict[str, Any]]:
    """Per-column missing counts and percentages before and after cleaning."""
    original_rows = as_records(original)
    cleaned_rows = as_records(cleaned)
    source = original_rows or cleaned_rows
    columns = list(source[0].keys()) if source else []

    before_total = len(original_rows)
    after_total = len(cleaned_rows)

    summary = []
    for col in columns:
        before_missing = sum(1 for row in original_rows if is_missing(row.get(col)))
        after_missing = sum(1 for row in cleaned_rows if is_missing(row.get(col)))
        summary.append({
            "column": col,
            "before_missing": before_missing,
            "after_missing": after_missing,
            "before_total": before_total,
            "after_total": after_total,
            "before_missing_pct": round_half_up(before_missing * 100 / before_total) if before_total else 0,
            "after_missing_pct": round_half_up(after_missing * 100 / after_total) if after_total else 0,
        })
    return summary
