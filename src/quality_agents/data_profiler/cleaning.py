"""
Automatic remediation for profiled datasets.

Plans a list of fixes from a ProfilingReport and applies them to a copy of
the rows. The result is the "cleaned variant" that the diff agent compares
against the original.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from .detectors import ColumnType, numeric_values
from .values import as_records, is_missing

logger = logging.getLogger(__name__)


@dataclass
class Fix:
    """Represents a single remediation action."""
    action: str
    column: Optional[str]
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)


class AutoCleaner:
    """
    Non-interactive cleaner.

    Usage:
        cleaner = AutoCleaner(rows, report)
        cleaned = cleaner.run()

    The rows passed in are never modified.
    """

    def __init__(self, data: Any, report, config: Optional[Dict] = None):
        """
        Args:
            data: rows that were profiled
            report: ProfilingReport from DataProfilerAgent
            config: optional overrides
        """
        self.rows = as_records(data)
        self.report = report
        self.config = {
            "fill_missing": True,
            "trim_strings": True,
            "drop_outlier_rows": False,
            "drop_duplicate_rows": False,
            "protected_columns": [],   # e.g. a row-id column
        }
        if config:
            self.config.update(config)
        self.fixes: List[Fix] = []

    def run(self) -> List[Dict[str, Any]]:
        self.fixes = self.plan()
        return self.apply(self.fixes)

    def plan(self) -> List[Fix]:
        """Turn profile findings into an ordered list of fixes."""
        fixes = []
        protected = set(self.config["protected_columns"])
        outlier_rows = set()

        for name in self.report.columns:
            if name in protected:
                continue
            profile = self.report.column_profiles[name]

            if self.config["fill_missing"] and profile.missing_count > 0:
                if profile.type in (ColumnType.INTEGER, ColumnType.NUMBER):
                    fixes.append(Fix(
                        action="fill_median",
                        column=name,
                        description=f"Fill '{name}' missing values with median",
                    ))
                else:
                    fixes.append(Fix(
                        action="fill_blank",
                        column=name,
                        description=f"Fill '{name}' missing values with empty string",
                    ))

            if self.config["trim_strings"] and profile.type == ColumnType.STRING:
                fixes.append(Fix(
                    action="trim_strings",
                    column=name,
                    description=f"Trim surrounding whitespace in '{name}'",
                ))

            outlier_rows.update(profile.outlier_indices)

        if self.config["drop_outlier_rows"] and outlier_rows:
            fixes.append(Fix(
                action="drop_rows",
                column=None,
                description=f"Drop {len(outlier_rows)} rows with outliers",
                parameters={"indices": sorted(outlier_rows)},
            ))

        if self.config["drop_duplicate_rows"]:
            fixes.append(Fix(
                action="drop_duplicate_rows",
                column=None,
                description="Drop duplicate rows (keep first occurrence)",
                parameters={"keep": "first", "ignore": sorted(protected)},
            ))

        logger.info("Planned %d fixes", len(fixes))
        return fixes

    def apply(self, fixes: List[Fix]) -> List[Dict[str, Any]]:
        """
        Apply fixes in order to a copy of the rows.

        Row indices in fixes always refer to positions in the original
        rows, even after earlier fixes dropped rows.

        Raises:
            ValueError: unknown fix action
        """
        # (original position, row copy)
        working = [(idx, dict(row)) for idx, row in enumerate(self.rows)]

        for fix in fixes:
            if fix.action == "fill_median":
                values = [row.get(fix.column) for _, row in working]
                nums = list(numeric_values(values).values())
                fill = float(np.median(nums)) if nums else ""
                if isinstance(fill, float) and fill.is_integer():
                    fill = int(fill)
                for _, row in working:
                    if is_missing(row.get(fix.column)):
                        row[fix.column] = fill

            elif fix.action == "fill_blank":
                for _, row in working:
                    if is_missing(row.get(fix.column)):
                        row[fix.column] = ""

            elif fix.action == "trim_strings":
                for _, row in working:
                    value = row.get(fix.column)
                    if isinstance(value, str):
                        row[fix.column] = value.strip()

            elif fix.action == "drop_rows":
                drop = set(fix.parameters.get("indices", []))
                working = [(idx, row) for idx, row in working if idx not in drop]

            elif fix.action == "drop_duplicate_rows":
                ignore = set(fix.parameters.get("ignore", []))
                keys = pd.Series([
                    repr(sorted((str(k), repr(v)) for k, v in row.items() if k not in ignore))
                    for _, row in working
                ], dtype=object)
                mask = keys.duplicated(keep=fix.parameters.get("keep", "first"))
                working = [pair for pair, dup in zip(working, mask.tolist()) if not dup]

            else:
                raise ValueError(f"Unknown fix action: {fix.action}")

            logger.debug("applied %s (%d rows remain)", fix.description, len(working))

        return [row for _, row in working]


# Convenience function
def clean_dataset(data: Any, report, config: Optional[Dict] = None) -> List[Dict[str, Any]]:
    """
    Plan and apply automatic fixes.

    Args:
        data: rows that were profiled
        report: ProfilingReport for those rows

    Returns:
        Cleaned rows (new list, new dicts)
    """
    cleaner = AutoCleaner(data, report, config)
    return cleaner.run()
