"""
Data Profiler Agent

Profiles a tabular dataset (a list of row dicts or a DataFrame) and
produces a quality assessment: per-column type, missing / duplicate /
outlier counts, context validity, a 0-100 quality score and ranked
remediation recommendations.

The agent is stateless between calls. Every report is rebuilt from the
rows it is given.
"""

import logging
import warnings
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .cache import ProfileCache, dataset_fingerprint
from .dates import looks_like_birthday, parse_dates
from .detectors import (
    ColumnType,
    ContextCheck,
    check_context,
    count_missing,
    count_unique,
    detect_outliers,
    duplicate_row_indices,
    infer_column_type,
    numeric_summary,
)
from .scoring import (
    DEFAULT_PRIORITY_THRESHOLDS,
    QualityScore,
    RankedColumn,
    Recommendation,
    compute_quality_score,
    context_average,
    generate_recommendations,
    issue_breakdown,
    rank_columns,
)
from .values import as_records, is_missing, is_null, round_half_up, to_text

logger = logging.getLogger(__name__)


#---------0---------------------------
#DATACLASSES

@dataclass
class ColumnProfile:
    name: str                        # Column name
    type: ColumnType                 # Inferred from non-empty values, fixed for the pass
    unique_count: int                # Distinct non-null values
    missing_count: int               # None / NaN / ""
    duplicate_count: int             # Every row holding a repeated value
    outlier_indices: List[int]       # Row positions in the full dataset
    context: ContextCheck            # Name-driven format validity
    sample_values: List[Any] = field(default_factory=list)
    mean: Optional[float] = None     # numeric columns only
    std: Optional[float] = None      # population std
    min_val: Optional[float] = None
    max_val: Optional[float] = None
    date_min: Optional[datetime] = None   # date columns only
    date_max: Optional[datetime] = None
    looks_like_birthday: bool = False

    @property
    def outlier_count(self) -> int:
        return len(self.outlier_indices)


@dataclass
class CellFlags:
    missing: bool = False
    duplicate: bool = False
    outlier: bool = False


@dataclass
class ProfilingReport:
    summary: Dict[str, Any]                      # Quick stats {total_rows: 1000, ...}
    columns: List[str]                           # Column order used for the pass
    column_profiles: Dict[str, ColumnProfile]    # Per-column analysis
    score: QualityScore
    recommendations: List[Recommendation]
    ranked_columns: List[RankedColumn]
    issue_breakdown: List[Dict[str, Any]]
    string_store: Dict[str, List[str]]           # Editable vocabulary of string columns
    cell_flags: List[Dict[str, CellFlags]] = field(default_factory=list)

    @property
    def final_score(self) -> int:
        return self.score.final


#---------0---------------------------

#AGENT: DataProfilerAgent

class DataProfilerAgent:
    """
    Profiles datasets for quality issues.

    Steps performed per column:
    1. Type inference (date / integer / number / string)
    2. Missing and duplicate counts
    3. Outliers (3-sigma plus name-driven bounds)
    4. Context validity (email / name / age / phone)
    Then the whole set is scored, ranked and turned into recommendations.

    Usage:
        agent = DataProfilerAgent()
        report = agent.profile(rows)
        print(report.final_score)
    """

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize the agent.

        Args:
            config: Optional configuration overrides
        """
        self.config = {
            "column_count": 0,             # synthetic col1..colN when there are no rows to read names from
            "priority_thresholds": DEFAULT_PRIORITY_THRESHOLDS,
            "max_examples": 5,             # sample values kept per column
            "include_cell_flags": True,
        }

        if config:
            self.config.update(config)

    def profile(self, data: Any) -> ProfilingReport:
        """
        Main entry point. Profiles a dataset.

        Args:
            data: list of row dicts, or a DataFrame

        Returns:
            ProfilingReport with all findings
        """
        rows = as_records(data)
        columns = self._resolve_columns(rows)

        profiles = {}
        duplicate_positions = {}
        for col in columns:
            values = [row.get(col) for row in rows]
            profiles[col], duplicate_positions[col] = self._profile_column(col, values)

        ordered = [profiles[c] for c in columns]
        score = compute_quality_score(ordered, len(rows), len(columns))

        report = ProfilingReport(
            summary=self._build_summary(rows, columns, ordered, score),
            columns=columns,
            column_profiles=profiles,
            score=score,
            recommendations=generate_recommendations(ordered),
            ranked_columns=rank_columns(ordered, self.config["priority_thresholds"]),
            issue_breakdown=issue_breakdown(score),
            string_store=self._build_string_store(rows, ordered),
        )

        if self.config["include_cell_flags"]:
            report.cell_flags = self._build_cell_flags(rows, ordered, duplicate_positions)

        logger.info(
            "Profiled %d rows x %d columns: score %d (missing=%d, duplicates=%d, outliers=%d)",
            len(rows), len(columns), score.final,
            score.totals["missing"], score.totals["duplicates"], score.totals["outliers"],
        )
        return report

    #---------0---------------------------
    # per-column work

    def _resolve_columns(self, rows: List[Dict[str, Any]]) -> List[str]:
        """Column names come from the first row's keys."""
        if not rows:
            return [f"col{i + 1}" for i in range(self.config["column_count"])]

        columns = list(rows[0].keys())

        known = set(columns)
        extra = sorted({str(k) for row in rows[1:] for k in row.keys() if k not in known})
        if extra:
            warnings.warn(
                f"Rows have keys missing from the first row, they are ignored: {extra[:10]}",
                UserWarning
            )
        return columns

    def _profile_column(self, col: str, values: List[Any]):
        """Build one ColumnProfile. Also returns the duplicate row positions for cell flags."""
        column_type = infer_column_type(values)
        dup_positions = duplicate_row_indices(values)

        profile = ColumnProfile(
            name=col,
            type=column_type,
            unique_count=count_unique(values),
            missing_count=count_missing(values),
            duplicate_count=len(dup_positions),
            outlier_indices=detect_outliers(values, column_type, col),
            context=check_context(values, col),
            sample_values=[v for v in values if not is_missing(v)][: self.config["max_examples"]],
        )

        # numeric stats only make sense for numeric columns
        if column_type in (ColumnType.INTEGER, ColumnType.NUMBER):
            stats = numeric_summary(values)
            if stats:
                profile.mean = stats["mean"]
                profile.std = stats["std"]
                profile.min_val = stats["min"]
                profile.max_val = stats["max"]

        elif column_type == ColumnType.DATE:
            parsed = parse_dates(values)
            if parsed:
                profile.date_min = min(parsed)
                profile.date_max = max(parsed)
            profile.looks_like_birthday = looks_like_birthday(values)

        logger.debug(
            "column %r: type=%s missing=%d duplicates=%d outliers=%d context=%d/%d",
            col, column_type.value, profile.missing_count, profile.duplicate_count,
            profile.outlier_count, profile.context.valid, profile.context.total,
        )
        return profile, set(dup_positions)

    #---------0---------------------------
    # report building

    def _build_summary(self, rows, columns, profiles: List[ColumnProfile], score: QualityScore) -> Dict[str, Any]:
        type_counts = {}
        for p in profiles:
            type_counts[p.type.value] = type_counts.get(p.type.value, 0) + 1

        return {
            "total_rows": len(rows),
            "total_columns": len(columns),
            "column_types": type_counts,
            "total_missing_values": score.totals["missing"],
            "total_duplicate_values": score.totals["duplicates"],
            "total_outliers": score.totals["outliers"],
            "total_cells": score.total_cells,
            "context_validity": f"{round_half_up(context_average(p.context for p in profiles) * 100)}%",
            "quality_score": score.final,
        }

    def _build_string_store(self, rows, profiles: List[ColumnProfile]) -> Dict[str, List[str]]:
        """Distinct non-empty values of every string column, first-seen order."""
        store = {}
        for p in profiles:
            if p.type != ColumnType.STRING:
                continue
            texts = (to_text(row.get(p.name)) for row in rows if not is_null(row.get(p.name)))
            store[p.name] = list(dict.fromkeys(t for t in texts if t != ""))
        return store

    def _build_cell_flags(self, rows, profiles: List[ColumnProfile], duplicate_positions) -> List[Dict[str, CellFlags]]:
        outlier_sets = {p.name: set(p.outlier_indices) for p in profiles}
        flags = []
        for idx, row in enumerate(rows):
            row_flags = {}
            for p in profiles:
                row_flags[p.name] = CellFlags(
                    missing=is_missing(row.get(p.name)),
                    duplicate=idx in duplicate_positions[p.name],
                    outlier=idx in outlier_sets[p.name],
                )
            flags.append(row_flags)
        return flags


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

def profile_dataset(data: Any, config: Optional[Dict] = None, cache: Optional[ProfileCache] = None) -> ProfilingReport:
    """
    Convenience function to profile a dataset.

    When a cache is passed, reports are memoised on a fingerprint of the
    rows plus the config, so any edit to the data misses the cache.
    """
    agent = DataProfilerAgent(config=config)
    if cache is None:
        return agent.profile(data)

    rows = as_records(data)
    key = dataset_fingerprint(rows, agent.config)
    report = cache.get(key)
    if report is None:
        report = agent.profile(rows)
        cache.set(key, report)
    return report


def profile_file(filepath: str, config: Optional[Dict] = None) -> ProfilingReport:
    """Convenience function to profile a CSV/Excel/JSON file."""
    from .loaders import load_dataset

    rows = load_dataset(filepath, config)
    return profile_dataset(rows, config)


# ============================================================
# REPORT FORMATTING
# ============================================================

def _iso_day(value: Optional[datetime]) -> Optional[str]:
    return value.date().isoformat() if value else None


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def format_report_text(report: ProfilingReport) -> str:
    """Format report as human-readable text."""

    lines = []
    lines.append("=" * 60)
    lines.append("DATA QUALITY PROFILE")
    lines.append("=" * 60)

    lines.append(f"\nQuality Score: {report.score.final}/100")
    lines.append(f"  partial: {report.score.partial}  context: +{report.score.context_score}")

    lines.append(f"\n--- Summary ---")
    for key, value in report.summary.items():
        lines.append(f"  {key}: {value}")

    lines.append(f"\n--- Columns ---")
    for name in report.columns:
        p = report.column_profiles[name]
        lines.append(
            f"  {name} [{p.type.value}] unique={p.unique_count} missing={p.missing_count} "
            f"duplicates={p.duplicate_count} outliers={p.outlier_count} "
            f"context={p.context.valid}/{p.context.total} ({p.context.label.value})"
        )
        if p.date_min and p.date_max:
            lines.append(f"     dates: {_iso_day(p.date_min)} -> {_iso_day(p.date_max)}")

    attention = [c for c in report.ranked_columns if c.severity > 0]
    if attention:
        lines.append(f"\n--- Columns Needing Attention ({len(attention)}) ---")
        for col in attention:
            lines.append(f"  [{col.priority.value.upper()}] {col.name}: {' '.join(col.notes)}")

    lines.append(f"\n--- Recommendations ---")
    for rec in report.recommendations:
        lines.append(f"  • {rec.text}")

    lines.append("\n" + "=" * 60)
    return "\n".join(lines)


def format_report_json(report: ProfilingReport) -> Dict:
    """Format report as JSON-serializable dict."""

    def profile_to_dict(profile: ColumnProfile) -> Dict:
        return {
            "name": profile.name,
            "type": profile.type.value,
            "unique_count": profile.unique_count,
            "missing_count": profile.missing_count,
            "duplicate_count": profile.duplicate_count,
            "outlier_indices": list(profile.outlier_indices),
            "context": {
                "valid": profile.context.valid,
                "total": profile.context.total,
                "label": profile.context.label.value,
            },
            "sample_values": [_json_value(v) for v in profile.sample_values],
            "mean": profile.mean,
            "std": profile.std,
            "min_val": profile.min_val,
            "max_val": profile.max_val,
            "date_range": [_iso_day(profile.date_min), _iso_day(profile.date_max)] if profile.date_min else None,
            "looks_like_birthday": profile.looks_like_birthday,
        }

    return {
        "summary": report.summary,
        "columns": list(report.columns),
        "column_profiles": {n: profile_to_dict(p) for n, p in report.column_profiles.items()},
        "score": report.score.to_dict(),
        "recommendations": [r.to_dict() for r in report.recommendations],
        "ranked_columns": [c.to_dict() for c in report.ranked_columns],
        "issue_breakdown": report.issue_breakdown,
        "string_store": {k: list(v) for k, v in report.string_store.items()},
    }


# ============================================================
# MAIN
# ============================================================

if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO)

    print("Data Profiler Agent")
    print("=" * 40)

    if len(sys.argv) > 1:
        filepath = sys.argv[1]
        print(f"\nProfiling: {filepath}")
        report = profile_file(filepath)
    else:
        print("\nNo file provided. Running demo...")

        sample_data = [
            {"name": "Ada Lovelace", "email": "ada@example.com", "age": 36, "signup": "2021-03-07"},
            {"name": "alan", "email": "alan@example", "age": 150, "signup": "07/06/2021"},
            {"name": "Grace Hopper", "email": "", "age": 85, "signup": "1700000000"},
            {"name": "Grace Hopper", "email": "grace@example.com", "age": -1, "signup": None},
        ]
        print(f"\nSample data: {len(sample_data)} rows")
        report = profile_dataset(sample_data)

    print(format_report_text(report))
