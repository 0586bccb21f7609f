"""
Quality scoring, recommendations and column ranking.

Everything here works on already-built column profiles; nothing touches
the raw rows.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from .detectors import ColumnType, ContextCheck
from .values import round_half_up

if TYPE_CHECKING:
    from .profiler_agent import ColumnProfile

logger = logging.getLogger(__name__)

# Weights of the three issue ratios. Dashboards and severity colouring
# depend on these and on the clamp bounds below, do not tune them.
MISSING_WEIGHT = 40
DUPLICATE_WEIGHT = 30
OUTLIER_WEIGHT = 20
CONTEXT_WEIGHT = 10

PARTIAL_FLOOR = 34
PARTIAL_CEILING = 90
SCORE_MIN = 0
SCORE_MAX = 100


#---------0---------------------------
# SCORE

@dataclass
class QualityScore:
    partial: int                 # 34..90, from missing/duplicate/outlier ratios
    totals: Dict[str, int]       # {"missing": .., "duplicates": .., "outliers": ..}
    total_cells: int
    context_score: int           # 0..10
    final: int                   # 0..100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "partial": self.partial,
            "totals": dict(self.totals),
            "total_cells": self.total_cells,
            "context_score": self.context_score,
            "final": self.final,
        }


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def context_average(contexts: Iterable[ContextCheck]) -> float:
    """Mean validity ratio across columns, 1.0 when there are no columns."""
    ratios = [c.ratio for c in contexts]
    if not ratios:
        return 1.0
    return sum(ratios) / len(ratios)


def compute_quality_score(profiles: Iterable["ColumnProfile"], row_count: int, column_count: int) -> QualityScore:
    """
    Combine column profiles into a 0-100 score.

    partial = 40*(1-missing) + 30*(1-duplicate) + 20*(1-outlier), each
    ratio being issue count over total cells capped at 1, rounded and
    clamped to [34, 90]. Context validity adds up to 10 more points.
    """
    profiles = list(profiles)
    total_cells = max(1, row_count * max(1, column_count))

    totals = {
        "missing": sum(p.missing_count for p in profiles),
        "duplicates": sum(p.duplicate_count for p in profiles),
        "outliers": sum(p.outlier_count for p in profiles),
    }

    missing_ratio = min(1.0, totals["missing"] / total_cells)
    duplicate_ratio = min(1.0, totals["duplicates"] / total_cells)
    outlier_ratio = min(1.0, totals["outliers"] / total_cells)

    raw = (
        MISSING_WEIGHT * (1 - missing_ratio)
        + DUPLICATE_WEIGHT * (1 - duplicate_ratio)
        + OUTLIER_WEIGHT * (1 - outlier_ratio)
    )
    partial = _clamp(round_half_up(raw), PARTIAL_FLOOR, PARTIAL_CEILING)

    context_score = round_half_up(CONTEXT_WEIGHT * context_average(p.context for p in profiles))
    final = _clamp(partial + context_score, SCORE_MIN, SCORE_MAX)

    logger.debug("score: partial=%d context=%d final=%d totals=%s", partial, context_score, final, totals)
    return QualityScore(
        partial=partial,
        totals=totals,
        total_cells=total_cells,
        context_score=context_score,
        final=final,
    )


def issue_breakdown(score: QualityScore) -> List[Dict[str, Any]]:
    """Issue counts and their share of all cells, normalisation = sum of the rest."""
    cells = score.total_cells or 1
    normalization = score.totals["missing"] + score.totals["duplicates"] + score.totals["outliers"]
    rows = [
        ("Missing Values", score.totals["missing"]),
        ("Duplicate Values", score.totals["duplicates"]),
        ("Outliers", score.totals["outliers"]),
        ("Normalization Needed", normalization),
    ]
    return [
        {"name": name, "count": count, "percent": round_half_up(count / cells * 100)}
        for name, count in rows
    ]


#---------0---------------------------
# RECOMMENDATIONS

class RecommendationCategory(Enum):
    MISSING = "missing"
    DUPLICATE = "duplicate"
    OUTLIER = "outlier"
    NORMALIZATION = "normalization"


@dataclass
class Recommendation:
    column: Optional[str]                        # None for dataset-wide lines
    text: str
    category: Optional[RecommendationCategory]   # None for the "all clean" line

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column": self.column,
            "text": self.text,
            "category": self.category.value if self.category else None,
        }


CLEAN_DATASET_MESSAGE = "No immediate issues detected - dataset looks clean."


def generate_recommendations(profiles: Iterable["ColumnProfile"]) -> List[Recommendation]:
    """
    One line per problem, in profile order.

    For each column: missing, duplicate, outlier lines when the count is
    non-zero, plus a normalisation hint for every string column. An empty
    result is replaced by a single "dataset looks clean" line.
    """
    recs = []
    for profile in profiles:
        name = profile.name

        if profile.missing_count > 0:
            recs.append(Recommendation(
                column=name,
                text=f'{profile.missing_count} missing in column "{name}" - consider imputation or dropping rows.',
                category=RecommendationCategory.MISSING,
            ))

        if profile.duplicate_count > 0:
            recs.append(Recommendation(
                column=name,
                text=f'{profile.duplicate_count} duplicate values found in "{name}" - consider deduplication.',
                category=RecommendationCategory.DUPLICATE,
            ))

        if profile.outlier_count > 0:
            recs.append(Recommendation(
                column=name,
                text=f'{profile.outlier_count} outliers detected in "{name}" - inspect and correct.',
                category=RecommendationCategory.OUTLIER,
            ))

        if profile.type == ColumnType.STRING:
            recs.append(Recommendation(
                column=name,
                text=f'String column "{name}" is editable - consider normalization (trim/case).',
                category=RecommendationCategory.NORMALIZATION,
            ))

    if not recs:
        recs.append(Recommendation(column=None, text=CLEAN_DATASET_MESSAGE, category=None))

    return recs


#---------0---------------------------
# RANKING

class ColumnPriority(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


DEFAULT_PRIORITY_THRESHOLDS = {
    "critical": {"missing": 40, "outliers": 20},
    "high": {"missing": 10, "outliers": 5},
}


@dataclass
class RankedColumn:
    name: str
    missing: int
    outliers: int
    severity: int
    priority: ColumnPriority
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "missing": self.missing,
            "outliers": self.outliers,
            "severity": self.severity,
            "priority": self.priority.value,
            "notes": list(self.notes),
        }


def classify_priority(missing: int, outliers: int, thresholds: Optional[Dict] = None) -> ColumnPriority:
    thresholds = thresholds or DEFAULT_PRIORITY_THRESHOLDS
    critical = thresholds["critical"]
    high = thresholds["high"]

    if missing > critical["missing"] or outliers > critical["outliers"]:
        return ColumnPriority.CRITICAL
    if missing > high["missing"] or outliers > high["outliers"]:
        return ColumnPriority.HIGH
    if missing > 0 or outliers > 0:
        return ColumnPriority.MEDIUM
    return ColumnPriority.LOW


def rank_columns(profiles: Iterable["ColumnProfile"], thresholds: Optional[Dict] = None) -> List[RankedColumn]:
    """
    Columns ordered by severity = missing*3 + outliers*2, worst first.

    Ties keep profile order.
    """
    ranked = []
    for profile in profiles:
        missing = profile.missing_count
        outliers = profile.outlier_count

        notes = []
        if missing > 0:
            notes.append(f"{missing} missing -> use imputation.")
        if outliers > 0:
            notes.append(f"{outliers} outliers -> consider clipping or scaling.")

        ranked.append(RankedColumn(
            name=profile.name,
            missing=missing,
            outliers=outliers,
            severity=missing * 3 + outliers * 2,
            priority=classify_priority(missing, outliers, thresholds),
            notes=notes,
        ))

    # sorted() is stable
    return sorted(ranked, key=lambda c: c.severity, reverse=True)
