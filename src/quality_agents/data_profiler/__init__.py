"""
Data Profiler Agent Package

Contains the dataset profiling agent, its detectors, the quality scorer
and the automatic cleaner.
"""

from .profiler_agent import (
    DataProfilerAgent,
    profile_dataset,
    profile_file,
    format_report_text,
    format_report_json,
    ColumnProfile,
    CellFlags,
    ProfilingReport
)

from .detectors import (
    ColumnType,
    ContextCheck,
    infer_column_type,
    count_missing,
    count_duplicates,
    find_duplicate_values,
    detect_outliers,
    check_context
)

from .dates import (
    DateKind,
    DateParseResult,
    detect_date_format,
    date_range
)

from .scoring import (
    QualityScore,
    Recommendation,
    RecommendationCategory,
    ColumnPriority,
    RankedColumn,
    compute_quality_score,
    generate_recommendations,
    rank_columns
)

from .policies import ContextLabel

from .cache import (
    ProfileCache,
    dataset_fingerprint
)

from .cleaning import (
    AutoCleaner,
    clean_dataset,
    Fix
)

from .loaders import (
    load_dataset,
    export_csv
)

__all__ = [
    'DataProfilerAgent',
    'profile_dataset',
    'profile_file',
    'format_report_text',
    'format_report_json',
    'ColumnProfile',
    'CellFlags',
    'ProfilingReport',
    'ColumnType',
    'ContextCheck',
    'ContextLabel',
    'infer_column_type',
    'count_missing',
    'count_duplicates',
    'find_duplicate_values',
    'detect_outliers',
    'check_context',
    'DateKind',
    'DateParseResult',
    'detect_date_format',
    'date_range',
    'QualityScore',
    'Recommendation',
    'RecommendationCategory',
    'ColumnPriority',
    'RankedColumn',
    'compute_quality_score',
    'generate_recommendations',
    'rank_columns',
    'ProfileCache',
    'dataset_fingerprint',
    'AutoCleaner',
    'clean_dataset',
    'Fix',
    'load_dataset',
    'export_csv'
]
