"""
Data Diff Agent Package

Before/after comparison of an original dataset and its cleaned variant.
"""

from .diff_engine import (
    diff_datasets,
    missing_summary,
    tag_rows,
    untag_rows,
    DiffResult,
    RemovedRow,
    ChangedRow,
    CellDiff,
    DEFAULT_ID_COLUMN
)

__all__ = [
    'diff_datasets',
    'missing_summary',
    'tag_rows',
    'untag_rows',
    'DiffResult',
    'RemovedRow',
    'ChangedRow',
    'CellDiff',
    'DEFAULT_ID_COLUMN'
]
