"""
File decoding and CSV export.

This is the only module in the package that touches the filesystem. It
turns CSV / Excel / JSON files into the list-of-dicts datasets the agents
work on, and renders a dataset back to CSV text.
"""

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from .values import as_records, is_missing, is_null, to_text

logger = logging.getLogger(__name__)

DEFAULT_MISSING_INDICATORS = ['', ' ', 'NA', 'N/A', 'null', 'NULL', 'None']


def load_dataset(filepath: str, config: Optional[Dict] = None) -> List[Dict[str, Any]]:
    """
    Decode a CSV/Excel/JSON file into a list of row dicts.

    Args:
        filepath: path ending in .csv, .xlsx, .xls or .json
        config: optional {"missing_indicators": [...]} for CSV/Excel

    Raises:
        ValueError: unsupported file type, or a file with no usable rows
    """
    config = config or {}
    missing_indicators = config.get("missing_indicators", DEFAULT_MISSING_INDICATORS)

    lowered = filepath.lower()
    if lowered.endswith('.csv'):
        df = pd.read_csv(filepath, na_values=missing_indicators, keep_default_na=True)
    elif lowered.endswith(('.xlsx', '.xls')):
        df = pd.read_excel(filepath, na_values=missing_indicators, keep_default_na=True)
    elif lowered.endswith('.json'):
        # keep values as written, no date/dtype guessing
        df = pd.read_json(filepath, orient="records", dtype=False, convert_dates=False)
    else:
        raise ValueError(f"Unsupported file type: {filepath}")

    rows = as_records(df)

    if not rows:
        raise ValueError(f"Your file has no usable data: {filepath}")
    if all(all(is_missing(v) for v in row.values()) for row in rows):
        raise ValueError(f"This file contains only empty rows: {filepath}")

    logger.info("Loaded %d rows x %d columns from %s", len(rows), len(df.columns), filepath)
    return rows


def _encode_cell(value: Any) -> str:
    """JSON-encode one cell; null becomes an empty quoted string."""
    if is_null(value):
        return '""'
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (datetime, date)):
        return json.dumps(value.isoformat())
    # numbers and booleans are bare JSON literals
    return to_text(value)


def export_csv(data: Any) -> str:
    """
    Render a dataset as CSV text.

    Header is the key order of the first row; every cell is JSON-encoded so
    strings are always quoted.
    """
    rows = as_records(data)
    if not rows:
        return ""

    columns = list(rows[0].keys())
    lines = [",".join(str(c) for c in columns)]
    for row in rows:
        lines.append(",".join(_encode_cell(row.get(c)) for c in columns))
    return "\n".join(lines)
