"""
Tests for the Diff Engine
"""

import sys
from pathlib import Path

import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quality_agents.data_diff import (
    DEFAULT_ID_COLUMN,
    diff_datasets,
    missing_summary,
    tag_rows,
    untag_rows,
)


def test_identical_copy_has_no_diff():
    original = [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]
    cleaned = [dict(r) for r in original]

    result = diff_datasets(original, cleaned)

    assert result.is_empty
    assert result.matched_by == "position"


def test_trailing_row_removed():
    original = [{"a": 1}, {"a": 2}]

    with pytest.warns(UserWarning):
        result = diff_datasets(original, [{"a": 1}])

    assert [r.index for r in result.removed] == [1]
    assert result.removed[0].original_row == {"a": 2}
    assert result.changed == []


def test_changed_cell():
    original = [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]
    cleaned = [{"a": 1, "b": "x"}, {"a": 2, "b": "Y"}]

    result = diff_datasets(original, cleaned)

    assert result.removed == []
    assert len(result.changed) == 1
    change = result.changed[0]
    assert change.index == 1
    assert list(change.cell_diffs) == ["b"]
    assert change.cell_diffs["b"].before == "y"
    assert change.cell_diffs["b"].after == "Y"


def test_normalised_equal_rows_are_not_reported():
    original = [{"a": 3, "b": None}]
    cleaned = [{"a": 3.0, "b": ""}]

    result = diff_datasets(original, cleaned)

    assert result.is_empty


def test_reordered_rows_are_found():
    result = diff_datasets([{"a": 1}, {"a": 2}], [{"a": 2}, {"a": 1}])
    assert result.is_empty


def test_appended_rows_are_ignored():
    with pytest.warns(UserWarning):
        result = diff_datasets([{"a": 1}], [{"a": 1}, {"a": 2}])
    assert result.is_empty


def test_positional_misalignment_after_middle_drop():
    original = [{"a": 1}, {"a": 2}, {"a": 3}]

    with pytest.warns(UserWarning):
        result = diff_datasets(original, [{"a": 2}, {"a": 3}])

    # row 0 lines up against the old row 1
    assert [c.index for c in result.changed] == [0]
    assert result.removed == []


def test_identity_diff_reports_middle_drop():
    original = tag_rows([{"a": 1}, {"a": 2}, {"a": 3}])
    cleaned = [original[0], {**original[2], "a": 30}]

    result = diff_datasets(original, cleaned, id_column=DEFAULT_ID_COLUMN)

    assert result.matched_by == DEFAULT_ID_COLUMN
    assert [r.index for r in result.removed] == [1]
    assert [c.index for c in result.changed] == [2]
    assert DEFAULT_ID_COLUMN not in result.changed[0].cell_diffs


def test_identity_diff_warns_on_untagged_rows():
    original = [{"a": 1, "_row_id": 0}, {"a": 2}]

    with pytest.warns(UserWarning):
        result = diff_datasets(original, [{"a": 1, "_row_id": 0}], id_column="_row_id")

    assert [r.index for r in result.removed] == [1]


def test_tag_and_untag_rows():
    rows = [{"a": 1}, {"a": 2}]
    tagged = tag_rows(rows)

    assert tagged == [{"a": 1, "_row_id": 0}, {"a": 2, "_row_id": 1}]
    assert rows == [{"a": 1}, {"a": 2}]
    assert untag_rows(tagged) == rows


def test_dataframe_inputs():
    original = pd.DataFrame({"a": [1.0, None]})
    cleaned = pd.DataFrame({"a": [1.0, 1.0]})

    result = diff_datasets(original, cleaned)

    assert [c.index for c in result.changed] == [1]
    assert result.to_dict()["changed"][0]["cell_diffs"]["a"] == {"before": None, "after": 1.0}


def test_missing_summary():
    original = [{"a": None, "b": "x"}, {"a": 1, "b": ""}, {"a": 2, "b": "y"}]
    cleaned = [{"a": 1, "b": "x"}, {"a": 1, "b": ""}]

    summary = {row["column"]: row for row in missing_summary(original, cleaned)}

    assert summary["a"]["before_missing"] == 1
    assert summary["a"]["before_missing_pct"] == 33
    assert summary["a"]["after_missing"] == 0
    assert summary["b"]["after_missing"] == 1
    assert summary["b"]["after_missing_pct"] == 50
    assert summary["b"]["after_total"] == 2


def test_missing_summary_empty():
    assert missing_summary([], []) == []
