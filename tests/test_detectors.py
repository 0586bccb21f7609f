"""
Tests for the per-column detectors and value helpers
"""

import math
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quality_agents.data_profiler.detectors import (
    ColumnType,
    check_context,
    count_duplicates,
    count_missing,
    count_unique,
    detect_outliers,
    find_duplicate_values,
    infer_column_type,
    numeric_summary,
)
from quality_agents.data_profiler.policies import ContextLabel, context_policy_for
from quality_agents.data_profiler.values import round_half_up, to_number, to_text


#---------0---------------------------
# values

def test_to_number_readings():
    assert to_number(" 42 ") == 42.0
    assert to_number("") == 0.0
    assert to_number(True) == 1.0
    assert to_number("0x1A") == 26.0
    assert to_number("Infinity") == math.inf
    assert to_number("abc") is None
    assert to_number("nan") is None
    assert to_number(None) is None
    assert to_number(float("nan")) is None


def test_to_text_normalises_numbers():
    assert to_text(3) == to_text(3.0) == "3"
    assert to_text(None) == ""
    assert to_text(float("nan")) == ""
    assert to_text(False) == "false"
    assert to_text(2.5) == "2.5"


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(8.5) == 9
    assert round_half_up(2.4) == 2


#---------0---------------------------
# type inference

@pytest.mark.parametrize("values, expected", [
    ([], ColumnType.UNKNOWN),
    ([None, "", float("nan")], ColumnType.UNKNOWN),
    ([1, 2, 3], ColumnType.INTEGER),
    (["1", " 2 ", "3", None], ColumnType.INTEGER),
    ([1.5, "2"], ColumnType.NUMBER),
    (["a", 1], ColumnType.STRING),
    (["2021-03-07", "2022-01-01"], ColumnType.DATE),
    ([1700000000, 1700000500], ColumnType.DATE),
])
def test_infer_column_type(values, expected):
    assert infer_column_type(values) == expected


def test_date_wins_over_integer():
    # whole numbers in the unix-seconds window are dates first
    assert infer_column_type(["1700000000"]) == ColumnType.DATE


#---------0---------------------------
# missing / duplicates

def test_count_missing():
    assert count_missing([1, None, "", 3]) == 2
    assert count_missing([0, False, " "]) == 0
    assert count_missing([float("nan")]) == 1


def test_count_duplicates_counts_every_occurrence():
    assert count_duplicates(["a", "b", "a", "c"]) == 2
    assert find_duplicate_values(["a", "b", "a", "c"]) == {"a"}


def test_duplicates_are_trimmed_and_skip_missing():
    assert count_duplicates([" a", "a ", "a"]) == 3
    assert count_duplicates([None, None, "", ""]) == 0
    assert count_duplicates([3, 3.0, "3"]) == 3


def test_count_unique():
    assert count_unique(["a", "a", "", None, "b"]) == 3
    assert count_unique([1, True, 1.0]) == 2


#---------0---------------------------
# outliers

def test_outlier_exactly_three_sigma_not_flagged():
    # mean 1, population std 3: |10 - 1| == 3 * 3
    values = [0] * 9 + [10]
    assert detect_outliers(values, ColumnType.INTEGER, "score") == []


def test_outlier_beyond_three_sigma_flagged():
    values = [0] * 10 + [10]
    assert detect_outliers(values, ColumnType.INTEGER, "score") == [10]


def test_constant_column_has_no_outliers():
    assert detect_outliers([5, 5, 5, 5], ColumnType.INTEGER, "score") == []


def test_age_bounds_flag_impossible_values():
    assert detect_outliers([-1, 150], ColumnType.INTEGER, "age") == [0, 1]
    assert detect_outliers([0, 120], ColumnType.INTEGER, "Patient_Age") == []
    # zero spread, bounds still apply
    assert detect_outliers([150, 150], ColumnType.INTEGER, "age") == [0, 1]


def test_outlier_indices_refer_to_full_column():
    values = [None, "abc", 200, -5]
    assert detect_outliers(values, ColumnType.STRING, "age") == [2, 3]


def test_date_columns_skip_sigma_rule():
    values = [1700000000] * 10 + [1999999999]
    assert detect_outliers(values, ColumnType.DATE, "signup") == []


def test_date_columns_keep_age_bounds():
    # 70, 85 and 150 all sit in the Excel serial window
    assert detect_outliers([70, 85, 150], ColumnType.DATE, "age") == [2]


def test_numeric_summary():
    stats = numeric_summary([1, "3", None, "x"])
    assert stats == {"mean": 2.0, "std": 1.0, "min": 1.0, "max": 3.0}
    assert numeric_summary([None, "x"]) is None


#---------0---------------------------
# context

def test_email_context():
    check = check_context(["a@b.com", "bad", "", None], "Customer_Email")
    assert (check.valid, check.total, check.label) == (1, 2, ContextLabel.EMAIL)


def test_name_context():
    check = check_context(["Ada Lovelace", "ada"], "full_name")
    assert (check.valid, check.total, check.label) == (1, 2, ContextLabel.NAME)


def test_age_context():
    check = check_context(["30", "130", "x"], "age")
    assert (check.valid, check.total) == (1, 3)


def test_phone_context():
    check = check_context(["+1 555 123 4567", "12"], "phone")
    assert (check.valid, check.total, check.label) == (1, 2, ContextLabel.PHONE)


def test_generic_context_ignores_blank():
    check = check_context(["Paris", " ", None], "city")
    assert (check.valid, check.total, check.label) == (1, 1, ContextLabel.STRING)


def test_empty_context_ratio_is_one():
    assert check_context([], "email").ratio == 1.0


def test_context_policy_order():
    # email is checked before name
    assert context_policy_for("email_name").label == ContextLabel.EMAIL
    assert context_policy_for("username").label == ContextLabel.NAME
    assert context_policy_for("Phone_Number").label == ContextLabel.PHONE
