import warnings

import pytest

from survey_analytics.core.correlation import (
    build_correlation_matrix,
    classify_strength,
    correlate,
    safe_correlation,
)
from survey_analytics.core.ipa import perform_derived_ipa

from conftest import build_dataset, wide_rows


@pytest.mark.parametrize("values", [[1, 3, 2, 5, 4], [0.1, 0.2, 0.7, 0.3]])
def test_series_correlates_perfectly_with_itself(values):
    assert safe_correlation(values, values) == 1


def test_scaled_series_is_exactly_one():
    assert safe_correlation([0.1, 0.2, 0.7, 0.3], [0.3, 0.6, 2.1, 0.9]) == 1


def test_inverse_series():
    assert safe_correlation([1, 2, 3, 4], [8, 6, 4, 2]) == -1
    assert safe_correlation([0.1, 0.2, 0.7], [-0.1, -0.2, -0.7]) == -1


def test_degenerate_inputs_return_zero():
    assert safe_correlation([1, 2], [2, 1]) == 0
    assert safe_correlation([1, 2, 3], [1, 2]) == 0
    assert safe_correlation([3, 3, 3], [1, 2, 3]) == 0


def test_constant_series_raise_no_warnings():
    ds = build_dataset(
        wide_rows({
            "Q1": ("a", [1, 2, 3, 4]),
            "Q2": ("b", [2, 1, 4, 3]),
            "Q3": ("c", [3, 3, 3, 3]),
        })
    )
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert safe_correlation([3, 3, 3], [1, 2, 3]) == 0
        assert safe_correlation([1, 2, 3], [5, 5, 5]) == 0
        matrix = build_correlation_matrix(ds)
        result = perform_derived_ipa(ds)

    assert matrix.matrix[0][2] == 0
    assert matrix.matrix[2][2] == 1
    assert {item.question_id: item.importance for item in result.items}["Q3"] == 1.0


def test_repeated_question_is_exactly_one(unlabeled_numeric_dataset):
    result = build_correlation_matrix(unlabeled_numeric_dataset, ["Q1", "Q1"])
    assert result.matrix[0][1] == 1


def test_strength_labels():
    assert classify_strength(0.85) == "strong"
    assert classify_strength(-0.5) == "moderate"
    assert classify_strength(0.25) == "weak"
    assert classify_strength(0.1) == "none"
    result = correlate([1, 2, 3, 4], [2, 4, 6, 8], "a", "b")
    assert result.strength == "strong"
    assert result.variable1 == "a"


def test_matrix_is_symmetric_with_unit_diagonal(unlabeled_numeric_dataset):
    result = build_correlation_matrix(unlabeled_numeric_dataset)
    assert result.variables == ["직원 응대", "시설 청결", "대기 시간"]

    n = len(result.variables)
    for i in range(n):
        assert result.matrix[i][i] == 1
        for j in range(n):
            assert result.matrix[i][j] == result.matrix[j][i]
            assert -1 <= result.matrix[i][j] <= 1


def test_matrix_requires_three_aligned_respondents():
    ds = build_dataset(
        wide_rows({
            "Q1": ("a", [1, 2, 3, None]),
            "Q2": ("b", [None, None, 3, 4]),
            "Q3": ("c", [2, 4, 6, 8]),
        })
    )
    result = build_correlation_matrix(ds)
    assert result.matrix[0][1] == 0
    assert result.matrix[0][2] == 1


def test_explicit_ids_and_empty_dataset(make_dataset, unlabeled_numeric_dataset):
    result = build_correlation_matrix(unlabeled_numeric_dataset, ["Q3", "Q1"])
    assert result.variables == ["대기 시간", "직원 응대"]
    assert build_correlation_matrix(make_dataset([])).matrix == []
