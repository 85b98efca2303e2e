import pytest

from survey_analytics.core.descriptive import (
    BasicStats,
    analyze_questions,
    calculate_basic_stats,
    calculate_frequency_distribution,
)
from survey_analytics.core.question_index import (
    align_by_respondent,
    build_question_index,
    dominant_response_type,
    extract_numeric_values,
    numeric_question_ids,
)
from survey_analytics.core.models import AnalysisDataset, SurveyResponse


class TestBasicStats:

    def test_empty_input(self):
        stats = calculate_basic_stats([])
        assert stats == BasicStats(
            count=0, mean=0, median=0, mode=None, min=0, max=0, variance=0, std_dev=0, sum=0
        )

    def test_sample_variance(self):
        stats = calculate_basic_stats([1, 2, 2, 3])
        assert stats.count == 4
        assert stats.mean == pytest.approx(2.0)
        assert stats.median == pytest.approx(2.0)
        assert stats.mode == 2
        assert stats.min == 1
        assert stats.max == 3
        assert stats.variance == pytest.approx(2 / 3)
        assert stats.std_dev == pytest.approx((2 / 3) ** 0.5)
        assert stats.sum == pytest.approx(8.0)

    def test_single_value_has_zero_spread(self):
        stats = calculate_basic_stats([4])
        assert stats.variance == 0
        assert stats.std_dev == 0
        assert stats.mode == 4

    def test_mode_tie_takes_smallest(self):
        assert calculate_basic_stats([3, 1, 3, 1]).mode == 1


class TestFrequencyDistribution:

    def test_empty(self):
        assert calculate_frequency_distribution([]) == []

    def test_percentages_sum_to_100(self):
        buckets = calculate_frequency_distribution([1, 2, 2, "a", True, 5, 5, 5])
        assert sum(b.percentage for b in buckets) == pytest.approx(100.0)

    def test_raw_identity_is_preserved(self):
        buckets = calculate_frequency_distribution([True, 1, 2, 2, "a"])
        assert [b.value for b in buckets] == [1, 2, "a", True]
        assert not isinstance(buckets[0].value, bool)
        assert isinstance(buckets[-1].value, bool)
        assert [b.count for b in buckets] == [1, 2, 1, 1]

    def test_numbers_sort_numerically(self):
        buckets = calculate_frequency_distribution([10, 9, 2.5, 10.0])
        assert [b.value for b in buckets] == [2.5, 9, 10]
        assert buckets[-1].count == 2
        assert buckets[-1].percentage == pytest.approx(50.0)


class TestQuestionIndex:

    def test_dominant_type_majority(self, make_dataset):
        ds = make_dataset([
            ("R1", "Q1", "a", 1, "numeric"),
            ("R2", "Q1", "a", "보통", "likert"),
            ("R3", "Q1", "a", "만족", "likert"),
        ])
        assert dominant_response_type(ds.responses) == "likert"

    def test_dominant_type_tie_keeps_first_seen(self, make_dataset):
        ds = make_dataset([
            ("R1", "Q1", "a", "보통", "likert"),
            ("R2", "Q1", "a", 1, "numeric"),
        ])
        assert dominant_response_type(ds.responses) == "likert"

    def test_first_label_wins(self, make_dataset):
        ds = make_dataset([
            ("R1", "Q1", "First label", 1, "numeric"),
            ("R2", "Q1", "Second label", 2, "numeric"),
            ("R1", "Q2", "", 3, "numeric"),
        ])
        index = build_question_index(ds)
        assert list(index) == ["Q1", "Q2"]
        assert index["Q1"].label == "First label"
        assert index["Q2"].label == "Q2"

    def test_first_category_wins(self):
        ds = AnalysisDataset(
            project_id="p",
            project_name="P",
            responses=[
                SurveyResponse("R1-Q1", "R1", "Q1", "응대", 4, "numeric", category="A"),
                SurveyResponse("R2-Q1", "R2", "Q1", "응대", 5, "numeric", category="B"),
                SurveyResponse("R1-Q2", "R1", "Q2", "시설", 3, "numeric"),
                SurveyResponse("R2-Q2", "R2", "Q2", "시설", 2, "numeric", category="C"),
            ],
        )
        index = build_question_index(ds)
        assert index["Q1"].category == "A"
        assert index["Q2"].category is None

        stats = analyze_questions(ds)
        assert [s.category for s in stats] == ["A", None]

    def test_response_type_is_required(self):
        with pytest.raises(TypeError):
            SurveyResponse("R1-Q1", "R1", "Q1", "응대", 4)

    def test_text_responses_excluded_from_numeric(self, mixed_dataset):
        assert extract_numeric_values(mixed_dataset.responses, "Q1") == [5, 3, 4]
        assert extract_numeric_values(mixed_dataset.responses, "Q2") == [1, 0, 1]
        assert extract_numeric_values(mixed_dataset.responses, "Q2", include_boolean=False) == []
        assert numeric_question_ids(mixed_dataset) == ["Q1", "Q2"]

    def test_alignment_keeps_shared_respondents(self, make_dataset):
        ds = make_dataset([
            ("R1", "Q1", "a", 1, "numeric"),
            ("R2", "Q1", "a", 2, "numeric"),
            ("R3", "Q1", "a", "모름", "text"),
            ("R2", "Q2", "b", 5, "numeric"),
            ("R1", "Q2", "b", 4, "numeric"),
            ("R3", "Q2", "b", 6, "numeric"),
        ])
        assert align_by_respondent(ds.responses, "Q1", "Q2") == ([1, 2], [4, 5])


def test_analyze_questions(mixed_dataset):
    results = analyze_questions(mixed_dataset)
    by_id = {r.question_id: r for r in results}

    q1 = by_id["Q1"]
    assert q1.response_type == "likert"
    assert q1.response_count == 3
    assert q1.stats.mean == pytest.approx(4.0)

    q3 = by_id["Q3"]
    assert q3.response_type == "text"
    assert q3.stats.count == 0
    assert q3.stats.mode is None
    assert sum(b.count for b in q3.distribution) == 3
