"""Tests for the data quality assessor."""

import math
import random

import pytest

from config import QualitySettings
from services.data_quality_service import CARDINALITY_RECOMMENDATIONS, DataQualityAssessor
from services.frequency_service import FrequencyDistributionBuilder


@pytest.fixture
def builder() -> FrequencyDistributionBuilder:
    return FrequencyDistributionBuilder()


@pytest.fixture
def assessor() -> DataQualityAssessor:
    return DataQualityAssessor()


def assess(builder, assessor, values):
    return assessor.assess(builder.build(values))


# =============================================================================
# Completeness
# =============================================================================

class TestCompleteness:

    def test_complete_column(self, builder, assessor, example_column):
        q = assess(builder, assessor, example_column)
        assert q.non_null_percentage == 100.0
        assert q.fill_rate == 100.0
        assert q.missing_count == 0
        assert q.missing_percentage == 0.0

    def test_mostly_null_column_is_poor(self, builder, assessor, mostly_null_column):
        q = assess(builder, assessor, mostly_null_column)
        assert q.non_null_percentage == pytest.approx(5.0)
        assert q.fill_rate == pytest.approx(5.0)
        assert q.missing_count == 95
        assert q.level == "Poor"
        # 0.4 * 5 + 0.3 * 5 + 0.3 * 100 = 33.5, rounded half up
        assert q.score == 34
        assert "95.0% of values are missing" in q.recommendations

    def test_empty_strings_lower_fill_rate_only(self, builder, assessor):
        q = assess(builder, assessor, ["", "", "a", "b"])
        assert q.non_null_percentage == 100.0
        assert q.fill_rate == 50.0
        assert q.empty_string_count == 2
        assert q.missing_count == 0


# =============================================================================
# Cardinality
# =============================================================================

class TestCardinality:

    def test_example_column_is_medium(self, builder, assessor, example_column):
        q = assess(builder, assessor, example_column)
        assert q.cardinality_ratio == pytest.approx(0.3)
        assert q.cardinality_class == "Medium"
        assert q.recommendations[0] == CARDINALITY_RECOMMENDATIONS["Medium"]

    def test_identifier_column_is_high(self, builder, assessor):
        q = assess(builder, assessor, [f"id-{i}" for i in range(10)])
        assert q.cardinality_class == "High"
        assert q.recommendations == [CARDINALITY_RECOMMENDATIONS["High"]]

    def test_dimension_column_is_low(self, builder, assessor):
        q = assess(builder, assessor, ["a"] * 60 + ["b"] * 40)
        assert q.cardinality_ratio == pytest.approx(0.02)
        assert q.cardinality_class == "Low"

    @pytest.mark.parametrize(
        "ratio, expected",
        [(0.81, "High"), (0.8, "Medium"), (0.05, "Medium"), (0.049, "Low"), (0.0, "Low")],
    )
    def test_class_boundaries(self, assessor, ratio, expected):
        assert assessor.classify_cardinality(ratio) == expected


# =============================================================================
# Uniqueness
# =============================================================================

class TestUniqueness:

    def test_example_column(self, builder, assessor, example_column):
        q = assess(builder, assessor, example_column)
        assert q.unique_percentage == 0.0
        assert q.duplicate_count == 10
        assert q.duplicated_distinct_values == 3
        assert [(d.value, d.count) for d in q.top_duplicates] == [("3", 5), ("1", 3), ("2", 2)]

    def test_singletons(self, builder, assessor):
        q = assess(builder, assessor, ["a", "b", "c", "c"])
        assert q.unique_percentage == pytest.approx(50.0)
        assert q.duplicate_count == 2
        assert q.duplicated_distinct_values == 1

    def test_top_duplicates_skip_blank_and_cap_at_five(self, builder, assessor):
        values = [None] * 20 + [v for v in "abcdefg" for _ in range(3)] + ["z"]
        q = assess(builder, assessor, values)
        assert [d.value for d in q.top_duplicates] == ["a", "b", "c", "d", "e"]


# =============================================================================
# Evenness
# =============================================================================

class TestEvenness:

    def test_example_column(self, builder, assessor, example_column):
        q = assess(builder, assessor, example_column)
        h = -(0.5 * math.log2(0.5) + 0.3 * math.log2(0.3) + 0.2 * math.log2(0.2))
        assert q.shannon_entropy == pytest.approx(h)
        assert q.evenness_score == pytest.approx(h / math.log2(3) * 100)
        assert q.distribution_type == "Very Even"
        assert q.score == 98
        assert q.level == "Good"

    def test_single_value_is_perfectly_even(self, builder, assessor):
        q = assess(builder, assessor, ["a"] * 5)
        assert q.evenness_score == 100.0
        assert q.shannon_entropy == 0.0

    def test_highly_skewed_column(self, builder, assessor):
        values = ["a"] * 991 + [f"rare-{i}" for i in range(9)]
        q = assess(builder, assessor, values)
        assert q.evenness_score < 20
        assert q.distribution_type == "Highly Skewed"
        assert q.level == "Fair"
        assert q.recommendations[-1].startswith("Distribution is highly skewed")

    @pytest.mark.parametrize(
        "evenness, expected",
        [
            (80.0, "Very Even"),
            (79.9, "Moderately Even"),
            (60.0, "Moderately Even"),
            (59.9, "Slightly Skewed"),
            (40.0, "Slightly Skewed"),
            (39.9, "Moderately Skewed"),
            (20.0, "Moderately Skewed"),
            (19.9, "Highly Skewed"),
        ],
    )
    def test_distribution_type_boundaries(self, assessor, evenness, expected):
        assert assessor.classify_distribution(evenness) == expected

    @pytest.mark.parametrize("seed", range(10))
    def test_evenness_is_bounded(self, builder, assessor, seed):
        rng = random.Random(seed)
        values = [rng.choice([None, "", *"abcdef"]) for _ in range(rng.randint(1, 400))]
        q = assess(builder, assessor, values)
        assert 0.0 <= q.evenness_score <= 100.0


# =============================================================================
# Score and configuration
# =============================================================================

class TestScore:

    def test_zero_rows(self, builder, assessor):
        q = assess(builder, assessor, [])
        assert q.non_null_percentage == 0.0
        assert q.fill_rate == 0.0
        assert q.cardinality_ratio == 0.0
        assert q.evenness_score == 100.0
        assert q.score == 30
        assert q.level == "Poor"
        assert q.recommendations == [CARDINALITY_RECOMMENDATIONS["Low"]]

    @pytest.mark.parametrize("score, expected", [(80, "Good"), (79, "Fair"), (50, "Fair"), (49, "Poor")])
    def test_level_boundaries(self, assessor, score, expected):
        assert assessor.classify_score(score) == expected

    def test_custom_weights(self, builder):
        assessor = DataQualityAssessor(
            QualitySettings(non_null_weight=0.5, fill_rate_weight=0.5, evenness_weight=0.0)
        )
        q = assessor.assess(builder.build(["", "a", "b", "c"]))
        # 0.5 * 100 + 0.5 * 75
        assert q.score == 88

    def test_recommendation_order(self, builder, assessor):
        values = [None] * 150 + ["a"] * 845 + ["b", "c", "d", "e", "f"]
        q = assess(builder, assessor, values)
        assert len(q.recommendations) == 3
        assert q.recommendations[0] == CARDINALITY_RECOMMENDATIONS["Low"]
        assert q.recommendations[1].endswith("of values are missing")
        assert q.recommendations[2].startswith("Distribution is")
