"""Data quality assessor: completeness, cardinality, uniqueness and evenness.

The four dimensions are folded into one weighted score:

    score = w_non_null * non_null_pct + w_fill * fill_rate + w_even * evenness

with weights 0.4 / 0.3 / 0.3 unless configured otherwise (QUALITY_* env).
Evenness is Pielou's index, Shannon entropy over the non-blank values divided
by its maximum log2(distinct values), expressed as a percentage.
"""

from __future__ import annotations

import math

import numpy as np
from scipy.stats import entropy

from config import QualitySettings
from logger import get_logger
from schemas.profiling import (
    CardinalityClass,
    DistributionType,
    DuplicateEntry,
    QualityAssessment,
    QualityLevel,
)
from services.frequency_service import BLANK_VALUE, FrequencyTable

logger = get_logger(__name__)

CARDINALITY_RECOMMENDATIONS: dict[CardinalityClass, str] = {
    "High": "Potential identifier/key field. Candidate primary key or unique identifier.",
    "Medium": "Suitable for filtering and joins. Balanced selectivity for analysis.",
    "Low": "Dimension candidate. Suitable for filtering, grouping and categorical analysis.",
}

SKEWED_TYPES: frozenset[DistributionType] = frozenset({"Moderately Skewed", "Highly Skewed"})

_DISTRIBUTION_TYPES: tuple[DistributionType, ...] = (
    "Very Even",
    "Moderately Even",
    "Slightly Skewed",
    "Moderately Skewed",
)


def _round_half_up(x: float) -> int:
    return int(math.floor(round(x, 9) + 0.5))


def _pct(part: int, whole: int) -> float:
    return part / whole * 100.0 if whole else 0.0


class DataQualityAssessor:
    """Scores a counted column against the configured quality thresholds."""

    def __init__(
        self,
        settings: QualitySettings | None = None,
        *,
        top_duplicates_limit: int = 5,
    ) -> None:
        self.settings = settings or QualitySettings()
        self.top_duplicates_limit = top_duplicates_limit

    # -------------------------------------------------------------------------
    # Classifications
    # -------------------------------------------------------------------------

    def classify_cardinality(self, ratio: float) -> CardinalityClass:
        if ratio > self.settings.high_cardinality_ratio:
            return "High"
        if ratio < self.settings.low_cardinality_ratio:
            return "Low"
        return "Medium"

    def classify_distribution(self, evenness: float) -> DistributionType:
        for threshold, label in zip(self.settings.evenness_thresholds, _DISTRIBUTION_TYPES):
            if evenness >= threshold:
                return label
        return "Highly Skewed"

    def classify_score(self, score: float) -> QualityLevel:
        if score >= self.settings.good_threshold:
            return "Good"
        if score >= self.settings.fair_threshold:
            return "Fair"
        return "Poor"

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    @staticmethod
    def evenness(table: FrequencyTable) -> tuple[float, float]:
        """Return (shannon_entropy, evenness_score) over the non-blank values."""
        k = table.unique_value_count
        if k <= 1:
            return 0.0, 100.0
        counts = np.fromiter(table.counts.values(), dtype=float, count=k)
        h = float(entropy(counts, base=2))
        score = h / math.log2(k) * 100.0
        return h, min(100.0, max(0.0, score))

    def top_duplicates(self, table: FrequencyTable) -> list[DuplicateEntry]:
        """Most frequent repeated values, taken from the sorted distribution."""
        duplicates = [
            DuplicateEntry(value=entry.value, count=entry.count)
            for entry in table.distribution
            if entry.value != BLANK_VALUE and entry.count > 1
        ]
        return duplicates[: self.top_duplicates_limit]

    def assess(self, table: FrequencyTable) -> QualityAssessment:
        """Compute the full quality assessment for one column."""
        total = table.total_rows
        null_count = table.null_count
        empty_count = table.empty_string_count

        non_null_pct = _pct(total - null_count, total)
        fill_rate = _pct(total - null_count - empty_count, total)
        missing_pct = _pct(null_count, total)

        ratio = table.unique_value_count / total if total else 0.0
        cardinality = self.classify_cardinality(ratio)

        singletons = sum(1 for c in table.counts.values() if c == 1)
        duplicated_distinct = sum(1 for c in table.counts.values() if c > 1)

        shannon, evenness = self.evenness(table)
        distribution_type = self.classify_distribution(evenness)

        s = self.settings
        raw_score = (
            s.non_null_weight * non_null_pct
            + s.fill_rate_weight * fill_rate
            + s.evenness_weight * evenness
        )
        score = min(100, max(0, _round_half_up(raw_score)))

        recommendations = [CARDINALITY_RECOMMENDATIONS[cardinality]]
        if total and non_null_pct < s.completeness_warning_pct:
            recommendations.append(f"{missing_pct:.1f}% of values are missing")
        if distribution_type in SKEWED_TYPES:
            recommendations.append(
                f"Distribution is {distribution_type.lower()}; a few values dominate the column"
            )

        logger.debug(
            "Quality assessed",
            score=score,
            cardinality=cardinality,
            distribution_type=distribution_type,
        )
        return QualityAssessment(
            score=score,
            level=self.classify_score(score),
            non_null_percentage=non_null_pct,
            fill_rate=fill_rate,
            missing_count=null_count,
            missing_percentage=missing_pct,
            empty_string_count=empty_count,
            cardinality_ratio=ratio,
            cardinality_class=cardinality,
            unique_percentage=_pct(singletons, total),
            duplicate_count=total - singletons,
            duplicated_distinct_values=duplicated_distinct,
            top_duplicates=self.top_duplicates(table),
            evenness_score=evenness,
            shannon_entropy=shannon,
            distribution_type=distribution_type,
            recommendations=recommendations,
        )
