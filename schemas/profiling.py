"""Column profiling schemas for the profiling engine.

All report models are immutable once assembled.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

ColumnKind = Literal["Numeric", "Text", "Mixed", "Empty"]
CardinalityClass = Literal["High", "Medium", "Low"]
QualityLevel = Literal["Good", "Fair", "Poor"]
DistributionType = Literal[
    "Very Even",
    "Moderately Even",
    "Slightly Skewed",
    "Moderately Skewed",
    "Highly Skewed",
]
ProfilingState = Literal[
    "IDLE",
    "VALIDATING",
    "LOADING",
    "COMPUTING",
    "ASSEMBLED",
    "AWAITING_CONFIRMATION",
    "FAILED",
]
DateFormat = Literal[
    "ISO_8601",
    "ISO_DATE",
    "US_DATE",
    "EU_DATE",
    "TIMESTAMP_MS",
    "TIMESTAMP_S",
    "YYYYMMDD",
    "OTHER",
]
TrendType = Literal[
    "insufficient_data",
    "constant",
    "strong_growth",
    "moderate_growth",
    "strong_decline",
    "moderate_decline",
]


class ProfileModel(BaseModel):
    """Base model for report objects: frozen, no unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# =============================================================================
# Frequency distribution
# =============================================================================

class ValueFrequency(ProfileModel):
    """Occurrences of one distinct display value."""

    value: str = Field(..., description="Display string ('' for null/empty)")
    count: int = Field(..., ge=0, description="Occurrences of the value")
    percentage: float = Field(..., ge=0, le=100, description="count / total_rows * 100 (full precision)")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_percentage(self) -> str:
        return f"{self.percentage:.2f}"


# =============================================================================
# Numeric statistics
# =============================================================================

class Percentiles(ProfileModel):
    """Named percentiles (linear interpolation)."""

    p10: float
    p25: float
    p50: float
    p75: float
    p90: float


class NumericSummary(ProfileModel):
    """Descriptive, shape and outlier statistics of a numeric-dominant column."""

    count: int = Field(..., ge=1, description="Numeric values used (nulls and text excluded)")
    non_numeric_count: int = Field(0, ge=0, description="Non-null values that did not parse")
    min: float
    max: float
    sum: float
    mean: float
    median: float
    mode: list[float] = Field(default_factory=list, description="Most frequent values, ascending")
    range: float
    variance: float = Field(..., ge=0, description="Population variance")
    std_dev: float = Field(..., ge=0, description="Population standard deviation")
    q1: float
    q2: float
    q3: float
    iqr: float = Field(..., description="q3 - q1")
    percentiles: Percentiles
    skewness: float | None = Field(None, description="Adjusted Fisher-Pearson skewness (n > 2)")
    kurtosis: float | None = Field(None, description="Excess kurtosis (n > 3)")
    outlier_count: int = Field(..., ge=0)
    outlier_percentage: float = Field(..., ge=0, le=100)
    lower_bound: float
    upper_bound: float
    sample_outliers: list[float] = Field(default_factory=list, description="First outliers in column order")


# =============================================================================
# Text statistics
# =============================================================================

class LengthStats(ProfileModel):
    min: int = Field(..., ge=0)
    max: int = Field(..., ge=0)
    average: float = Field(..., ge=0)
    most_common: int = Field(..., ge=0, description="Most frequent length")
    most_common_count: int = Field(..., ge=0)


class AffixFrequency(ProfileModel):
    """A prefix or suffix shared by several values."""

    affix: str
    count: int = Field(..., ge=1)
    percentage: float = Field(..., ge=0)


class CharacterComposition(ProfileModel):
    alphanumeric_percentage: float
    alphabetic_percentage: float
    numeric_percentage: float
    special_percentage: float
    whitespace_percentage: float
    non_ascii_percentage: float
    non_ascii_count: int = Field(..., ge=0)
    leading_whitespace_count: int = Field(..., ge=0)
    trailing_whitespace_count: int = Field(..., ge=0)


class CaseComposition(ProfileModel):
    uppercase_count: int = Field(..., ge=0)
    lowercase_count: int = Field(..., ge=0)
    mixed_case_count: int = Field(..., ge=0)
    title_case_count: int = Field(..., ge=0)


class FormatMatch(ProfileModel):
    """Values matching a recognised format."""

    count: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)
    samples: list[str] = Field(default_factory=list)
    breakdown: dict[str, int] = Field(default_factory=dict, description="Matches per pattern variant")


class TextSummary(ProfileModel):
    """Composition statistics of the non-empty text values of a column."""

    value_count: int = Field(..., ge=1)
    length: LengthStats
    prefixes: list[AffixFrequency] = Field(default_factory=list)
    suffixes: list[AffixFrequency] = Field(default_factory=list)
    characters: CharacterComposition
    casing: CaseComposition
    formats: dict[str, FormatMatch] = Field(default_factory=dict)


# =============================================================================
# Temporal statistics
# =============================================================================

class DateFormatInfo(ProfileModel):
    """Dominant raw date format among the first values of a column."""

    dominant_format: DateFormat
    description: str
    format_counts: dict[str, int] = Field(default_factory=dict)
    confidence: float = Field(..., ge=0, le=100, description="Share of sampled values in the dominant format")


class DateRange(ProfileModel):
    earliest: datetime
    latest: datetime
    span_days: int = Field(..., ge=0)
    span_description: str
    format: DateFormatInfo


class PeriodCount(ProfileModel):
    period: str
    count: int = Field(..., ge=1)


class TemporalDistribution(ProfileModel):
    """Dates counted per calendar period, in calendar order."""

    by_year: list[PeriodCount] = Field(default_factory=list)
    by_quarter: list[PeriodCount] = Field(default_factory=list)
    by_month: list[PeriodCount] = Field(default_factory=list)
    by_day_of_week: list[PeriodCount] = Field(default_factory=list)


class DateGap(ProfileModel):
    start: datetime
    end: datetime
    days: int = Field(..., ge=1)


class GapAnalysis(ProfileModel):
    """Gaps wider than the expected daily spacing."""

    has_gaps: bool
    gap_count: int = Field(..., ge=0)
    largest_gap: DateGap | None = None
    gaps: list[DateGap] = Field(default_factory=list, description="First gaps in date order")
    coverage: float = Field(..., ge=0, le=100, description="Distinct dates / expected daily dates * 100")
    expected_dates: int = Field(..., ge=0)
    actual_dates: int = Field(..., ge=0)


class TrendAnalysis(ProfileModel):
    """Least-squares trend of date counts per day, week or month."""

    has_trend: bool
    trend_type: TrendType
    description: str
    slope: float | None = None
    group_unit: Literal["day", "week", "month"] | None = None
    period_count: int | None = None


class TemporalSummary(ProfileModel):
    """Range, calendar distribution, gaps and trend of a date-dominant column."""

    date_count: int = Field(..., ge=1, description="Values parsed as dates")
    invalid_date_count: int = Field(..., ge=0, description="Non-blank values that did not parse")
    blank_count: int = Field(..., ge=0)
    valid_percentage: float = Field(..., ge=0, le=100, description="date_count / total_rows * 100")
    range: DateRange
    distribution: TemporalDistribution
    gaps: GapAnalysis
    trend: TrendAnalysis


# =============================================================================
# Quality assessment
# =============================================================================

class DuplicateEntry(ProfileModel):
    value: str
    count: int = Field(..., ge=2)


class QualityAssessment(ProfileModel):
    """Completeness, cardinality, uniqueness and evenness of a column."""

    score: int = Field(..., ge=0, le=100, description="Weighted composite score")
    level: QualityLevel
    non_null_percentage: float = Field(..., ge=0, le=100)
    fill_rate: float = Field(..., ge=0, le=100)
    missing_count: int = Field(..., ge=0)
    missing_percentage: float = Field(..., ge=0, le=100)
    empty_string_count: int = Field(..., ge=0)
    cardinality_ratio: float = Field(..., ge=0, le=1)
    cardinality_class: CardinalityClass
    unique_percentage: float = Field(..., ge=0, le=100)
    duplicate_count: int = Field(..., ge=0)
    duplicated_distinct_values: int = Field(..., ge=0)
    top_duplicates: list[DuplicateEntry] = Field(default_factory=list)
    evenness_score: float = Field(..., ge=0, le=100)
    shannon_entropy: float = Field(..., ge=0)
    distribution_type: DistributionType
    recommendations: list[str] = Field(default_factory=list)


# =============================================================================
# Column profile and request/result
# =============================================================================

class ColumnProfile(ProfileModel):
    """Per-column report returned to the caller."""

    field_name: str
    kind: ColumnKind
    total_rows: int = Field(..., ge=0)
    unique_value_count: int = Field(..., ge=0, description="Distinct non-empty values")
    null_count: int = Field(..., ge=0)
    empty_string_count: int = Field(0, ge=0)
    distribution: list[ValueFrequency] = Field(default_factory=list)
    truncated: bool = False
    numeric_summary: NumericSummary | None = None
    text_summary: TextSummary | None = None
    temporal_summary: TemporalSummary | None = None
    quality: QualityAssessment | None = None
    error: str | None = Field(None, description="Set when a step after the frequency pass failed")


class ProfilingRequest(BaseModel):
    """Fields to profile and the caller's answer to the large-dataset warning.

    Selection rules are enforced by the orchestrator so that a bad selection
    surfaces as InvalidSelectionError.
    """

    model_config = ConfigDict(frozen=True)

    field_names: list[str] = Field(default_factory=list)
    proceed_despite_size_warning: bool = False


class ProfilingResult(ProfileModel):
    """Outcome of one profiling run."""

    state: ProfilingState
    total_rows: int = Field(0, ge=0)
    per_field: list[ColumnProfile] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)
    requires_confirmation: bool = False
