"""
Pydantic Schemas for the Column Profiler
========================================
Report, request and result models shared by all profiling services.
"""

from .profiling import (
    AffixFrequency,
    CardinalityClass,
    CaseComposition,
    CharacterComposition,
    ColumnKind,
    ColumnProfile,
    DateFormat,
    DateFormatInfo,
    DateGap,
    DateRange,
    DistributionType,
    DuplicateEntry,
    FormatMatch,
    GapAnalysis,
    LengthStats,
    NumericSummary,
    Percentiles,
    PeriodCount,
    ProfileModel,
    ProfilingRequest,
    ProfilingResult,
    ProfilingState,
    QualityAssessment,
    QualityLevel,
    TemporalDistribution,
    TemporalSummary,
    TextSummary,
    TrendAnalysis,
    TrendType,
    ValueFrequency,
)

__all__ = [
    # Base
    'ProfileModel',

    # Literals
    'CardinalityClass',
    'ColumnKind',
    'DateFormat',
    'DistributionType',
    'ProfilingState',
    'QualityLevel',
    'TrendType',

    # Frequency
    'ValueFrequency',

    # Numeric
    'NumericSummary',
    'Percentiles',

    # Text
    'AffixFrequency',
    'CaseComposition',
    'CharacterComposition',
    'FormatMatch',
    'LengthStats',
    'TextSummary',

    # Temporal
    'DateFormatInfo',
    'DateGap',
    'DateRange',
    'GapAnalysis',
    'PeriodCount',
    'TemporalDistribution',
    'TemporalSummary',
    'TrendAnalysis',

    # Quality
    'DuplicateEntry',
    'QualityAssessment',

    # Profiles
    'ColumnProfile',
    'ProfilingRequest',
    'ProfilingResult',
]
