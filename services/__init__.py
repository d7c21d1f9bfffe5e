"""Column Profiler — Service Layer.

Services:
    - FrequencyDistributionBuilder: value counts and sorted distributions
    - NumericStatisticsEngine: descriptive, shape and outlier statistics
    - TextAnalysisEngine: length, affix, character and format statistics
    - TemporalAnalysisEngine: date range, calendar distribution, gaps and trend
    - DataQualityAssessor: completeness, cardinality, evenness, quality score
    - ProfilingOrchestrator: request validation and per-field assembly

Usage:
    from services import InMemoryColumnProvider, ProfilingOrchestrator
    from schemas import ProfilingRequest

    provider = InMemoryColumnProvider({"amount": [1, 2, 2, None]})
    result = ProfilingOrchestrator(provider).profile(
        ProfilingRequest(field_names=["amount"])
    )
"""

from services.column_provider import (
    ColumnProvider,
    DataFrameColumnProvider,
    InMemoryColumnProvider,
)
from services.data_profiler_service import FieldOutcome, ProfilingOrchestrator
from services.data_quality_service import DataQualityAssessor
from services.frequency_service import FrequencyDistributionBuilder, FrequencyTable
from services.numeric_statistics_service import NumericStatisticsEngine
from services.temporal_analysis_service import TemporalAnalysisEngine
from services.text_analysis_service import TextAnalysisEngine

__all__ = [
    "ColumnProvider",
    "DataFrameColumnProvider",
    "InMemoryColumnProvider",
    "FieldOutcome",
    "ProfilingOrchestrator",
    "DataQualityAssessor",
    "FrequencyDistributionBuilder",
    "FrequencyTable",
    "NumericStatisticsEngine",
    "TemporalAnalysisEngine",
    "TextAnalysisEngine",
]
