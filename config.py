"""Column Profiler — Configuration Management.

Strictly-typed configuration system using pydantic-settings.
All settings are loaded from environment variables with validation.

The quality weights and classification thresholds are product-chosen
constants; they live here so a deployment can tune them without code changes.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProfilingSettings(BaseSettings):
    """Profiling engine limits and detection thresholds.

    Attributes:
        max_fields: Maximum number of fields per profiling request.
        max_distribution_entries: Distribution entries kept before truncation.
        numeric_threshold: Share of non-null values that must parse as numbers.
        text_threshold: Share of non-null values that must be non-numeric text.
        date_threshold: Share of non-blank values that must parse as dates for
            temporal analysis.
        large_dataset_rows: Row count above which confirmation is required.
        sample_outlier_limit: Outliers reported in sample_outliers.
        top_duplicates_limit: Entries reported in top_duplicates.
        outlier_iqr_multiplier: Fence width in IQR units.
        max_workers: Threads used across fields (1 = sequential).
    """

    model_config = SettingsConfigDict(
        env_prefix="PROFILER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_fields: int = Field(default=3, ge=1, le=3, description="Max fields per request")
    max_distribution_entries: int = Field(
        default=1000,
        ge=1,
        description="Distribution entries kept before truncation",
    )
    numeric_threshold: float = Field(default=0.9, gt=0, le=1, description="Numeric-dominance threshold")
    text_threshold: float = Field(default=0.8, gt=0, le=1, description="Text-dominance threshold")
    date_threshold: float = Field(default=0.6, gt=0, le=1, description="Date-dominance threshold")
    large_dataset_rows: int = Field(default=100_000, ge=0, description="Large dataset warning threshold (rows)")
    sample_outlier_limit: int = Field(default=10, ge=0, le=1000, description="Sample outliers reported")
    top_duplicates_limit: int = Field(default=5, ge=0, le=100, description="Top duplicates reported")
    outlier_iqr_multiplier: float = Field(default=1.5, gt=0, description="IQR fence multiplier")
    max_workers: int = Field(default=1, ge=1, le=3, description="Worker threads across fields")


class QualitySettings(BaseSettings):
    """Data quality scoring weights and classification thresholds.

    Attributes:
        non_null_weight: Weight of the non-null percentage in the score.
        fill_rate_weight: Weight of the fill rate in the score.
        evenness_weight: Weight of the evenness score in the score.
        good_threshold: Minimum score classified as Good.
        fair_threshold: Minimum score classified as Fair.
        high_cardinality_ratio: Ratio above which cardinality is High.
        low_cardinality_ratio: Ratio below which cardinality is Low.
        completeness_warning_pct: Non-null percentage below which a warning is added.
        evenness_thresholds: Lower bounds for Very Even, Moderately Even,
            Slightly Skewed and Moderately Skewed (descending).
    """

    model_config = SettingsConfigDict(
        env_prefix="QUALITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    non_null_weight: float = Field(default=0.4, ge=0, le=1, description="Non-null weight")
    fill_rate_weight: float = Field(default=0.3, ge=0, le=1, description="Fill rate weight")
    evenness_weight: float = Field(default=0.3, ge=0, le=1, description="Evenness weight")
    good_threshold: float = Field(default=80.0, ge=0, le=100, description="Good score threshold")
    fair_threshold: float = Field(default=50.0, ge=0, le=100, description="Fair score threshold")
    high_cardinality_ratio: float = Field(default=0.8, ge=0, le=1, description="High cardinality ratio")
    low_cardinality_ratio: float = Field(default=0.05, ge=0, le=1, description="Low cardinality ratio")
    completeness_warning_pct: float = Field(default=90.0, ge=0, le=100, description="Completeness warning (%)")
    evenness_thresholds: tuple[float, float, float, float] = Field(
        default=(80.0, 60.0, 40.0, 20.0),
        description="Evenness class lower bounds",
    )

    @field_validator("evenness_thresholds")
    @classmethod
    def validate_evenness_thresholds(cls, v: tuple[float, float, float, float]) -> tuple[float, float, float, float]:
        """Ensure evenness thresholds are strictly descending percentages."""
        if any(not 0 <= t <= 100 for t in v):
            raise ValueError("Evenness thresholds must be within 0-100")
        if any(a <= b for a, b in zip(v, v[1:])):
            raise ValueError("Evenness thresholds must be strictly descending")
        return v

    @model_validator(mode="after")
    def validate_weights_and_bounds(self) -> "QualitySettings":
        """Weights must sum to 1 and lower bounds must sit below upper ones."""
        total = self.non_null_weight + self.fill_rate_weight + self.evenness_weight
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Quality weights must sum to 1.0 (got {total:.4f})")
        if self.fair_threshold > self.good_threshold:
            raise ValueError("fair_threshold cannot exceed good_threshold")
        if self.low_cardinality_ratio > self.high_cardinality_ratio:
            raise ValueError("low_cardinality_ratio cannot exceed high_cardinality_ratio")
        return self


class LogSettings(BaseSettings):
    """Logging configuration for observability.

    Attributes:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format: Log output format (json for production, text for development).
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    format: Literal["json", "text"] = Field(
        default="json",
        description="Log format (json for production)",
    )


class Settings(BaseSettings):
    """Root application settings aggregating all configuration sections.

    Use get_settings() to obtain a cached singleton instance.

    Example:
        >>> settings = get_settings()
        >>> settings.profiling.max_distribution_entries
        1000
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Column Profiler", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )

    profiling: ProfilingSettings = Field(default_factory=ProfilingSettings)
    quality: QualitySettings = Field(default_factory=QualitySettings)
    log: LogSettings = Field(default_factory=LogSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Keep DEBUG logging out of production."""
        if self.environment == "production" and self.log.level == "DEBUG":
            raise ValueError("DEBUG log level is not allowed in production")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()
