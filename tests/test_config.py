"""Tests for settings loading and validation."""

import pytest
from pydantic import ValidationError

from config import LogSettings, ProfilingSettings, QualitySettings, Settings, get_settings


class TestDefaults:

    def test_profiling_defaults(self, profiling_settings):
        assert profiling_settings.max_fields == 3
        assert profiling_settings.max_distribution_entries == 1000
        assert profiling_settings.numeric_threshold == 0.9
        assert profiling_settings.text_threshold == 0.8
        assert profiling_settings.date_threshold == 0.6
        assert profiling_settings.large_dataset_rows == 100_000
        assert profiling_settings.max_workers == 1

    def test_quality_defaults(self, quality_settings):
        assert (
            quality_settings.non_null_weight,
            quality_settings.fill_rate_weight,
            quality_settings.evenness_weight,
        ) == (0.4, 0.3, 0.3)
        assert quality_settings.evenness_thresholds == (80.0, 60.0, 40.0, 20.0)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestEnvironment:

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PROFILER_MAX_DISTRIBUTION_ENTRIES", "50")
        monkeypatch.setenv("QUALITY_GOOD_THRESHOLD", "90")
        settings = Settings()
        assert settings.profiling.max_distribution_entries == 50
        assert settings.quality.good_threshold == 90.0

    def test_max_fields_cannot_exceed_three(self, monkeypatch):
        monkeypatch.setenv("PROFILER_MAX_FIELDS", "4")
        with pytest.raises(ValidationError):
            ProfilingSettings()


class TestValidation:

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValidationError, match="sum to 1.0"):
            QualitySettings(non_null_weight=0.5)

    def test_fair_above_good_is_rejected(self):
        with pytest.raises(ValidationError):
            QualitySettings(good_threshold=40, fair_threshold=60)

    def test_cardinality_bounds(self):
        with pytest.raises(ValidationError):
            QualitySettings(low_cardinality_ratio=0.9, high_cardinality_ratio=0.5)

    @pytest.mark.parametrize(
        "thresholds",
        [(80, 80, 40, 20), (20, 40, 60, 80), (120, 60, 40, 20)],
    )
    def test_evenness_thresholds(self, thresholds):
        with pytest.raises(ValidationError):
            QualitySettings(evenness_thresholds=thresholds)

    def test_debug_not_allowed_in_production(self):
        with pytest.raises(ValidationError, match="DEBUG"):
            Settings(environment="production", log=LogSettings(level="DEBUG"))
