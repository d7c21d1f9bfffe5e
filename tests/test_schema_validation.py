"""Validation tests for the profiling result schemas.

Result models are frozen and reject unknown fields so a host layer cannot
silently attach or alter values after a run.
"""

import pytest
from pydantic import ValidationError

from schemas import (
    ColumnProfile,
    DuplicateEntry,
    ProfilingRequest,
    ProfilingResult,
    ValueFrequency,
)


class TestValueFrequency:

    def test_display_percentage_is_serialized(self):
        entry = ValueFrequency(value="a", count=1, percentage=100 / 3)
        assert entry.model_dump()["display_percentage"] == "33.33"

    @pytest.mark.parametrize("percentage", [-1.0, 100.5])
    def test_percentage_bounds(self, percentage):
        with pytest.raises(ValidationError):
            ValueFrequency(value="a", count=1, percentage=percentage)

    def test_frozen(self):
        entry = ValueFrequency(value="a", count=1, percentage=10.0)
        with pytest.raises(ValidationError):
            entry.count = 2

    def test_extra_fields_are_rejected(self):
        with pytest.raises(ValidationError):
            ValueFrequency(value="a", count=1, percentage=10.0, rank=1)


class TestQualityModels:

    def test_duplicates_need_two_occurrences(self):
        with pytest.raises(ValidationError):
            DuplicateEntry(value="a", count=1)


class TestProfiles:

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(ValidationError):
            ColumnProfile(field_name="a", kind="Date", total_rows=1, unique_value_count=1, null_count=0)

    def test_minimal_profile(self):
        profile = ColumnProfile(
            field_name="a", kind="Empty", total_rows=0, unique_value_count=0, null_count=0
        )
        assert profile.quality is None
        assert profile.truncated is False

    def test_result_round_trips_through_json(self):
        result = ProfilingResult(state="FAILED", errors={"a": "boom"})
        assert ProfilingResult.model_validate_json(result.model_dump_json()) == result

    def test_unknown_state_is_rejected(self):
        with pytest.raises(ValidationError):
            ProfilingResult(state="RUNNING")


class TestRequest:

    def test_defaults(self):
        req = ProfilingRequest(field_names=["a"])
        assert req.proceed_despite_size_warning is False

    def test_selection_rules_are_left_to_the_orchestrator(self):
        req = ProfilingRequest(field_names=["a", "a", "b", "c"])
        assert len(req.field_names) == 4
