"""Tests for the in-memory and pandas column providers."""

import numpy as np
import pandas as pd
import pytest

from core.exceptions import FieldNotFoundError
from services.column_provider import (
    ColumnProvider,
    DataFrameColumnProvider,
    InMemoryColumnProvider,
)


class TestInMemoryColumnProvider:

    def test_columns_and_row_count(self):
        provider = InMemoryColumnProvider({"a": [1, 2, 3], "b": ["x", "y", "z"]})
        assert provider.get_total_row_count() == 3
        assert list(provider.get_column_values("b")) == ["x", "y", "z"]
        assert provider.field_names == ["a", "b"]

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryColumnProvider({}), ColumnProvider)

    def test_unknown_field(self):
        provider = InMemoryColumnProvider({"a": [1]})
        with pytest.raises(FieldNotFoundError) as exc_info:
            provider.get_column_values("missing")
        assert exc_info.value.field_name == "missing"

    def test_unequal_lengths_are_rejected(self):
        with pytest.raises(ValueError, match="same length"):
            InMemoryColumnProvider({"a": [1, 2], "b": [1]})

    def test_columns_are_copied(self):
        source = [1, 2]
        provider = InMemoryColumnProvider({"a": source})
        source.append(3)
        assert len(provider.get_column_values("a")) == 2

    def test_empty_dataset(self):
        provider = InMemoryColumnProvider({"a": []})
        assert provider.get_total_row_count() == 0


class TestFromRows:

    def test_missing_keys_become_none(self):
        rows = [{"id": 1, "name": "x"}, {"id": 2}]
        provider = InMemoryColumnProvider.from_rows(rows)
        assert provider.field_names == ["id", "name"]
        assert list(provider.get_column_values("name")) == ["x", None]
        assert provider.get_total_row_count() == 2

    def test_explicit_field_names(self):
        provider = InMemoryColumnProvider.from_rows([{"a": 1, "b": 2}], field_names=["b"])
        assert provider.field_names == ["b"]

    def test_no_rows_and_no_fields(self):
        provider = InMemoryColumnProvider.from_rows([])
        assert provider.get_total_row_count() == 0
        assert provider.field_names == []


class TestDataFrameColumnProvider:

    def test_missing_markers_become_none(self):
        frame = pd.DataFrame({"amount": [1.5, np.nan, 3.0], "label": ["a", None, "c"]})
        provider = DataFrameColumnProvider(frame)

        assert provider.get_total_row_count() == 3
        assert provider.get_column_values("amount") == [1.5, None, 3.0]
        assert provider.get_column_values("label") == ["a", None, "c"]
        assert provider.field_names == ["amount", "label"]

    def test_unknown_field(self):
        provider = DataFrameColumnProvider(pd.DataFrame({"a": [1]}))
        with pytest.raises(FieldNotFoundError):
            provider.get_column_values("b")

    def test_satisfies_protocol(self):
        assert isinstance(DataFrameColumnProvider(pd.DataFrame()), ColumnProvider)
