"""Column providers: the capability the orchestrator loads column values from.

The engine never decodes files itself. A host hands it any object satisfying
ColumnProvider; two in-memory implementations are included for hosts that
already hold the decoded table.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import pandas as pd

from core.exceptions import FieldNotFoundError


@runtime_checkable
class ColumnProvider(Protocol):
    """Source of fully materialized column values."""

    def get_column_values(self, field_name: str) -> Sequence[Any]:
        """Return every raw value of a field, in row order.

        Raises:
            FieldNotFoundError: If the dataset has no such field.
        """
        ...

    def get_total_row_count(self) -> int:
        ...


class InMemoryColumnProvider:
    """Provider over a mapping of field name to column values."""

    def __init__(self, columns: Mapping[str, Sequence[Any]]) -> None:
        lengths = {len(values) for values in columns.values()}
        if len(lengths) > 1:
            raise ValueError(f"All columns must have the same length (got {sorted(lengths)})")
        # Tuples so callers cannot mutate the columns mid-run
        self._columns: dict[str, tuple[Any, ...]] = {
            name: tuple(values) for name, values in columns.items()
        }
        self._row_count = lengths.pop() if lengths else 0

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Mapping[str, Any]],
        field_names: Sequence[str] | None = None,
    ) -> "InMemoryColumnProvider":
        """Build column series from row dicts; missing keys become None."""
        rows = list(rows)
        if field_names is None:
            seen: dict[str, None] = {}
            for r in rows:
                seen.update(dict.fromkeys(r))
            field_names = list(seen)
        columns: dict[str, list[Any]] = {f: [] for f in field_names}
        for r in rows:
            for f in field_names:
                columns[f].append(r.get(f))
        provider = cls(columns)
        provider._row_count = len(rows)
        return provider

    @property
    def field_names(self) -> list[str]:
        return list(self._columns)

    def get_column_values(self, field_name: str) -> Sequence[Any]:
        try:
            return self._columns[field_name]
        except KeyError:
            raise FieldNotFoundError(field_name) from None

    def get_total_row_count(self) -> int:
        return self._row_count


class DataFrameColumnProvider:
    """Provider over a pandas DataFrame.

    Missing markers (NaN, None, NaT, pd.NA) are handed to the engine as None.
    """

    def __init__(self, frame: pd.DataFrame) -> None:
        self._frame = frame

    @property
    def field_names(self) -> list[str]:
        return [str(c) for c in self._frame.columns]

    def get_column_values(self, field_name: str) -> Sequence[Any]:
        if field_name not in self._frame.columns:
            raise FieldNotFoundError(field_name)
        series = self._frame[field_name].astype(object)
        return series.where(series.notna(), None).tolist()

    def get_total_row_count(self) -> int:
        return len(self._frame.index)
