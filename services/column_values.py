"""Raw column value helpers: null detection, display strings, numeric parsing.

A column is scanned once; the resulting ColumnScan carries its kind so no
later step has to re-inspect individual values to decide how to treat them.
"""

from __future__ import annotations

import math
import numbers
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from schemas.profiling import ColumnKind

# Standard decimal notation: sign, digits, optional fraction, optional exponent
_DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def is_null(value: Any) -> bool:
    """None and float NaN are nulls. The empty string is not."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def is_blank(value: Any) -> bool:
    """True for anything that lands in the null/empty distribution bucket."""
    return is_null(value) or (isinstance(value, str) and value == "")


def display_string(value: Any) -> str:
    """Normalize a raw value to the string shown in distributions."""
    if is_blank(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_number(value: Any) -> float | None:
    """Return the finite float a value represents, or None.

    Strings must be in standard decimal notation (surrounding whitespace
    allowed). Booleans are not numbers.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, numbers.Real):
        x = float(value)
        return x if math.isfinite(x) else None
    if isinstance(value, str):
        s = value.strip()
        if not _DECIMAL_PATTERN.match(s):
            return None
        x = float(s)
        return x if math.isfinite(x) else None
    return None


def classify_kind(
    numeric_count: int,
    non_numeric_count: int,
    *,
    numeric_threshold: float = 0.9,
    text_threshold: float = 0.8,
) -> ColumnKind:
    """Decide the column kind from the share of numeric non-null values."""
    present = numeric_count + non_numeric_count
    if present == 0:
        return "Empty"
    if numeric_count / present >= numeric_threshold:
        return "Numeric"
    if non_numeric_count / present >= text_threshold:
        return "Text"
    return "Mixed"


@dataclass(frozen=True)
class ColumnScan:
    """Single-pass classification of a column's raw values."""

    total_rows: int
    null_count: int
    empty_string_count: int
    numbers: list[float] = field(default_factory=list)
    non_numeric_count: int = 0
    kind: ColumnKind = "Empty"

    @property
    def present_count(self) -> int:
        return len(self.numbers) + self.non_numeric_count

    @property
    def numeric_share(self) -> float:
        if self.present_count == 0:
            return 0.0
        return len(self.numbers) / self.present_count


def scan_column(
    values: Sequence[Any],
    *,
    numeric_threshold: float = 0.9,
    text_threshold: float = 0.8,
) -> ColumnScan:
    """Split a column into nulls, empties, numbers (column order) and text."""
    null_count = 0
    empty_count = 0
    non_numeric = 0
    parsed: list[float] = []
    for v in values:
        if is_null(v):
            null_count += 1
            continue
        if isinstance(v, str) and v == "":
            empty_count += 1
            continue
        x = parse_number(v)
        if x is None:
            non_numeric += 1
        else:
            parsed.append(x)
    return ColumnScan(
        total_rows=len(values),
        null_count=null_count,
        empty_string_count=empty_count,
        numbers=parsed,
        non_numeric_count=non_numeric,
        kind=classify_kind(
            len(parsed),
            non_numeric,
            numeric_threshold=numeric_threshold,
            text_threshold=text_threshold,
        ),
    )
