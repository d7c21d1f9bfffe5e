"""Frequency distribution builder: counts every distinct display value of a column."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from config import ProfilingSettings
from logger import get_logger
from schemas.profiling import ValueFrequency
from services.column_values import display_string, is_null

logger = get_logger(__name__)

# Display value of the bucket shared by nulls and empty strings
BLANK_VALUE = ""


@dataclass(frozen=True)
class FrequencyTable:
    """Counted values of one column.

    `counts` holds every non-blank distinct value, including those cut from a
    truncated `distribution`.
    """

    total_rows: int
    distribution: list[ValueFrequency]
    counts: Mapping[str, int] = field(default_factory=dict)
    unique_value_count: int = 0
    null_count: int = 0
    empty_string_count: int = 0
    truncated: bool = False

    @property
    def blank_count(self) -> int:
        return self.null_count + self.empty_string_count

    @property
    def omitted_count(self) -> int:
        """Distinct non-blank values left out of a truncated distribution."""
        kept = sum(1 for e in self.distribution if e.value != BLANK_VALUE)
        return self.unique_value_count - kept


def _sort_key(item: tuple[str, int]) -> tuple[int, str]:
    """Count descending, then value ascending."""
    value, count = item
    return (-count, value)


class FrequencyDistributionBuilder:
    """Builds sorted, possibly truncated value distributions."""

    def __init__(self, settings: ProfilingSettings | None = None) -> None:
        self.max_entries = settings.max_distribution_entries if settings else 1000

    def build(self, values: Sequence[Any], total_rows: int | None = None) -> FrequencyTable:
        """Count values in one pass, then sort and truncate the distribution.

        Nulls and empty strings share the blank bucket. unique_value_count
        and the truncation cap cover the non-blank values only, so a
        truncated distribution may hold max_entries + 1 entries.
        """
        n = len(values) if total_rows is None else total_rows
        counts: Counter[str] = Counter()
        null_count = 0
        empty_count = 0
        for v in values:
            if is_null(v):
                null_count += 1
            elif isinstance(v, str) and v == "":
                empty_count += 1
            else:
                counts[display_string(v)] += 1

        entries = sorted(counts.items(), key=_sort_key)
        truncated = len(entries) > self.max_entries
        if truncated:
            logger.debug(
                "Distribution truncated",
                distinct_values=len(entries),
                kept=self.max_entries,
            )
            entries = entries[: self.max_entries]

        # The blank bucket is never cut and does not count against the cap
        blank = null_count + empty_count
        if blank:
            entries.append((BLANK_VALUE, blank))
            entries.sort(key=_sort_key)

        distribution = [
            ValueFrequency(value=value, count=count, percentage=count / n * 100.0)
            for value, count in entries
        ]

        return FrequencyTable(
            total_rows=n,
            distribution=distribution,
            counts=dict(counts),
            unique_value_count=len(counts),
            null_count=null_count,
            empty_string_count=empty_count,
            truncated=truncated,
        )
