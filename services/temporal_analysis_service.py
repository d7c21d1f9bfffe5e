"""Temporal analysis engine: date range, calendar distribution, gaps and trend.

Runs on Text and Mixed columns whose non-blank values mostly parse as dates
(PROFILER_DATE_THRESHOLD, 60% by default). All dates are compared as naive
UTC timestamps; values carrying an offset are converted first.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Callable, Sequence
from datetime import date, datetime
from functools import lru_cache
from typing import Any

import numpy as np
import pandas as pd

from config import ProfilingSettings
from logger import get_logger
from schemas.profiling import (
    DateFormat,
    DateFormatInfo,
    DateGap,
    DateRange,
    GapAnalysis,
    PeriodCount,
    TemporalDistribution,
    TemporalSummary,
    TrendAnalysis,
)
from services.column_values import is_blank

logger = get_logger(__name__)

DAY = pd.Timedelta(days=1)
FORMAT_SAMPLE_SIZE = 100
GAP_TOLERANCE_DAYS = 1.5
GAP_LIMIT = 10
FALLBACK_YEARS = (1900, 2100)
CONSTANT_TREND_SLOPE = 0.05
STRONG_TREND_SLOPE = 0.2

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# Detection order: the date-only form before the full ISO form
DATE_FORMATS: dict[DateFormat, re.Pattern[str]] = {
    "ISO_DATE": re.compile(r"^\d{4}-\d{2}-\d{2}$"),
    "ISO_8601": re.compile(r"^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}:\d{2}(\.\d{3})?(Z|[+-]\d{2}:\d{2})?)?$"),
    "US_DATE": re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$"),
    "EU_DATE": re.compile(r"^\d{1,2}\.\d{1,2}\.\d{4}$"),
    "TIMESTAMP_MS": re.compile(r"^\d{13}$"),
    "TIMESTAMP_S": re.compile(r"^\d{10}$"),
    "YYYYMMDD": re.compile(r"^\d{8}$"),
}

# Also the tie-break order for the dominant format
FORMAT_DESCRIPTIONS: dict[DateFormat, str] = {
    "ISO_8601": "ISO 8601 with time",
    "ISO_DATE": "ISO 8601 date (YYYY-MM-DD)",
    "US_DATE": "US format (M/D/YYYY)",
    "EU_DATE": "EU format (D.M.YYYY)",
    "TIMESTAMP_MS": "Unix timestamp (milliseconds)",
    "TIMESTAMP_S": "Unix timestamp (seconds)",
    "YYYYMMDD": "Compact format (YYYYMMDD)",
    "OTHER": "Mixed or other format",
}

# Written-out dates such as "January 5, 2024" or "5 Jan 2024"
_WRITTEN_DATE = re.compile(
    r"^([A-Za-z]{3,9}\.?\s+\d{1,2},?\s+\d{4}|\d{1,2}\s+[A-Za-z]{3,9}\.?,?\s+\d{4}|\d{4}/\d{1,2}/\d{1,2})$"
)

# Tried in order; the first pattern that matches and yields a valid date wins
_PARSERS: tuple[tuple[re.Pattern[str], Callable[[str], Any]], ...] = (
    (DATE_FORMATS["ISO_8601"], lambda s: pd.to_datetime(s, format="ISO8601", errors="coerce")),
    (DATE_FORMATS["TIMESTAMP_MS"], lambda s: pd.to_datetime(int(s), unit="ms", errors="coerce")),
    (DATE_FORMATS["TIMESTAMP_S"], lambda s: pd.to_datetime(int(s), unit="s", errors="coerce")),
    (DATE_FORMATS["YYYYMMDD"], lambda s: pd.to_datetime(s, format="%Y%m%d", errors="coerce")),
    (DATE_FORMATS["US_DATE"], lambda s: pd.to_datetime(s, format="%m/%d/%Y", errors="coerce")),
    (DATE_FORMATS["EU_DATE"], lambda s: pd.to_datetime(s, format="%d.%m.%Y", errors="coerce")),
)


# =============================================================================
# Parsing
# =============================================================================

def _naive_utc(ts: Any) -> pd.Timestamp | None:
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


@lru_cache(maxsize=65536)
def _parse_text(text: str) -> pd.Timestamp | None:
    for pattern, parse in _PARSERS:
        if pattern.match(text):
            ts = _naive_utc(parse(text))
            if ts is not None:
                return ts
    if _WRITTEN_DATE.match(text):
        ts = _naive_utc(pd.to_datetime(text, errors="coerce"))
        if ts is not None and FALLBACK_YEARS[0] <= ts.year <= FALLBACK_YEARS[1]:
            return ts
    return None


def parse_date(value: Any) -> pd.Timestamp | None:
    """Return the naive UTC timestamp a raw value represents, or None.

    Accepts datetime/date objects, ISO 8601 strings, Unix timestamps in
    seconds (10 digits) or milliseconds (13 digits), YYYYMMDD, M/D/YYYY,
    D.M.YYYY and written-out dates between 1900 and 2100.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, (datetime, date)):
        return _naive_utc(pd.Timestamp(value))
    return _parse_text(str(value).strip())


def _raw_text(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value).strip()


def detect_date_format(texts: Sequence[str]) -> DateFormatInfo:
    """Classify the first values of a column by raw date format."""
    counts: Counter[str] = Counter({name: 0 for name in FORMAT_DESCRIPTIONS})
    sample = texts[:FORMAT_SAMPLE_SIZE]
    for text in sample:
        name = next((n for n, p in DATE_FORMATS.items() if p.match(text)), "OTHER")
        counts[name] += 1

    dominant: DateFormat = "OTHER"
    top = 0
    for name in FORMAT_DESCRIPTIONS:
        if counts[name] > top:
            dominant, top = name, counts[name]
    return DateFormatInfo(
        dominant_format=dominant,
        description=FORMAT_DESCRIPTIONS[dominant],
        format_counts=dict(counts),
        confidence=top / len(sample) * 100 if sample else 0.0,
    )


# =============================================================================
# Range and distribution
# =============================================================================

def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''}"


def describe_span(days: int) -> str:
    """Readable span using 7-day weeks, 30-day months and 365-day years."""
    if days == 0:
        return "Single day"
    if days < 7:
        return _plural(days, "day")
    if days < 31:
        weeks, rest = divmod(days, 7)
        return _plural(weeks, "week") + (f", {_plural(rest, 'day')}" if rest else "")
    if days < 365:
        return _plural(days // 30, "month")
    years, rest = divmod(days, 365)
    months = rest // 30
    return _plural(years, "year") + (f", {_plural(months, 'month')}" if months else "")


def _span_days(idx: pd.DatetimeIndex) -> int:
    return math.floor((idx[-1] - idx[0]) / DAY)


def _named_counts(labels: pd.Index, order: Sequence[str]) -> list[PeriodCount]:
    counts = labels.value_counts()
    return [PeriodCount(period=name, count=int(counts[name])) for name in order if name in counts.index]


def _temporal_distribution(idx: pd.DatetimeIndex) -> TemporalDistribution:
    years = idx.year.value_counts().sort_index()
    quarters = idx.to_period("Q").value_counts().sort_index()
    return TemporalDistribution(
        by_year=[PeriodCount(period=str(y), count=int(c)) for y, c in years.items()],
        by_quarter=[PeriodCount(period=f"Q{q.quarter} {q.year}", count=int(c)) for q, c in quarters.items()],
        by_month=_named_counts(idx.month_name(), MONTH_NAMES),
        by_day_of_week=_named_counts(idx.day_name(), DAY_NAMES),
    )


# =============================================================================
# Gaps and trend
# =============================================================================

def _detect_gaps(idx: pd.DatetimeIndex) -> GapAnalysis:
    """Gaps longer than 1.5 days between consecutive sorted dates."""
    actual = len(idx.unique())
    if len(idx) < 2:
        return GapAnalysis(
            has_gaps=False,
            gap_count=0,
            coverage=100.0,
            expected_dates=actual,
            actual_dates=actual,
        )

    steps = np.asarray((idx[1:] - idx[:-1]) / DAY, dtype=float)
    gaps: list[DateGap] = []
    largest: DateGap | None = None
    largest_days = 0.0
    for i in np.flatnonzero(steps > GAP_TOLERANCE_DAYS):
        gap = DateGap(
            start=idx[i].to_pydatetime(),
            end=idx[i + 1].to_pydatetime(),
            days=math.floor(steps[i]),
        )
        gaps.append(gap)
        if largest is None or steps[i] > largest_days:
            largest, largest_days = gap, float(steps[i])

    expected = _span_days(idx) + 1
    return GapAnalysis(
        has_gaps=bool(gaps),
        gap_count=len(gaps),
        largest_gap=largest,
        gaps=gaps[:GAP_LIMIT],
        coverage=min(100.0, actual / expected * 100),
        expected_dates=expected,
        actual_dates=actual,
    )


def _analyze_trend(idx: pd.DatetimeIndex) -> TrendAnalysis:
    """Least-squares slope of date counts per day, week or 30-day month."""
    if len(idx) < 3:
        return TrendAnalysis(
            has_trend=False,
            trend_type="insufficient_data",
            description="Insufficient data for trend analysis",
        )

    span = _span_days(idx)
    if span <= 31:
        group_size, unit = 1, "day"
    elif span <= 365:
        group_size, unit = 7, "week"
    else:
        group_size, unit = 30, "month"

    elapsed = np.floor(np.asarray((idx - idx[0]) / DAY, dtype=float)).astype(np.int64)
    periods, counts = np.unique(elapsed // group_size, return_counts=True)
    if len(periods) < 2:
        return TrendAnalysis(
            has_trend=False,
            trend_type="constant",
            description="Constant distribution over time",
            group_unit=unit,
            period_count=len(periods),
        )

    x = periods.astype(float)
    y = counts.astype(float)
    dx = x - x.mean()
    slope = float(np.sum(dx * (y - y.mean())) / np.sum(dx ** 2))
    relative = abs(slope) / y.mean()

    if relative < CONSTANT_TREND_SLOPE:
        trend_type, description = "constant", "Relatively constant over time"
    elif slope > 0:
        if relative > STRONG_TREND_SLOPE:
            trend_type, description = "strong_growth", "Strong growth trend detected"
        else:
            trend_type, description = "moderate_growth", "Moderate growth trend detected"
    elif relative > STRONG_TREND_SLOPE:
        trend_type, description = "strong_decline", "Strong decline trend detected"
    else:
        trend_type, description = "moderate_decline", "Moderate decline trend detected"

    return TrendAnalysis(
        has_trend=trend_type != "constant",
        trend_type=trend_type,
        description=description,
        slope=slope,
        group_unit=unit,
        period_count=len(periods),
    )


class TemporalAnalysisEngine:
    """Computes TemporalSummary for date-dominant columns."""

    def __init__(self, settings: ProfilingSettings | None = None) -> None:
        settings = settings or ProfilingSettings()
        self.date_threshold = settings.date_threshold

    def analyze(self, values: Sequence[Any]) -> TemporalSummary | None:
        """Return None when too few non-blank values parse as dates."""
        raw: list[str] = []
        parsed: list[pd.Timestamp] = []
        blank = 0
        for v in values:
            if is_blank(v):
                blank += 1
                continue
            raw.append(_raw_text(v))
            ts = parse_date(v)
            if ts is not None:
                parsed.append(ts)

        share = len(parsed) / len(raw) if raw else 0.0
        if not parsed or share < self.date_threshold:
            logger.debug(
                "Temporal analysis not applicable",
                date_share=round(share, 4),
                threshold=self.date_threshold,
            )
            return None

        idx = pd.DatetimeIndex(parsed).sort_values()
        span = _span_days(idx)
        return TemporalSummary(
            date_count=len(parsed),
            invalid_date_count=len(raw) - len(parsed),
            blank_count=blank,
            valid_percentage=len(parsed) / len(values) * 100,
            range=DateRange(
                earliest=idx[0].to_pydatetime(),
                latest=idx[-1].to_pydatetime(),
                span_days=span,
                span_description=describe_span(span),
                format=detect_date_format(raw),
            ),
            distribution=_temporal_distribution(idx),
            gaps=_detect_gaps(idx),
            trend=_analyze_trend(idx),
        )
