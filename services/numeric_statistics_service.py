"""Numeric statistics engine: descriptive, shape and outlier statistics.

Only numeric-dominant columns are summarized; for anything else the engine
returns None, which is not an error.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

import numpy as np

from config import ProfilingSettings
from logger import get_logger
from schemas.profiling import NumericSummary, Percentiles
from services.column_values import ColumnScan, scan_column

logger = get_logger(__name__)

NAMED_PERCENTILES = (10, 25, 50, 75, 90)


def _percentile(sorted_values: np.ndarray, p: float) -> float:
    """Linear interpolation percentile (0-100)."""
    n = len(sorted_values)
    if n == 1:
        return float(sorted_values[0])
    rank = (p / 100.0) * (n - 1)
    lower = math.floor(rank)
    upper = math.ceil(rank)
    if lower == upper:
        return float(sorted_values[lower])
    return float(sorted_values[lower] + (rank - lower) * (sorted_values[upper] - sorted_values[lower]))


def _mode(values: np.ndarray) -> list[float]:
    """All values sharing the highest frequency, ascending.

    Empty when every value occurs exactly once.
    """
    uniques, counts = np.unique(values, return_counts=True)
    top = counts.max()
    if top == 1:
        return []
    return [float(x) for x in uniques[counts == top]]


def _skewness(values: np.ndarray, mean: float, std_dev: float) -> float | None:
    """Adjusted Fisher-Pearson standardized moment coefficient.

    Standardizes with the population std_dev, unlike scipy.stats.skew(bias=False).
    """
    n = len(values)
    if n <= 2 or std_dev == 0:
        return None
    z = (values - mean) / std_dev
    return float((n / ((n - 1) * (n - 2))) * np.sum(z ** 3))


def _kurtosis(values: np.ndarray, mean: float, std_dev: float) -> float | None:
    """Sample excess kurtosis (0 for a normal distribution).

    Standardizes with the population std_dev, unlike scipy.stats.kurtosis(bias=False).
    """
    n = len(values)
    if n <= 3 or std_dev == 0:
        return None
    z = (values - mean) / std_dev
    scale = (n * (n + 1)) / ((n - 1) * (n - 2) * (n - 3))
    correction = (3 * (n - 1) ** 2) / ((n - 2) * (n - 3))
    return float(scale * np.sum(z ** 4) - correction)


class NumericStatisticsEngine:
    """Computes NumericSummary for numeric-dominant columns."""

    def __init__(self, settings: ProfilingSettings | None = None) -> None:
        settings = settings or ProfilingSettings()
        self.numeric_threshold = settings.numeric_threshold
        self.text_threshold = settings.text_threshold
        self.iqr_multiplier = settings.outlier_iqr_multiplier
        self.sample_outlier_limit = settings.sample_outlier_limit

    def summarize(self, values: Sequence[Any]) -> NumericSummary | None:
        """Scan raw column values and summarize them."""
        scan = scan_column(
            values,
            numeric_threshold=self.numeric_threshold,
            text_threshold=self.text_threshold,
        )
        return self.summarize_scan(scan)

    def summarize_scan(self, scan: ColumnScan) -> NumericSummary | None:
        """Summarize an already scanned column, or None if not numeric-dominant."""
        if scan.present_count == 0 or scan.numeric_share < self.numeric_threshold:
            logger.debug(
                "Numeric statistics not applicable",
                numeric_share=round(scan.numeric_share, 4),
                threshold=self.numeric_threshold,
            )
            return None

        # Column order is kept in `values` for outlier sampling
        values = np.asarray(scan.numbers, dtype=float)
        sorted_vals = np.sort(values)
        count = len(values)
        value_range = float(sorted_vals[-1] - sorted_vals[0])

        total = float(np.sum(values))
        # Moments are taken on values scaled into [-1, 1] so that mean and
        # std_dev stay finite for inputs near the float limit
        scale = float(np.max(np.abs(values))) or 1.0
        scaled = values / scale
        scaled_mean = float(np.mean(scaled))
        scaled_std = math.sqrt(float(np.mean((scaled - scaled_mean) ** 2)))
        mean = scaled_mean * scale
        std_dev = scaled_std * scale
        variance = scaled_std * scaled_std * scale * scale

        pct = {p: _percentile(sorted_vals, p) for p in NAMED_PERCENTILES}
        q1, median, q3 = pct[25], pct[50], pct[75]
        iqr = q3 - q1
        lower_bound = q1 - self.iqr_multiplier * iqr
        upper_bound = q3 + self.iqr_multiplier * iqr

        outlier_mask = (values < lower_bound) | (values > upper_bound)
        outliers = values[outlier_mask]
        outlier_count = int(outlier_mask.sum())

        overflowed = [
            name
            for name, x in (("sum", total), ("variance", variance), ("range", value_range), ("iqr", iqr))
            if not math.isfinite(x)
        ]
        if overflowed:
            logger.warning("Numeric statistics overflowed the float range", statistics=overflowed, count=count)

        return NumericSummary(
            count=count,
            non_numeric_count=scan.non_numeric_count,
            min=float(sorted_vals[0]),
            max=float(sorted_vals[-1]),
            sum=total,
            mean=mean,
            median=median,
            mode=_mode(values),
            range=value_range,
            variance=variance,
            std_dev=std_dev,
            q1=q1,
            q2=median,
            q3=q3,
            iqr=iqr,
            percentiles=Percentiles(
                p10=pct[10],
                p25=q1,
                p50=median,
                p75=q3,
                p90=pct[90],
            ),
            skewness=_skewness(scaled, scaled_mean, scaled_std),
            kurtosis=_kurtosis(scaled, scaled_mean, scaled_std),
            outlier_count=outlier_count,
            outlier_percentage=outlier_count / count * 100.0,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
            sample_outliers=[float(x) for x in outliers[: self.sample_outlier_limit]],
        )
