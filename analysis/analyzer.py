"""
analysis/analyzer.py

Trend and anomaly statistics for one asset's PR history.

Formulas
--------
change_percentage = (newest - oldest) / oldest * 100
trend             = TrendClassifier(change_percentage)
anomaly_detected  = any(|value - mean| > sigma * std)

``oldest``/``newest`` are the values at the earliest and latest valid dates;
``std`` is the population standard deviation (divisor N) over all valid
values.  With fewer than two valid points the neutral result
``(0.0, "stable", False)`` is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

import numpy as np

from analysis.classifier import Trend, TrendClassifier
from app.domain.performance import parse_pr_value
from app.rules_config import as_float, rules_section

logger = logging.getLogger(__name__)

_ANALYSIS_RULES = rules_section("analysis")


@dataclass(frozen=True)
class PerformanceAnalysis:
    """
    Result of analysing one asset's history.  Recomputed on every call.
    """

    change_percentage: float
    trend: Trend
    anomaly_detected: bool

    @classmethod
    def neutral(cls) -> "PerformanceAnalysis":
        return cls(change_percentage=0.0, trend="stable", anomaly_detected=False)


def valid_series(history: Mapping[str, object]) -> list[tuple[str, float]]:
    """
    Return ``(date, value)`` pairs with a finite numeric value, sorted by date.
    """

    series: list[tuple[str, float]] = []
    for date_key, raw_value in history.items():
        value = parse_pr_value(raw_value)
        if value is not None:
            series.append((str(date_key), value))
    series.sort(key=lambda item: item[0])
    return series


class PerformanceAnalyzer:
    """
    Stateless trend/anomaly analyzer.

    Usage::

        analysis = PerformanceAnalyzer().analyze({"2024-08-01": 0.0095, "2024-08-10": 0.0080})
        analysis.trend  # "declining"
    """

    MIN_POINTS: int = 2
    ANOMALY_SIGMA: float = as_float(_ANALYSIS_RULES.get("anomaly_sigma"), 2.0)

    def __init__(self, classifier: TrendClassifier | None = None) -> None:
        self._classifier = classifier or TrendClassifier()

    def analyze(self, history: Mapping[str, object]) -> PerformanceAnalysis:
        """
        Analyse a ``date → PR`` mapping.

        Entries with missing, non-numeric, NaN or infinite values are
        ignored.  Dates are ordered lexicographically (ISO-8601).
        """

        series = valid_series(history)
        if len(series) < self.MIN_POINTS:
            logger.debug("Insufficient data for analysis: %d valid point(s)", len(series))
            return PerformanceAnalysis.neutral()

        oldest = series[0][1]
        newest = series[-1][1]
        change_percentage = self.change_percentage(oldest, newest)

        return PerformanceAnalysis(
            change_percentage=change_percentage,
            trend=self._classifier.classify(change_percentage),
            anomaly_detected=self.detect_anomaly([value for _, value in series]),
        )

    @staticmethod
    def change_percentage(oldest: float, newest: float) -> float:
        """
        Relative change from *oldest* to *newest*, in percent.

        A zero baseline has no defined relative change and yields ``0.0``.
        """

        if oldest == 0.0:
            return 0.0
        return (newest - oldest) / oldest * 100.0

    def detect_anomaly(self, values: list[float]) -> bool:
        """
        True when any value lies more than ``ANOMALY_SIGMA`` population
        standard deviations from the mean.
        """

        if len(values) < self.MIN_POINTS:
            return False
        array = np.asarray(values, dtype=float)
        mean = float(array.mean())
        std = float(array.std(ddof=0))
        return bool(np.any(np.abs(array - mean) > self.ANOMALY_SIGMA * std))
