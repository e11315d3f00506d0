"""
analysis/classifier.py

Classifies a percentage change into a trend label.
No statistics, no I/O, no side effects.
"""

from __future__ import annotations

from typing import Literal

from app.rules_config import as_float, rules_section

Trend = Literal["improving", "declining", "stable"]

_ANALYSIS_RULES = rules_section("analysis")


class TrendClassifier:
    """
    Maps ``change_percentage`` to a trend using a symmetric band.

        change_percentage   |  label
        --------------------|-----------
        > +threshold        |  improving
        < -threshold        |  declining
        otherwise           |  stable

    The band edges themselves are stable.
    """

    THRESHOLD_PERCENTAGE: float = as_float(_ANALYSIS_RULES.get("trend_threshold_percentage"), 3.0)

    def classify(self, change_percentage: float) -> Trend:
        if change_percentage < -self.THRESHOLD_PERCENTAGE:
            return "declining"
        if change_percentage > self.THRESHOLD_PERCENTAGE:
            return "improving"
        return "stable"
