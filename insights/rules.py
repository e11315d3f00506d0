"""
insights/rules.py

Ordered, data-driven rule table for the insight generator.

Each rule pairs a predicate with the text used to build its insight.
Predicates receive a :class:`RuleContext` that includes the insights already
emitted in the current call, which is how the anomaly rule is suppressed by
a critical drop.

Rules evaluated (in order)
--------------------------
1. drop         – declining and |change| > 10 %            → critical
2. decline      – declining and 5 % < |change| <= 10 %     → warning
3. anomaly      – anomaly detected, no critical emitted     → warning
4. improvement  – improving and change > 5 %               → info
5. low-pr       – current PR < 0.007, regardless of trend  → warning

When none fires, the ``normal`` fallback emits one info insight.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from analysis.analyzer import PerformanceAnalysis
from app.rules_config import as_float, rules_section
from insights.schema import Insight, Severity

_INSIGHT_RULES = rules_section("insights")

CRITICAL_DROP_PERCENTAGE: float = as_float(_INSIGHT_RULES.get("critical_drop_percentage"), 10.0)
MODERATE_DECLINE_PERCENTAGE: float = as_float(_INSIGHT_RULES.get("moderate_decline_percentage"), 5.0)
IMPROVEMENT_PERCENTAGE: float = as_float(_INSIGHT_RULES.get("improvement_percentage"), 5.0)
LOW_PR_THRESHOLD: float = as_float(_INSIGHT_RULES.get("low_pr_threshold"), 0.007)


@dataclass(frozen=True)
class RuleContext:
    """
    Everything a rule may look at.

    ``emitted`` holds the insights produced by earlier rules in the same
    call, in order.
    """

    asset_id: str
    current_pr: float
    analysis: PerformanceAnalysis
    emitted: tuple[Insight, ...] = ()

    @property
    def magnitude(self) -> float:
        return abs(self.analysis.change_percentage)

    def has_severity(self, severity: Severity) -> bool:
        return any(insight.severity == severity for insight in self.emitted)


@dataclass(frozen=True)
class InsightRule:
    """
    One row of the rule table.

    ``title`` and ``description`` are called with the context so they can
    interpolate the computed magnitude.
    """

    name: str
    severity: Severity
    predicate: Callable[[RuleContext], bool]
    title: str
    description: Callable[[RuleContext], str]
    recommendation: str

    def insight_id(self, asset_id: str) -> str:
        return f"insight-{self.name}-{asset_id}"


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_critical_drop(ctx: RuleContext) -> bool:
    return ctx.analysis.trend == "declining" and ctx.magnitude > CRITICAL_DROP_PERCENTAGE


def is_moderate_decline(ctx: RuleContext) -> bool:
    return (
        ctx.analysis.trend == "declining"
        and MODERATE_DECLINE_PERCENTAGE < ctx.magnitude <= CRITICAL_DROP_PERCENTAGE
    )


def is_unsuppressed_anomaly(ctx: RuleContext) -> bool:
    return ctx.analysis.anomaly_detected and not ctx.has_severity("critical")


def is_improvement(ctx: RuleContext) -> bool:
    return ctx.analysis.trend == "improving" and ctx.analysis.change_percentage > IMPROVEMENT_PERCENTAGE


def is_low_pr(ctx: RuleContext) -> bool:
    return ctx.current_pr < LOW_PR_THRESHOLD


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

DEFAULT_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        name="drop",
        severity="critical",
        predicate=is_critical_drop,
        title="Critical Performance Drop Detected",
        description=lambda ctx: (
            f"Asset {ctx.asset_id} has experienced a significant {ctx.magnitude:.1f}% drop "
            "in performance ratio over the observed period. This represents a severe "
            "deviation from baseline performance."
        ),
        recommendation=(
            "Immediate investigation recommended. Check for: (1) inverter faults or offline "
            "status, (2) DC string disconnections, (3) accumulated soiling on panels, "
            "(4) shading or obstructions. Schedule preventive maintenance within 24-48 hours."
        ),
    ),
    InsightRule(
        name="decline",
        severity="warning",
        predicate=is_moderate_decline,
        title="Performance Decline Detected",
        description=lambda ctx: (
            f"Asset {ctx.asset_id} shows a {ctx.magnitude:.1f}% decline in performance. "
            "While not critical, this trend warrants monitoring."
        ),
        recommendation=(
            "Monitor this asset closely over the next 7 days. If the decline continues, "
            "initiate maintenance checks. Consider cleaning panels and checking for partial shading."
        ),
    ),
    InsightRule(
        name="anomaly",
        severity="warning",
        predicate=is_unsuppressed_anomaly,
        title="Unusual Performance Pattern",
        description=lambda ctx: (
            f"Asset {ctx.asset_id} exhibits unusual performance fluctuations. Performance "
            "values show significant variance, suggesting intermittent issues or "
            "environmental factors."
        ),
        recommendation=(
            "Review environmental conditions (weather, cloud cover, temperature). Check for "
            "intermittent connection issues or equipment cycling. Correlate with "
            "meteorological data."
        ),
    ),
    InsightRule(
        name="improvement",
        severity="info",
        predicate=is_improvement,
        title="Performance Improvement Trend",
        description=lambda ctx: (
            f"Asset {ctx.asset_id} is showing positive performance improvement with a "
            f"{ctx.analysis.change_percentage:.1f}% increase."
        ),
        recommendation=(
            "Continue the current maintenance schedule. Consider this asset as a baseline "
            "reference for similar units."
        ),
    ),
    InsightRule(
        name="low-pr",
        severity="warning",
        predicate=is_low_pr,
        title="Low Performance Ratio Value",
        description=lambda ctx: (
            f"Asset {ctx.asset_id} currently operates at {ctx.current_pr * 100:.2f}% "
            f"performance ratio, which is below the {LOW_PR_THRESHOLD * 100:.2f}% threshold."
        ),
        recommendation=(
            "Verify the system is generating power during peak sun hours. Check for AC/DC "
            "wiring issues, inverter efficiency losses or measurement errors. Validate "
            "sensor calibration."
        ),
    ),
)

FALLBACK_RULE = InsightRule(
    name="normal",
    severity="info",
    predicate=lambda ctx: not ctx.emitted,
    title="Operating Normally",
    description=lambda ctx: (
        f"Asset {ctx.asset_id} is operating within normal parameters with stable "
        "performance characteristics."
    ),
    recommendation=(
        "Continue routine monitoring. Schedule quarterly maintenance as per operational guidelines."
    ),
)
