"""
insights/generator.py

Turns one asset's PR history into an ordered list of insights.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Mapping, Sequence

from analysis.analyzer import PerformanceAnalyzer
from insights.rules import DEFAULT_RULES, FALLBACK_RULE, InsightRule, RuleContext
from insights.schema import Insight

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class InsightGenerator:
    """
    Evaluates an ordered rule table against a :class:`PerformanceAnalysis`.

    Every rule is evaluated once, in order, and contributes at most one
    insight.  The fallback rule runs last and only fires when nothing else
    did.  Output order is rule order; insights are not re-sorted by
    severity.

    Ids are derived from the rule name and asset id, so identical inputs
    yield identical ids.  ``generated_at`` is the only field that varies
    between calls.
    """

    def __init__(
        self,
        *,
        analyzer: PerformanceAnalyzer | None = None,
        rules: Sequence[InsightRule] = DEFAULT_RULES,
        fallback: InsightRule | None = FALLBACK_RULE,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._analyzer = analyzer or PerformanceAnalyzer()
        self._rules = tuple(rules)
        self._fallback = fallback
        self._clock = clock

    def generate(
        self,
        asset_id: str | None,
        current_pr: float | None,
        performance_history: Mapping[str, object] | None,
        reference_date: str | None = None,
    ) -> list[Insight]:
        """
        Parameters
        ----------
        asset_id:
            Selected asset.  ``None`` or empty yields ``[]``.
        current_pr:
            PR of the asset on *reference_date*.  ``None`` yields ``[]``.
        performance_history:
            ``date → PR`` mapping for the asset.
        reference_date:
            Date the caller is looking at; carried onto each insight.

        Returns
        -------
        list[Insight]
        """

        if not asset_id or not asset_id.strip() or current_pr is None:
            return []

        analysis = self._analyzer.analyze(performance_history or {})
        generated_at = self._clock()
        emitted: list[Insight] = []

        for rule in self._rules:
            ctx = RuleContext(
                asset_id=asset_id,
                current_pr=float(current_pr),
                analysis=analysis,
                emitted=tuple(emitted),
            )
            if rule.predicate(ctx):
                emitted.append(self._build(rule, ctx, generated_at, reference_date))

        if self._fallback is not None:
            ctx = RuleContext(
                asset_id=asset_id,
                current_pr=float(current_pr),
                analysis=analysis,
                emitted=tuple(emitted),
            )
            if not emitted and self._fallback.predicate(ctx):
                emitted.append(self._build(self._fallback, ctx, generated_at, reference_date))

        logger.debug(
            "Insights asset=%r change=%.2f%% trend=%s anomaly=%s → %s",
            asset_id,
            analysis.change_percentage,
            analysis.trend,
            analysis.anomaly_detected,
            [insight.id for insight in emitted],
        )
        return emitted

    @staticmethod
    def _build(
        rule: InsightRule,
        ctx: RuleContext,
        generated_at: datetime,
        reference_date: str | None,
    ) -> Insight:
        return Insight(
            id=rule.insight_id(ctx.asset_id),
            severity=rule.severity,
            title=rule.title,
            description=rule.description(ctx),
            recommendation=rule.recommendation,
            affected_asset=ctx.asset_id,
            generated_at=generated_at,
            reference_date=reference_date,
        )
