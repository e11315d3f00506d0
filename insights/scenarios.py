"""
insights/scenarios.py

Reference PR histories that exercise each insight rule.

Used by ``scripts/run_insight_scenarios.py`` and the test-suite.  The
current PR of a scenario is its latest value unless ``current_pr`` is set.
"""

from __future__ import annotations

from dataclasses import dataclass


def _daily(values: list[float], *, month: str = "2024-08") -> dict[str, float]:
    return {f"{month}-{day:02d}": value for day, value in enumerate(values, start=1)}


@dataclass(frozen=True)
class InsightScenario:
    name: str
    asset_id: str
    description: str
    performance_history: dict[str, float]
    current_pr: float | None = None

    @property
    def reference_date(self) -> str:
        return max(self.performance_history)

    @property
    def effective_current_pr(self) -> float:
        if self.current_pr is not None:
            return self.current_pr
        return self.performance_history[self.reference_date]


SCENARIOS: dict[str, InsightScenario] = {
    scenario.name: scenario
    for scenario in (
        InsightScenario(
            name="critical",
            asset_id="L17_LT1_INV1",
            description="15.8% performance drop",
            performance_history=_daily(
                [0.0095, 0.00945, 0.0094, 0.0093, 0.0092, 0.0090, 0.0088, 0.0085, 0.0082, 0.0080]
            ),
        ),
        InsightScenario(
            name="warning",
            asset_id="L17_LT1_INV2",
            description="7.6% linear decline",
            performance_history=_daily(
                [0.0095, 0.00942, 0.00934, 0.00926, 0.00918, 0.0091, 0.00902, 0.00894, 0.00886, 0.00878]
            ),
        ),
        InsightScenario(
            name="improvement",
            asset_id="L17_LT1_INV3",
            description="10.6% linear improvement",
            performance_history=_daily(
                [0.0085, 0.0086, 0.0087, 0.0088, 0.0089, 0.0090, 0.0091, 0.0092, 0.0093, 0.0094]
            ),
        ),
        InsightScenario(
            name="anomaly",
            asset_id="L17_LT1_INV4",
            description="single-day dip to 0.0048",
            performance_history=_daily(
                [0.0095, 0.00948, 0.00949, 0.00951, 0.00952, 0.0048, 0.00945, 0.00947, 0.00948, 0.0095]
            ),
        ),
        InsightScenario(
            name="low_pr",
            asset_id="L17_LT1_INV5",
            description="flat history, current PR 0.0065",
            performance_history=_daily([0.0095] * 10),
            current_pr=0.0065,
        ),
        InsightScenario(
            name="normal",
            asset_id="L17_LT1_INV6",
            description="flat history at 0.0095",
            performance_history=_daily([0.0095] * 10),
        ),
    )
}
