"""
tests/test_insight_generator.py

Pytest unit tests for InsightGenerator.

The clock is fixed so every field of the output is deterministic.

Coverage
--------
- Reference scenarios emit exactly the expected rules
- Fallback is exclusive with every other rule
- Critical drop suppresses the anomaly rule but not low PR
- Output order follows rule order
- Missing selection (asset or current PR) yields []
- Idempotence across calls
- reference_date and generated_at are carried onto every insight
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from insights.generator import InsightGenerator
from insights.scenarios import SCENARIOS

FIXED_NOW = datetime(2024, 8, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def generator() -> InsightGenerator:
    return InsightGenerator(clock=lambda: FIXED_NOW)


def _run(generator: InsightGenerator, name: str):
    scenario = SCENARIOS[name]
    return generator.generate(
        scenario.asset_id,
        scenario.effective_current_pr,
        scenario.performance_history,
        scenario.reference_date,
    )


class TestScenarios:
    @pytest.mark.parametrize(
        ("name", "expected_ids", "expected_severities"),
        [
            ("critical", ["insight-drop-L17_LT1_INV1"], ["critical"]),
            ("warning", ["insight-decline-L17_LT1_INV2"], ["warning"]),
            ("improvement", ["insight-improvement-L17_LT1_INV3"], ["info"]),
            ("anomaly", ["insight-anomaly-L17_LT1_INV4"], ["warning"]),
            ("low_pr", ["insight-low-pr-L17_LT1_INV5"], ["warning"]),
            ("normal", ["insight-normal-L17_LT1_INV6"], ["info"]),
        ],
    )
    def test_expected_insights(self, generator, name, expected_ids, expected_severities):
        insights = _run(generator, name)
        assert [insight.id for insight in insights] == expected_ids
        assert [insight.severity for insight in insights] == expected_severities

    def test_critical_description_carries_magnitude(self, generator):
        (insight,) = _run(generator, "critical")
        assert insight.title == "Critical Performance Drop Detected"
        assert "15.8%" in insight.description
        assert insight.affected_asset == "L17_LT1_INV1"

    def test_low_pr_description_carries_current_value(self, generator):
        (insight,) = _run(generator, "low_pr")
        assert "0.65%" in insight.description

    def test_normal_title(self, generator):
        (insight,) = _run(generator, "normal")
        assert insight.title == "Operating Normally"


class TestRuleInteraction:
    def test_critical_suppresses_anomaly_but_not_low_pr(self, generator):
        history = {f"2024-08-{day:02d}": 0.0095 for day in range(1, 10)}
        history["2024-08-10"] = 0.0040
        insights = generator.generate("INV7", 0.0040, history, "2024-08-10")
        assert [insight.id for insight in insights] == ["insight-drop-INV7", "insight-low-pr-INV7"]

    def test_decline_and_anomaly_both_fire(self, generator):
        history = {f"2024-08-{day:02d}": 0.0095 for day in range(1, 10)}
        history["2024-08-05"] = 0.0030
        history["2024-08-10"] = 0.0088
        insights = generator.generate("INV8", 0.0088, history)
        assert [insight.id for insight in insights] == [
            "insight-decline-INV8",
            "insight-anomaly-INV8",
        ]

    def test_fallback_never_accompanies_other_rules(self, generator):
        for name in SCENARIOS:
            ids = [insight.id for insight in _run(generator, name)]
            if any(i.startswith("insight-normal-") for i in ids):
                assert len(ids) == 1

    def test_insufficient_history_still_checks_current_pr(self, generator):
        insights = generator.generate("INV9", 0.0050, {"2024-08-01": 0.0050})
        assert [insight.id for insight in insights] == ["insight-low-pr-INV9"]

    def test_empty_history_falls_back(self, generator):
        insights = generator.generate("INV9", 0.0095, {})
        assert [insight.id for insight in insights] == ["insight-normal-INV9"]

    def test_custom_rule_table(self):
        generator = InsightGenerator(rules=(), clock=lambda: FIXED_NOW)
        insights = generator.generate("INV1", 0.001, SCENARIOS["critical"].performance_history)
        assert [insight.id for insight in insights] == ["insight-normal-INV1"]

    def test_no_fallback(self):
        generator = InsightGenerator(fallback=None, clock=lambda: FIXED_NOW)
        assert generator.generate("INV1", 0.0095, SCENARIOS["normal"].performance_history) == []


class TestMissingSelection:
    @pytest.mark.parametrize("asset_id", [None, "", "   "])
    def test_missing_asset(self, generator, asset_id):
        assert generator.generate(asset_id, 0.0095, SCENARIOS["normal"].performance_history) == []

    def test_asset_id_is_returned_unchanged(self, generator):
        insights = generator.generate("INV1 ", 0.0095, SCENARIOS["normal"].performance_history)
        assert [insight.affected_asset for insight in insights] == ["INV1 "]
        assert insights[0].id == "insight-normal-INV1 "

    def test_missing_current_pr(self, generator):
        assert generator.generate("INV1", None, SCENARIOS["critical"].performance_history) == []

    def test_none_history_is_treated_as_empty(self, generator):
        insights = generator.generate("INV1", 0.0095, None)
        assert [insight.id for insight in insights] == ["insight-normal-INV1"]


class TestIdempotence:
    def test_identical_inputs_identical_output(self):
        generator = InsightGenerator()
        first = _run(generator, "critical")
        second = _run(generator, "critical")
        assert [(i.id, i.severity, i.title, i.description, i.recommendation) for i in first] == [
            (i.id, i.severity, i.title, i.description, i.recommendation) for i in second
        ]

    def test_fixed_clock_makes_output_equal(self, generator):
        assert _run(generator, "anomaly") == _run(generator, "anomaly")

    def test_timestamps_and_reference_date(self, generator):
        insights = _run(generator, "critical")
        assert all(insight.generated_at == FIXED_NOW for insight in insights)
        assert all(insight.reference_date == "2024-08-10" for insight in insights)
