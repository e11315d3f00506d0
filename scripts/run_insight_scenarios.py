"""
Run the insight engine from CLI.

Either replays the built-in reference scenarios or analyses one asset from
the merged performance dataset.
"""

from __future__ import annotations

import argparse
import json

from analysis.analyzer import PerformanceAnalyzer
from app.services.insight_service import get_insight_service
from insights.generator import InsightGenerator
from insights.scenarios import SCENARIOS


def _run_scenarios(names: list[str]) -> list[dict]:
    analyzer = PerformanceAnalyzer()
    generator = InsightGenerator(analyzer=analyzer)
    results: list[dict] = []
    for name in names:
        scenario = SCENARIOS[name]
        analysis = analyzer.analyze(scenario.performance_history)
        insights = generator.generate(
            scenario.asset_id,
            scenario.effective_current_pr,
            scenario.performance_history,
            scenario.reference_date,
        )
        results.append(
            {
                "scenario": scenario.name,
                "description": scenario.description,
                "asset_id": scenario.asset_id,
                "current_pr": scenario.effective_current_pr,
                "analysis": {
                    "change_percentage": round(analysis.change_percentage, 2),
                    "trend": analysis.trend,
                    "anomaly_detected": analysis.anomaly_detected,
                },
                "insights": [insight.model_dump(mode="json") for insight in insights],
            }
        )
    return results


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate solar asset insights.")
    parser.add_argument(
        "--scenario",
        dest="scenarios",
        action="append",
        choices=sorted(SCENARIOS),
        help="Reference scenario to run (repeatable). Defaults to all.",
    )
    parser.add_argument(
        "--asset",
        dest="asset_id",
        default=None,
        help="Analyse this asset from the merged performance data instead.",
    )
    parser.add_argument(
        "--date",
        dest="date",
        default=None,
        help="Reference date for --asset. Defaults to the asset's latest date.",
    )
    args = parser.parse_args()

    if args.asset_id:
        insights = get_insight_service().get_asset_insights(args.asset_id, args.date)
        payload: list[dict] = [insight.model_dump(mode="json") for insight in insights]
    else:
        payload = _run_scenarios(args.scenarios or list(SCENARIOS))

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
