"""
app/rules_config.py

Loads tunable analysis and insight thresholds from
``config/insight_rules.json``.  Any read or parse problem falls back to an
empty mapping so callers use their built-in defaults.
"""

from __future__ import annotations

import json
from functools import lru_cache

from app.config import PROJECT_ROOT

INSIGHT_RULES_PATH = PROJECT_ROOT / "config" / "insight_rules.json"


@lru_cache(maxsize=1)
def load_insight_rules() -> dict:
    try:
        raw = INSIGHT_RULES_PATH.read_text(encoding="utf-8")
        data = json.loads(raw)
        return data if isinstance(data, dict) else {}
    except (OSError, ValueError, TypeError):
        return {}


def as_dict(value: object) -> dict:
    return value if isinstance(value, dict) else {}


def as_float(value: object, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def rules_section(name: str) -> dict:
    """Return one top-level section of the rules file, or ``{}``."""
    return as_dict(load_insight_rules().get(name))
