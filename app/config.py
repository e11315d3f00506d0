"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_PRIMARY_SOURCE = "pr_icr17.json"
DEFAULT_SOURCE_PREFIX = "pr_icr17"


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = PROJECT_ROOT / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class AggregationSettings:
    """
    Where performance sources live and how long a merged snapshot stays fresh.

    The primary source is resolved relative to ``data_dir``.  Supplementary
    sources are any ``.json``/``.csv`` files in ``data_dir`` whose name starts
    with ``source_prefix``.
    """

    data_dir: Path = DEFAULT_DATA_DIR
    primary_source: str = DEFAULT_PRIMARY_SOURCE
    source_prefix: str = DEFAULT_SOURCE_PREFIX
    cache_ttl_seconds: float = 60.0


@dataclass(frozen=True)
class RefreshSchedulerSettings:
    """
    Background cache warm-up settings.
    """

    enabled: bool = False
    interval_seconds: float = 300.0


@lru_cache(maxsize=1)
def get_aggregation_settings() -> AggregationSettings:
    """
    Return cached aggregation settings from environment variables.
    """

    return AggregationSettings(
        data_dir=Path(_get_str_env("PERFORMANCE_DATA_DIR", str(DEFAULT_DATA_DIR))),
        primary_source=_get_str_env("PERFORMANCE_PRIMARY_SOURCE", DEFAULT_PRIMARY_SOURCE),
        source_prefix=_get_str_env("PERFORMANCE_SOURCE_PREFIX", DEFAULT_SOURCE_PREFIX),
        cache_ttl_seconds=max(0.0, _get_float_env("PERFORMANCE_CACHE_TTL_SECONDS", 60.0)),
    )


@lru_cache(maxsize=1)
def get_refresh_scheduler_settings() -> RefreshSchedulerSettings:
    """
    Return cache warm-up scheduler settings from environment variables.
    """

    return RefreshSchedulerSettings(
        enabled=_get_bool_env("PERFORMANCE_REFRESH_ENABLED", False),
        interval_seconds=max(1.0, _get_float_env("PERFORMANCE_REFRESH_INTERVAL_SECONDS", 300.0)),
    )
