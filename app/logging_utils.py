"""
Structured log events for the aggregation pipeline.

Events are single-line JSON objects keyed by ``event`` so they can be
grepped or shipped as-is::

    {"event": "performance_cache_recomputed", "reason": "expired", ...}
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator


def _encode(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit *event* with *fields* as one compact JSON line.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=_encode, sort_keys=True, separators=(",", ":")))


@contextmanager
def timed_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> Iterator[dict[str, Any]]:
    """
    Log *event* when the block exits successfully, adding ``duration_ms``.

    The yielded dict can be filled with fields known only inside the block.
    Nothing is logged if the block raises.
    """

    extra: dict[str, Any] = {}
    started = time.perf_counter()
    yield extra
    duration_ms = round((time.perf_counter() - started) * 1000.0, 3)
    log_event(logger, level, event, **fields, **extra, duration_ms=duration_ms)
