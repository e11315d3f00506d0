"""
tests/test_logging_utils.py

Pytest unit tests for the structured log helpers.
"""

from __future__ import annotations

import json
import logging

import pytest

from app.logging_utils import log_event, timed_event

logger = logging.getLogger("tests.logging_utils")


def _payloads(caplog) -> list[dict]:
    return [json.loads(record.getMessage()) for record in caplog.records if record.name == logger.name]


class TestLogEvent:
    def test_emits_compact_json(self, caplog):
        with caplog.at_level(logging.WARNING, logger=logger.name):
            log_event(logger, logging.WARNING, "source_load_failed", source="a.json", rank=2)
        assert _payloads(caplog) == [{"event": "source_load_failed", "rank": 2, "source": "a.json"}]

    def test_skipped_below_level(self, caplog):
        with caplog.at_level(logging.WARNING, logger=logger.name):
            log_event(logger, logging.DEBUG, "noise")
        assert _payloads(caplog) == []


class TestTimedEvent:
    def test_adds_fields_and_duration(self, caplog):
        with caplog.at_level(logging.INFO, logger=logger.name):
            with timed_event(logger, logging.INFO, "recomputed", reason="empty") as event:
                event["total_dates"] = 3
        (payload,) = _payloads(caplog)
        assert payload["reason"] == "empty"
        assert payload["total_dates"] == 3
        assert payload["duration_ms"] >= 0

    def test_nothing_logged_on_error(self, caplog):
        with caplog.at_level(logging.INFO, logger=logger.name):
            with pytest.raises(RuntimeError):
                with timed_event(logger, logging.INFO, "recomputed"):
                    raise RuntimeError("boom")
        assert _payloads(caplog) == []
