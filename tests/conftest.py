"""
Shared fixtures: a controllable clock and in-memory source registries.
"""

from __future__ import annotations

from typing import Any

import pytest

from sources.providers import InMemorySourceProvider
from sources.registry import SourceRegistry


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def pr_payload(pr_data: dict[str, dict[str, Any]]) -> dict[str, Any]:
    return {"pr_data": pr_data}


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def primary_provider() -> InMemorySourceProvider:
    return InMemorySourceProvider(
        "primary",
        pr_payload(
            {
                "2024-08-01": {"INV1": 0.0095, "INV2": 0.0090},
                "2024-08-02": {"INV1": 0.0094, "INV2": 0.0091},
            }
        ),
    )


@pytest.fixture()
def supplementary_provider() -> InMemorySourceProvider:
    return InMemorySourceProvider(
        "supplementary",
        pr_payload(
            {
                "2024-08-02": {"INV2": 0.0070},
                "2024-08-03": {"INV1": 0.0093, "INV3": 0.0088},
            }
        ),
    )


@pytest.fixture()
def registry(
    primary_provider: InMemorySourceProvider,
    supplementary_provider: InMemorySourceProvider,
) -> SourceRegistry:
    return SourceRegistry(primary_provider, [supplementary_provider])
