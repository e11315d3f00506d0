"""
tests/test_source_registry.py

Pytest unit tests for SourceRegistry and the file source providers.

Coverage
--------
- Primary source is always rank 0
- Declared providers follow the primary in declaration order
- Directory discovery: prefix filter, suffix filter, sorted by name
- The primary's own file is never listed twice
- Directory listing failure falls back to declared sources
- Directory is re-listed on every call
- JSON / CSV provider parsing and structural errors
- build_source_registry wiring from settings
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from aggregation.errors import SourceLoadError
from app.config import AggregationSettings
from sources.providers import CSVFileSourceProvider, InMemorySourceProvider, JSONFileSourceProvider
from sources.registry import SourceRegistry, build_source_registry


def _write_json(path: Path, pr_data: dict) -> Path:
    path.write_text(json.dumps({"pr_data": pr_data}), encoding="utf-8")
    return path


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    _write_json(tmp_path / "pr_icr17.json", {"2024-08-01": {"INV1": 0.0095}})
    _write_json(tmp_path / "pr_icr17_b.json", {"2024-08-02": {"INV1": 0.0094}})
    _write_json(tmp_path / "pr_icr17_a.json", {"2024-08-03": {"INV1": 0.0093}})
    (tmp_path / "pr_icr17_c.csv").write_text(
        "date,asset_id,value\n2024-08-04,INV1,0.0092\n", encoding="utf-8"
    )
    _write_json(tmp_path / "other_source.json", {"2024-08-05": {"INV1": 0.0091}})
    (tmp_path / "pr_icr17_notes.txt").write_text("ignored", encoding="utf-8")
    return tmp_path


# ---------------------------------------------------------------------------
# Discovery order
# ---------------------------------------------------------------------------


class TestDiscoveryOrder:
    def test_primary_only(self, primary_provider):
        descriptors = SourceRegistry(primary_provider).discover_sources()
        assert [(d.name, d.rank) for d in descriptors] == [("primary", 0)]

    def test_declared_providers_follow_primary(self, registry):
        descriptors = registry.discover_sources()
        assert [d.name for d in descriptors] == ["primary", "supplementary"]
        assert [d.rank for d in descriptors] == [0, 1]

    def test_directory_files_sorted_and_filtered_by_prefix(self, data_dir):
        registry = SourceRegistry(
            JSONFileSourceProvider(data_dir / "pr_icr17.json"),
            discovery_dir=data_dir,
            prefix="pr_icr17",
        )
        names = [d.name for d in registry.discover_sources()]
        assert names == ["pr_icr17.json", "pr_icr17_a.json", "pr_icr17_b.json", "pr_icr17_c.csv"]

    def test_ranks_follow_position(self, data_dir):
        registry = SourceRegistry(
            JSONFileSourceProvider(data_dir / "pr_icr17.json"),
            discovery_dir=data_dir,
            prefix="pr_icr17",
        )
        descriptors = registry.discover_sources()
        assert [d.rank for d in descriptors] == list(range(len(descriptors)))

    def test_declared_providers_precede_discovered_files(self, data_dir):
        declared = InMemorySourceProvider("manual", {"pr_data": {}})
        registry = SourceRegistry(
            JSONFileSourceProvider(data_dir / "pr_icr17.json"),
            [declared],
            discovery_dir=data_dir,
            prefix="pr_icr17",
        )
        names = [d.name for d in registry.discover_sources()]
        assert names[:2] == ["pr_icr17.json", "manual"]

    def test_file_providers_match_suffix(self, data_dir):
        registry = SourceRegistry(
            JSONFileSourceProvider(data_dir / "pr_icr17.json"),
            discovery_dir=data_dir,
            prefix="pr_icr17",
        )
        providers = {d.name: d.provider for d in registry.discover_sources()}
        assert isinstance(providers["pr_icr17_c.csv"], CSVFileSourceProvider)
        assert isinstance(providers["pr_icr17_a.json"], JSONFileSourceProvider)

    def test_new_files_are_picked_up_on_next_call(self, data_dir):
        registry = SourceRegistry(
            JSONFileSourceProvider(data_dir / "pr_icr17.json"),
            discovery_dir=data_dir,
            prefix="pr_icr17",
        )
        before = len(registry.discover_sources())
        _write_json(data_dir / "pr_icr17_d.json", {"2024-08-06": {"INV1": 0.009}})
        assert len(registry.discover_sources()) == before + 1


class TestDiscoveryFallback:
    def test_missing_directory_falls_back_to_declared(self, primary_provider, tmp_path, caplog):
        registry = SourceRegistry(primary_provider, discovery_dir=tmp_path / "missing", prefix="pr")
        with caplog.at_level("WARNING"):
            descriptors = registry.discover_sources()
        assert [d.name for d in descriptors] == ["primary"]
        assert "Could not list performance data directory" in caplog.text


# ---------------------------------------------------------------------------
# File providers
# ---------------------------------------------------------------------------


class TestJSONFileSourceProvider:
    def test_fetch_returns_payload(self, data_dir):
        payload = JSONFileSourceProvider(data_dir / "pr_icr17.json").fetch()
        assert payload["pr_data"] == {"2024-08-01": {"INV1": 0.0095}}

    def test_byte_order_mark_is_accepted(self, tmp_path):
        path = tmp_path / "pr_icr17_bom.json"
        payload = json.dumps({"pr_data": {"2024-08-01": {"INV1": 0.0095}}})
        path.write_bytes(b"\xef\xbb\xbf" + payload.encode("utf-8"))
        assert JSONFileSourceProvider(path).fetch()["pr_data"] == {"2024-08-01": {"INV1": 0.0095}}

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(SourceLoadError):
            JSONFileSourceProvider(tmp_path / "absent.json").fetch()

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SourceLoadError, match="invalid JSON"):
            JSONFileSourceProvider(path).fetch()

    def test_missing_pr_data_raises(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"data": {}}), encoding="utf-8")
        with pytest.raises(SourceLoadError, match="pr_data"):
            JSONFileSourceProvider(path).fetch()

    def test_name_defaults_to_file_name(self, tmp_path):
        provider = JSONFileSourceProvider(tmp_path / "pr_icr17.json")
        assert provider.name == "pr_icr17.json"
        assert provider.origin == str(tmp_path / "pr_icr17.json")


class TestCSVFileSourceProvider:
    def test_rows_fold_into_pr_data(self, tmp_path):
        path = tmp_path / "meter.csv"
        path.write_text(
            "Date,Asset_ID,Value\n"
            "2024-08-01,INV1,0.0095\n"
            "2024-08-01,INV2,0.0091\n"
            ",INV3,0.0090\n"
            "2024-08-02,INV1,0.0094\n",
            encoding="utf-8",
        )
        payload = CSVFileSourceProvider(path).fetch()
        assert payload["pr_data"] == {
            "2024-08-01": {"INV1": "0.0095", "INV2": "0.0091"},
            "2024-08-02": {"INV1": "0.0094"},
        }

    def test_missing_columns_raise(self, tmp_path):
        path = tmp_path / "meter.csv"
        path.write_text("date,value\n2024-08-01,0.0095\n", encoding="utf-8")
        with pytest.raises(SourceLoadError, match="asset_id"):
            CSVFileSourceProvider(path).fetch()


# ---------------------------------------------------------------------------
# Settings wiring
# ---------------------------------------------------------------------------


class TestBuildSourceRegistry:
    def test_registry_from_settings(self, data_dir):
        settings = AggregationSettings(
            data_dir=data_dir,
            primary_source="pr_icr17.json",
            source_prefix="pr_icr17",
        )
        registry = build_source_registry(settings)
        assert registry.primary.name == "pr_icr17.json"
        assert registry.discover_sources()[0].name == "pr_icr17.json"
        assert len(registry.discover_sources()) == 4
