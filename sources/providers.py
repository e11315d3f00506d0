"""
sources/providers.py

Concrete source providers: JSON files, long-format CSV files and
in-process mappings.
"""

from __future__ import annotations

import copy
import csv
import json
import logging
from pathlib import Path
from typing import Any, Mapping

from aggregation.errors import SourceLoadError
from sources.base import BaseSourceProvider

logger = logging.getLogger(__name__)

CSV_REQUIRED_COLUMNS = ("date", "asset_id", "value")


def _require_pr_data(payload: object, source_name: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise SourceLoadError(f"{source_name}: payload must be a JSON object.")
    pr_data = payload.get("pr_data")
    if not isinstance(pr_data, dict):
        raise SourceLoadError(f"{source_name}: payload has no 'pr_data' mapping.")
    return payload


class JSONFileSourceProvider(BaseSourceProvider):
    """
    Reads a JSON document with a top-level ``pr_data`` mapping.
    """

    def __init__(self, path: Path | str, *, name: str | None = None) -> None:
        self._path = Path(path)
        super().__init__(name=name or self._path.name, origin=str(self._path))

    def fetch(self) -> dict[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise SourceLoadError(f"{self.name}: unable to read {self._path}.") from exc
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise SourceLoadError(f"{self.name}: invalid JSON ({exc}).") from exc
        return _require_pr_data(payload, self.name)


class CSVFileSourceProvider(BaseSourceProvider):
    """
    Reads a long-format CSV with header ``date,asset_id,value``.

    Rows are folded into the ``pr_data`` shape.  Rows with an empty date or
    asset id are skipped; the value column is passed through as text.  When
    the same (date, asset) pair appears more than once, the last row wins.
    """

    def __init__(self, path: Path | str, *, name: str | None = None) -> None:
        self._path = Path(path)
        super().__init__(name=name or self._path.name, origin=str(self._path))

    def fetch(self) -> dict[str, Any]:
        try:
            with self._path.open("r", encoding="utf-8-sig", newline="") as handle:
                reader = csv.DictReader(handle)
                headers = tuple((column or "").strip().lower() for column in reader.fieldnames or ())
                missing = [column for column in CSV_REQUIRED_COLUMNS if column not in headers]
                if missing:
                    raise SourceLoadError(
                        f"{self.name}: missing CSV column(s): {', '.join(missing)}."
                    )
                reader.fieldnames = list(headers)

                pr_data: dict[str, dict[str, Any]] = {}
                skipped = 0
                for row in reader:
                    date_key = (row.get("date") or "").strip()
                    asset_id = (row.get("asset_id") or "").strip()
                    if not date_key or not asset_id:
                        skipped += 1
                        continue
                    pr_data.setdefault(date_key, {})[asset_id] = row.get("value")
        except OSError as exc:
            raise SourceLoadError(f"{self.name}: unable to read {self._path}.") from exc
        except csv.Error as exc:
            raise SourceLoadError(f"{self.name}: malformed CSV ({exc}).") from exc

        if skipped:
            logger.debug("CSV source %s skipped %d row(s) without date/asset_id", self.name, skipped)
        return {"pr_data": pr_data}


class InMemorySourceProvider(BaseSourceProvider):
    """
    Serves a payload held in process memory.

    The payload is deep-copied on every fetch so later edits by the owner
    are visible on the next recomputation but never leak into a snapshot
    that is already cached.
    """

    def __init__(self, name: str, payload: Mapping[str, Any], *, origin: str = "memory") -> None:
        super().__init__(name=name, origin=origin)
        self.payload = payload

    def fetch(self) -> dict[str, Any]:
        return _require_pr_data(copy.deepcopy(dict(self.payload)), self.name)
