"""
sources/registry.py

Statically declared registry of performance sources.

Discovery order
---------------
1. The primary source (rank 0).  Always present, always first.
2. Explicitly declared providers, in declaration order.
3. Supplementary files found in ``discovery_dir`` whose name starts with the
   naming-convention prefix and ends in ``.json`` or ``.csv``, sorted by
   file name.  The primary's own file is never listed twice.

Rank equals position in the discovered list, so later sources override
earlier ones during merge.  The directory is listed on every call; a
listing failure degrades to the primary plus declared providers.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from app.config import AggregationSettings
from sources.base import BaseSourceProvider, SourceDescriptor
from sources.providers import CSVFileSourceProvider, JSONFileSourceProvider

logger = logging.getLogger(__name__)

_PROVIDER_BY_SUFFIX: dict[str, Callable[[Path], BaseSourceProvider]] = {
    ".json": JSONFileSourceProvider,
    ".csv": CSVFileSourceProvider,
}


class SourceRegistry:
    """
    Enumerates performance sources in override-rank order.

    Parameters
    ----------
    primary:
        The primary source provider.
    providers:
        Additional providers declared at startup.
    discovery_dir:
        Directory scanned for supplementary source files.  ``None`` disables
        directory discovery.
    prefix:
        File-name prefix a supplementary file must carry.
    """

    def __init__(
        self,
        primary: BaseSourceProvider,
        providers: Sequence[BaseSourceProvider] = (),
        *,
        discovery_dir: Path | str | None = None,
        prefix: str = "",
    ) -> None:
        self._primary = primary
        self._providers = tuple(providers)
        self._discovery_dir = Path(discovery_dir) if discovery_dir is not None else None
        self._prefix = prefix

    @property
    def primary(self) -> BaseSourceProvider:
        return self._primary

    def discover_sources(self) -> list[SourceDescriptor]:
        """
        Return every known source, primary first, in override-rank order.
        """

        providers: list[BaseSourceProvider] = [self._primary, *self._providers]
        providers.extend(self._discover_files())

        descriptors = [
            SourceDescriptor(name=p.name, origin=p.origin, rank=rank, provider=p)
            for rank, p in enumerate(providers)
        ]
        logger.debug(
            "Discovered %d performance source(s): %s",
            len(descriptors),
            ", ".join(d.name for d in descriptors),
        )
        return descriptors

    def _discover_files(self) -> list[BaseSourceProvider]:
        if self._discovery_dir is None:
            return []

        try:
            entries = sorted(
                (entry for entry in self._discovery_dir.iterdir() if entry.is_file()),
                key=lambda entry: entry.name,
            )
        except OSError as exc:
            logger.warning(
                "Could not list performance data directory %s; using declared sources only: %s",
                self._discovery_dir,
                exc,
            )
            return []

        taken = {self._primary.origin, *(p.origin for p in self._providers)}
        discovered: list[BaseSourceProvider] = []
        for entry in entries:
            factory = _PROVIDER_BY_SUFFIX.get(entry.suffix.lower())
            if factory is None or not entry.name.startswith(self._prefix):
                continue
            if str(entry) in taken:
                continue
            discovered.append(factory(entry))
        return discovered


def build_source_registry(settings: AggregationSettings) -> SourceRegistry:
    """
    Build the registry declared by *settings*.

    The primary source file is resolved relative to ``settings.data_dir``;
    its format is chosen from the file suffix (JSON unless ``.csv``).
    """

    primary_path = settings.data_dir / settings.primary_source
    factory = _PROVIDER_BY_SUFFIX.get(primary_path.suffix.lower(), JSONFileSourceProvider)
    return SourceRegistry(
        factory(primary_path),
        discovery_dir=settings.data_dir,
        prefix=settings.source_prefix,
    )
