"""
sources package marker.
"""

from sources.base import BaseSourceProvider, SourceDescriptor
from sources.providers import CSVFileSourceProvider, InMemorySourceProvider, JSONFileSourceProvider
from sources.registry import SourceRegistry, build_source_registry

__all__ = [
    "BaseSourceProvider",
    "CSVFileSourceProvider",
    "InMemorySourceProvider",
    "JSONFileSourceProvider",
    "SourceDescriptor",
    "SourceRegistry",
    "build_source_registry",
]
