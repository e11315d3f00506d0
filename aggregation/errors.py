"""
aggregation/errors.py

Exceptions raised by the performance aggregation pipeline.
"""

from __future__ import annotations


class PerformanceDataError(Exception):
    """Base exception for aggregation pipeline failures."""


class SourceLoadError(PerformanceDataError, ValueError):
    """
    Raised by a source provider when its dataset cannot be read or parsed.

    The loader converts this into a :class:`~app.domain.performance.LoadFailure`;
    it never escapes the aggregation layer.
    """


class PerformanceDataUnavailableError(PerformanceDataError, RuntimeError):
    """
    Raised when no source, including the primary, could be loaded.

    This is the only hard failure of the pipeline.
    """
