"""
sources/base.py

Source provider abstraction for raw performance datasets.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class BaseSourceProvider(ABC):
    """
    Provider interface for one raw performance dataset.

    Implementations return the dataset in its raw form::

        {"pr_data": {"2024-08-01": {"L17_LT1_INV1": 0.0095, ...}, ...}}

    Values are left untouched; numeric parsing and filtering belong to
    :class:`~aggregation.loader.DatasetLoader`.
    """

    name: str
    origin: str

    def __init__(self, *, name: str, origin: str) -> None:
        self.name = name
        self.origin = origin

    @abstractmethod
    def fetch(self) -> dict[str, Any]:
        """
        Read the source and return its raw payload.

        Raises
        ------
        aggregation.errors.SourceLoadError
            If the source is unreadable or structurally invalid.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, origin={self.origin!r})"


@dataclass(frozen=True)
class SourceDescriptor:
    """
    A discovered source and its override rank.

    Rank 0 is the primary source.  Higher ranks override lower ranks when
    the same (date, asset) pair is defined more than once.
    """

    name: str
    origin: str
    rank: int
    provider: BaseSourceProvider
