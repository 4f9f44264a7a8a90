"""Abstract base class for exporters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from tsviz.config import TsvizConfig


class Exporter(ABC):
    """Base class for all output exporters."""

    @abstractmethod
    def export(self, payload: Any, config: TsvizConfig) -> None:
        """Export a transformed payload."""
        ...
