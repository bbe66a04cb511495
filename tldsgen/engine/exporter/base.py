"""Exporter contract for persisting a finished TLD list."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...orchestrator import TldList


class BaseExporter(ABC):
    """Uniform exporter contract so the CLI can swap output targets."""

    @abstractmethod
    def export(self, result: "TldList") -> None:
        """Persist the full list in one go."""

    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["BaseExporter"]
