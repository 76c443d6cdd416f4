from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any


class BaseBackend(ABC):
    """Abstract base backend for whole-document option stores."""

    suffixes: tuple[str, ...] = ()

    @abstractmethod
    def load(self, path: Path) -> dict[str, Any]:
        pass

    @abstractmethod
    def save(self, path: Path, data: Mapping[str, Any]) -> None:
        pass
