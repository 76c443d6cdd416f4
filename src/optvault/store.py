from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from threading import RLock
from typing import Any, Protocol

logger = logging.getLogger("optvault")

OPTION_KEY = "option_tree"
SCHEMA_KEY = "option_tree_settings"


def _backend_for(path: Path):
    from .backends import get_backend_for_path

    return get_backend_for_path(path)


class Store(Protocol):
    """Key/value configuration store of the host application."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under *key* or *default*."""

    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under *key*."""


class MemoryStore:
    """Store kept in a dictionary; values are copied on the way in and out."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(data) if data else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def keys(self) -> list[str]:
        return list(self._data)


class FileStore:
    """Store persisted as one JSON or YAML document.

    Every :meth:`set` rewrites the whole document through a temporary file so
    readers never see a partial write.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._backend = _backend_for(self.path)
        self._lock = RLock()

    def _load(self) -> dict[str, Any]:
        return self._backend.load(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._backend.save(self.path, data)
        logger.debug("stored %s in %s", key, self.path)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._load())


@dataclass(frozen=True)
class SchemaEntry:
    """A declared option field and its validation type."""

    id: str
    type: str


def parse_schema(settings: Iterable[Any]) -> list[SchemaEntry]:
    entries: list[SchemaEntry] = []
    for item in settings:
        if not isinstance(item, dict):
            continue
        field_id = item.get("id")
        if not field_id:
            logger.debug("skipping schema entry without id: %r", item)
            continue
        entries.append(SchemaEntry(str(field_id), str(item.get("type") or "")))
    return entries


def load_schema(store: Store, key: str = SCHEMA_KEY) -> list[SchemaEntry] | None:
    """Return the schema entries stored under *key*.

    ``None`` means the schema is unavailable: missing, not a mapping, or its
    ``settings`` member is not a list.
    """

    raw = store.get(key)
    if not isinstance(raw, dict):
        return None
    settings = raw.get("settings")
    if not isinstance(settings, list):
        return None
    return parse_schema(settings)
