from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..errors import StoreLoadError
from . import register_backend
from .base import BaseBackend


@register_backend
class JsonBackend(BaseBackend):
    """JSON file backend."""

    suffixes = (".json",)

    def load(self, path: Path) -> dict[str, Any]:
        path = Path(path)
        if not path.exists():
            return {}
        raw = path.read_text(encoding="utf-8")
        if raw.strip() == "":
            return {}
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise StoreLoadError(str(exc)) from exc
        if not isinstance(data, dict):
            raise StoreLoadError("Root of JSON store must be an object")
        return data

    def save(self, path: Path, data: Mapping[str, Any]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(dict(data), fh, indent=2, ensure_ascii=False)
        tmp.replace(path)
