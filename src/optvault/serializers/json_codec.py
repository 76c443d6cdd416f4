from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from ..errors import SnapshotDecodeError
from . import register_codec
from .base import SnapshotCodec


@register_codec
class JsonCodec(SnapshotCodec):
    """JSON payload.  Non-string keys come back as strings."""

    name = "json"

    def dumps(self, data: Mapping[Any, Any]) -> bytes:
        return json.dumps(data, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    def loads(self, payload: bytes) -> Any:
        try:
            return json.loads(payload.decode("utf-8"))
        except (ValueError, RecursionError) as exc:
            raise SnapshotDecodeError(str(exc)) from exc
