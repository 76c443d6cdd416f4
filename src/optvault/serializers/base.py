from __future__ import annotations

import base64
import binascii
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..errors import SnapshotDecodeError

logger = logging.getLogger("optvault.snapshot")


class SnapshotCodec(ABC):
    """Turn an option map into a snapshot blob and back.

    Blobs are base64 text wrapping the codec's own payload.  An empty map
    encodes to an empty blob.
    """

    name: str = ""

    @abstractmethod
    def dumps(self, data: Mapping[Any, Any]) -> bytes:
        pass

    @abstractmethod
    def loads(self, payload: bytes) -> Any:
        """Parse *payload*, raising :class:`SnapshotDecodeError` when malformed."""

    def encode(self, data: Mapping[Any, Any] | None) -> bytes:
        if not data:
            return b""
        return base64.b64encode(self.dumps(data))

    def decode(self, blob: bytes) -> dict | None:
        """Return the option map stored in *blob*, or ``None`` if there is none."""
        blob = blob.strip()
        if not blob:
            return None
        try:
            data = self.loads(base64.b64decode(blob, validate=True))
        except (binascii.Error, SnapshotDecodeError) as exc:
            logger.warning("Unreadable %s snapshot: %s", self.name, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Snapshot payload is not a map (%s)", type(data).__name__)
            return None
        return data
