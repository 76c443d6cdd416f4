from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import yaml

from ..errors import SnapshotDecodeError
from . import register_codec
from .base import SnapshotCodec


@register_codec
class YamlCodec(SnapshotCodec):
    """YAML payload written with PyYAML's safe dumper."""

    name = "yaml"

    def dumps(self, data: Mapping[Any, Any]) -> bytes:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        return text.encode("utf-8")

    def loads(self, payload: bytes) -> Any:
        try:
            return yaml.safe_load(payload.decode("utf-8"))
        except (yaml.YAMLError, UnicodeDecodeError, RecursionError) as exc:
            raise SnapshotDecodeError(str(exc)) from exc
