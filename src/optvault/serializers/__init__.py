"""Snapshot codec registry."""
from __future__ import annotations

from ..errors import UnknownCodecError
from .base import SnapshotCodec

_REGISTRY: dict[str, type[SnapshotCodec]] = {}


def register_codec(codec: type[SnapshotCodec]) -> type[SnapshotCodec]:
    """Register a codec class and return it for decorator use."""
    _REGISTRY[codec.name] = codec
    return codec


def get_codec(name: str) -> SnapshotCodec:
    codec_cls = _REGISTRY.get(name.lower())
    if codec_cls is None:
        raise UnknownCodecError(f"No snapshot codec named {name!r}")
    return codec_cls()


def available_codecs() -> list[str]:
    return sorted(_REGISTRY)


# register default codecs
from . import json_codec, php_codec, yaml_codec  # noqa: F401,E402
