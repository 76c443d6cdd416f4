"""PHP ``serialize()`` payloads.

Only the value kinds an option map can hold are supported: ``N`` (null),
``b`` (bool), ``i`` (int), ``d`` (float), ``s`` (byte-length prefixed string)
and ``a`` (array).  Non-empty arrays whose keys are exactly ``0..n-1`` decode to
lists, all others (including the empty array) to dicts.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from ..errors import SnapshotDecodeError
from . import register_codec
from .base import SnapshotCodec

# Option maps nest two levels; anything far deeper is a corrupt payload.
MAX_DEPTH = 32


def _dump_float(value: float) -> str:
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    return repr(value)


def _dump_key(key: Any, out: list[bytes]) -> None:
    if isinstance(key, bool) or not isinstance(key, int):
        _dump(str(key), out)
    else:
        _dump(key, out)


def _dump(value: Any, out: list[bytes]) -> None:
    if value is None:
        out.append(b"N;")
    elif isinstance(value, bool):
        out.append(b"b:1;" if value else b"b:0;")
    elif isinstance(value, int):
        out.append(f"i:{value};".encode())
    elif isinstance(value, float):
        out.append(f"d:{_dump_float(value)};".encode())
    elif isinstance(value, str):
        raw = value.encode("utf-8")
        out.append(f's:{len(raw)}:"'.encode() + raw + b'";')
    elif isinstance(value, (Mapping, list, tuple)):
        pairs = value.items() if isinstance(value, Mapping) else enumerate(value)
        pairs = list(pairs)
        out.append(f"a:{len(pairs)}:{{".encode())
        for key, item in pairs:
            _dump_key(key, out)
            _dump(item, out)
        out.append(b"}")
    else:
        raise TypeError(f"cannot serialize {type(value).__name__}")


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0
        self.depth = 0

    def fail(self, msg: str) -> SnapshotDecodeError:
        return SnapshotDecodeError(f"{msg} at offset {self.pos}")

    def expect(self, token: bytes) -> None:
        end = self.pos + len(token)
        if self.data[self.pos:end] != token:
            raise self.fail(f"expected {token!r}")
        self.pos = end

    def until(self, stop: bytes) -> bytes:
        end = self.data.find(stop, self.pos)
        if end < 0:
            raise self.fail(f"missing {stop!r}")
        chunk = self.data[self.pos:end]
        self.pos = end + len(stop)
        return chunk

    def integer(self, stop: bytes) -> int:
        raw = self.until(stop)
        try:
            return int(raw)
        except ValueError:
            raise self.fail(f"bad integer {raw!r}") from None

    def value(self) -> Any:
        kind = self.data[self.pos:self.pos + 2]
        if kind == b"N;":
            self.pos += 2
            return None
        self.pos += 2
        if kind == b"b:":
            raw = self.until(b";")
            if raw not in (b"0", b"1"):
                raise self.fail(f"bad boolean {raw!r}")
            return raw == b"1"
        if kind == b"i:":
            return self.integer(b";")
        if kind == b"d:":
            raw = self.until(b";").decode("ascii", "replace")
            special = {"NAN": math.nan, "INF": math.inf, "-INF": -math.inf}
            if raw in special:
                return special[raw]
            try:
                return float(raw)
            except ValueError:
                raise self.fail(f"bad float {raw!r}") from None
        if kind == b"s:":
            length = self.integer(b":")
            self.expect(b'"')
            raw = self.data[self.pos:self.pos + length]
            if len(raw) != length or length < 0:
                raise self.fail("string shorter than declared")
            self.pos += length
            self.expect(b'";')
            try:
                return raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise SnapshotDecodeError(str(exc)) from exc
        if kind == b"a:":
            count = self.integer(b":")
            self.expect(b"{")
            if self.depth >= MAX_DEPTH:
                raise self.fail(f"arrays nested deeper than {MAX_DEPTH}")
            self.depth += 1
            result: dict[Any, Any] = {}
            for _ in range(count):
                key = self.value()
                if not isinstance(key, (int, str)) or isinstance(key, bool):
                    raise self.fail("array keys must be int or string")
                result[key] = self.value()
            self.depth -= 1
            self.expect(b"}")
            if result and list(result) == list(range(len(result))):
                return list(result.values())
            return result
        raise self.fail(f"unsupported value kind {kind!r}")


def dumps(value: Any) -> bytes:
    out: list[bytes] = []
    _dump(value, out)
    return b"".join(out)


def loads(payload: bytes) -> Any:
    reader = _Reader(payload)
    value = reader.value()
    if reader.pos != len(payload):
        raise reader.fail("trailing data")
    return value


@register_codec
class PhpCodec(SnapshotCodec):
    """Snapshots readable by ``unserialize(base64_decode(...))``."""

    name = "php"

    def dumps(self, data: Mapping[Any, Any]) -> bytes:
        return dumps(data)

    def loads(self, payload: bytes) -> Any:
        return loads(payload)
