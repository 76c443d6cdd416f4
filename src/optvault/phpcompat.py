"""PHP value semantics shared by the validation rules.

Option values originate in a PHP host, so "has a value" follows PHP's
``empty()`` rather than Python truthiness: the string ``"0"`` is empty there.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_NUMERIC_RX = re.compile(r"[ \t\n\r\v\f]*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?[ \t\n\r\v\f]*")
_INT_RX = re.compile(r"\s*[+-]?(0|[1-9]\d*)\s*")
_SLASH_RX = re.compile(r"\\(.?)", re.DOTALL)


def is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def is_empty(value: Any) -> bool:
    """Return ``True`` when PHP's ``empty()`` would."""

    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (int, float)):
        return value == 0
    if is_container(value):
        return len(value) == 0
    return False


def is_blank(value: Any) -> bool:
    """Empty and of zero length, i.e. a sub-key that carries nothing.

    ``"0"`` and ``0`` are empty but not blank.
    """

    if value is None or value is False or value == "":
        return True
    return is_container(value) and len(value) == 0


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        return _NUMERIC_RX.fullmatch(value) is not None
    return False


def is_int_literal(value: Any) -> bool:
    """Mirror ``filter_var($value, FILTER_VALIDATE_INT) !== false``."""

    if isinstance(value, bool):
        return value is True
    if isinstance(value, int):
        return True
    if isinstance(value, str):
        return _INT_RX.fullmatch(value) is not None
    return False


def items(value: Any) -> list[tuple[Any, Any]]:
    """Return key/value pairs of a PHP array (dict or list)."""

    if isinstance(value, Mapping):
        return list(value.items())
    if isinstance(value, list):
        return list(enumerate(value))
    return []


def any_truthy(value: Any) -> bool:
    """Return ``True`` if any member of *value* is non-empty."""

    return any(not is_empty(v) for _, v in items(value))


def stripslashes(text: str) -> str:
    def _unquote(match: re.Match[str]) -> str:
        ch = match.group(1)
        return "\x00" if ch == "0" else ch

    return _SLASH_RX.sub(_unquote, text)


def strip_slashes(value: Any) -> Any:
    """Trim and unquote string leaves of *value*, recursing into containers."""

    if isinstance(value, dict):
        return {k: strip_slashes(v) for k, v in value.items()}
    if isinstance(value, list):
        return [strip_slashes(v) for v in value]
    if isinstance(value, str):
        return stripslashes(value.strip())
    return value
