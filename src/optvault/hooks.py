"""Named filter chains used to extend validation."""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

VALIDATE_SETTING = "validate_setting"
AFTER_VALIDATE_SETTING = "after_validate_setting"
WPML_OPTION_TYPES = "wpml_option_types"


class Hooks:
    """Registry of filters applied in priority order.

    A filter receives the current value followed by any extra arguments and
    returns the new value.  Applying a name without filters returns the value
    unchanged.
    """

    def __init__(self) -> None:
        self._filters: dict[str, list[tuple[int, int, Callable[..., Any]]]] = {}
        self._seq = 0

    def add_filter(self, name: str, fn: Callable[..., Any], priority: int = 10) -> None:
        """Register *fn* to run when filter *name* is applied."""
        self._seq += 1
        chain = self._filters.setdefault(name, [])
        chain.append((priority, self._seq, fn))
        chain.sort(key=lambda item: (item[0], item[1]))

    def remove_filter(self, name: str, fn: Callable[..., Any]) -> bool:
        chain = self._filters.get(name, [])
        kept = [item for item in chain if item[2] is not fn]
        if len(kept) == len(chain):
            return False
        self._filters[name] = kept
        return True

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.get(name))

    def apply(self, name: str, value: Any, *args: Any) -> Any:
        """Pass *value* through every filter registered for *name*."""
        for _priority, _seq, fn in self._filters.get(name, []):
            value = fn(value, *args)
        return value
