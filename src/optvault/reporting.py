from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger("optvault.errors")

ERROR_SCOPE = "optvault"


@dataclass(frozen=True)
class ValidationError:
    """A field value that was coerced because it did not fit its type."""

    code: str
    field_id: str
    message: str


@dataclass(frozen=True)
class SettingsError:
    scope: str
    code: str
    message: str
    severity: str = "error"


class ErrorChannel(Protocol):
    """Sink for validation errors raised while sanitizing options."""

    def report(self, scope: str, code: str, message: str, severity: str = "error") -> None:
        """Record a single error."""


class ErrorLog:
    """In-memory error channel that also logs every report."""

    def __init__(self) -> None:
        self._entries: list[SettingsError] = []

    def report(self, scope: str, code: str, message: str, severity: str = "error") -> None:
        entry = SettingsError(scope, code, message, severity)
        self._entries.append(entry)
        logger.warning("[%s] %s: %s", scope, code, message)

    def for_scope(self, scope: str) -> list[SettingsError]:
        return [e for e in self._entries if e.scope == scope]

    def codes(self) -> list[str]:
        return [e.code for e in self._entries]

    def clear(self) -> None:
        self._entries.clear()

    def __iter__(self) -> Iterator[SettingsError]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
