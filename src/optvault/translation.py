from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Protocol

logger = logging.getLogger("optvault.translation")


class TranslationRegistry(Protocol):
    """Protocol for registries of translatable option strings."""

    def register_string(self, string_id: str, value: str) -> None:
        """Make *value* translatable under *string_id*."""

    def unregister_string(self, string_id: str) -> None:
        """Forget *string_id* if it is registered."""


class StringRegistry(Mapping[str, str]):
    """In-memory translation registry."""

    def __init__(self) -> None:
        self._strings: dict[str, str] = {}

    def register_string(self, string_id: str, value: str) -> None:
        logger.debug("register string %s", string_id)
        self._strings[string_id] = value

    def unregister_string(self, string_id: str) -> None:
        if self._strings.pop(string_id, None) is not None:
            logger.debug("unregister string %s", string_id)

    def __getitem__(self, key: str) -> str:
        return self._strings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings)

    def __len__(self) -> int:
        return len(self._strings)
