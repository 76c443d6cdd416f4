from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from .errors import ConfigError
from .io_config import IniIOError, read_sections, write_sections
from .paths import APP_NAME, default_config_file, default_storage_root, default_store_path
from .serializers import available_codecs
from .snapshot import SnapshotManager
from .store import OPTION_KEY, SCHEMA_KEY, FileStore
from .validation import Validator

logger = logging.getLogger(__name__)

SECTION = APP_NAME
ENV_PREFIX = "OPTVAULT_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class VaultConfig:
    """Settings for the snapshot manager and the validator."""

    storage_root: Path = field(default_factory=default_storage_root)
    store_path: Path = field(default_factory=default_store_path)
    codec: str = "php"
    # Replaces the host-wide "allow unfiltered HTML" switch.
    allow_unfiltered_markup: bool = False
    # Whether the acting user may save unrestricted markup.
    unrestricted_markup: bool = False
    option_key: str = OPTION_KEY
    schema_key: str = SCHEMA_KEY

    def build_validator(self, **kwargs) -> Validator:
        trusted = self.unrestricted_markup
        kwargs.setdefault("has_unrestricted_markup", lambda: trusted)
        return Validator(allow_unfiltered_markup=self.allow_unfiltered_markup, **kwargs)

    def build_manager(self, *, validator: Validator | None = None) -> SnapshotManager:
        return SnapshotManager(
            FileStore(self.store_path),
            self.storage_root,
            validator=validator or self.build_validator(),
            codec=self.codec,
            option_key=self.option_key,
            schema_key=self.schema_key,
        )


def parse_bool(raw: str, *, name: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"invalid boolean for {name}: {raw!r}")


def _coerce(config: VaultConfig, values: Mapping[str, str], source: str) -> VaultConfig:
    known = {f.name: f for f in fields(VaultConfig)}
    changes: dict[str, object] = {}
    for key, raw in values.items():
        name = key.strip().lower().replace("-", "_")
        if name not in known:
            logger.warning("Ignoring unknown setting %r in %s", key, source)
            continue
        if name in ("storage_root", "store_path"):
            changes[name] = Path(raw).expanduser()
        elif name in ("allow_unfiltered_markup", "unrestricted_markup"):
            changes[name] = parse_bool(raw, name=name)
        else:
            changes[name] = raw.strip()
    return replace(config, **changes)


def read_env(env: Mapping[str, str]) -> dict[str, str]:
    result: dict[str, str] = {}
    for key, value in env.items():
        if key.startswith(ENV_PREFIX) and key != "OPTVAULT_APP_NAME":
            result[key[len(ENV_PREFIX):].lower()] = value
    return result


def load_config(path: Path | None = None, *, env: Mapping[str, str] | None = None) -> VaultConfig:
    """Return the effective configuration.

    Defaults come from the platform directories, then the ``[optvault]``
    section of *path* (or the user config file), then ``OPTVAULT_*``
    environment variables.
    """

    env = os.environ if env is None else env
    config = VaultConfig()
    ini = Path(path) if path is not None else default_config_file()
    try:
        sections = read_sections(ini)
    except IniIOError as exc:
        raise ConfigError(f"cannot read {ini}: {exc}") from exc
    if SECTION in sections:
        config = _coerce(config, sections[SECTION], str(ini))
    elif path is not None and not ini.exists():
        raise ConfigError(f"config file not found: {ini}")
    config = _coerce(config, read_env(env), "environment")
    if config.codec.lower() not in available_codecs():
        raise ConfigError(
            f"unknown codec {config.codec!r}; expected one of {', '.join(available_codecs())}"
        )
    return config


def write_config(path: Path, config: VaultConfig) -> Path:
    values = {
        "storage_root": str(config.storage_root),
        "store_path": str(config.store_path),
        "codec": config.codec,
        "allow_unfiltered_markup": "true" if config.allow_unfiltered_markup else "false",
        "unrestricted_markup": "true" if config.unrestricted_markup else "false",
        "option_key": config.option_key,
        "schema_key": config.schema_key,
    }
    write_sections(Path(path), {SECTION: values})
    return Path(path)
