"""Save and restore option maps across a theme switch.

When the host switches from one theme (context) to another, the outgoing
theme's options are written to ``<storage_root>/<context>.cnf`` and, if the
incoming theme was snapshotted earlier, its options are validated against the
current schema and made active again.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from .errors import InvalidContextError
from .phpcompat import strip_slashes
from .serializers import SnapshotCodec, get_codec
from .store import OPTION_KEY, SCHEMA_KEY, Store, load_schema
from .validation import Validator

logger = logging.getLogger("optvault.snapshot")

SNAPSHOT_SUFFIX = ".cnf"

_CONTEXT_RX = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


class SnapshotManager:
    def __init__(
        self,
        store: Store,
        storage_root: Path,
        *,
        validator: Validator | None = None,
        codec: str | SnapshotCodec = "php",
        option_key: str = OPTION_KEY,
        schema_key: str = SCHEMA_KEY,
    ) -> None:
        self.store = store
        self.storage_root = Path(storage_root)
        self.validator = validator or Validator()
        self.codec = get_codec(codec) if isinstance(codec, str) else codec
        self.option_key = option_key
        self.schema_key = schema_key

    def snapshot_path(self, context_id: str) -> Path:
        if not context_id or _CONTEXT_RX.fullmatch(context_id) is None:
            raise InvalidContextError(f"invalid context id: {context_id!r}")
        return self.storage_root / f"{context_id}{SNAPSHOT_SUFFIX}"

    def list_snapshots(self) -> list[str]:
        if not self.storage_root.is_dir():
            return []
        return sorted(p.stem for p in self.storage_root.glob(f"*{SNAPSHOT_SUFFIX}"))

    def discard(self, context_id: str) -> bool:
        path = self.snapshot_path(context_id)
        if not path.exists():
            return False
        path.unlink()
        return True

    # ------------------------------------------------------------------
    def snapshot(self, context_id: str) -> Path:
        """Write the active option map as the snapshot of *context_id*."""
        path = self.snapshot_path(context_id)
        path.unlink(missing_ok=True)
        blob = self.codec.encode(self.store.get(self.option_key))
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            with tmp.open("wb") as fh:
                fh.write(blob)
            tmp.replace(path)
        finally:
            tmp.unlink(missing_ok=True)
        logger.info("Saved options of %s (%d bytes)", context_id, len(blob))
        return path

    def load(self, context_id: str) -> dict[str, Any] | None:
        """Return the decoded snapshot of *context_id*, or ``None``."""
        path = self.snapshot_path(context_id)
        if not path.exists():
            return None
        return self.codec.decode(path.read_bytes())

    def validate_options(self, options: dict[str, Any]) -> dict[str, Any]:
        """Validate every schema-declared field present in *options* in place."""
        schema = load_schema(self.store, self.schema_key)
        if schema is None:
            logger.warning("Option schema unavailable; restoring without validation")
            return options
        for entry in schema:
            if entry.id in options:
                value = strip_slashes(options[entry.id])
                options[entry.id] = self.validator.validate(value, entry.type, entry.id)
        return options

    def restore(self, context_id: str) -> dict[str, Any] | None:
        """Make the snapshot of *context_id* the active option map.

        Returns the restored map, or ``None`` when there was nothing to
        restore.
        """
        options = self.load(context_id)
        if options is None:
            logger.debug("No snapshot to restore for %s", context_id)
            return None
        options = self.validate_options(options)
        self.store.set(self.option_key, options)
        logger.info("Restored %d options of %s", len(options), context_id)
        return options

    def on_context_switch(self, outgoing: str, incoming: str) -> dict[str, Any] | None:
        """Snapshot *outgoing* and restore *incoming* if it has a snapshot."""
        self.snapshot(outgoing)
        return self.restore(incoming)
