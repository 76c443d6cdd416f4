from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .config import VaultConfig, load_config
from .errors import OptVaultError
from .paths import default_config_file


def _config(args: argparse.Namespace) -> VaultConfig:
    return load_config(args.config)


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        return raw


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def show_paths(args: argparse.Namespace) -> int:
    cfg = _config(args)
    data = {
        "config_file": args.config or default_config_file(),
        "storage_root": cfg.storage_root,
        "store_path": cfg.store_path,
    }
    if args.as_json:
        print(json.dumps({k: str(v) for k, v in data.items()}))
    else:
        for k, v in data.items():
            print(f"{k}: {v}")
    return 0


def switch_cmd(args: argparse.Namespace) -> int:
    manager = _config(args).build_manager()
    restored = manager.on_context_switch(args.outgoing, args.incoming)
    if restored is None:
        print("no snapshot")
    else:
        print(f"restored {len(restored)} options")
    return 0


def snapshot_cmd(args: argparse.Namespace) -> int:
    path = _config(args).build_manager().snapshot(args.context)
    print(str(path))
    return 0


def restore_cmd(args: argparse.Namespace) -> int:
    restored = _config(args).build_manager().restore(args.context)
    if restored is None:
        print("no snapshot", file=sys.stderr)
        return 1
    print(f"restored {len(restored)} options")
    return 0


def list_cmd(args: argparse.Namespace) -> int:
    for name in _config(args).build_manager().list_snapshots():
        print(name)
    return 0


def discard_cmd(args: argparse.Namespace) -> int:
    if not _config(args).build_manager().discard(args.context):
        print(f"no snapshot for {args.context}", file=sys.stderr)
        return 1
    return 0


def validate_cmd(args: argparse.Namespace) -> int:
    validator = _config(args).build_validator()
    result = validator.check(_parse_value(args.value), args.type, args.field)
    if args.as_json or not isinstance(result.value, str):
        print(json.dumps(result.value, ensure_ascii=False))
    else:
        print(result.value)
    for err in result.errors:
        print(f"{err.code}: {err.message}", file=sys.stderr)
    return 0 if result.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="optvault", description="Keep theme options across theme switches."
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to optvault.ini")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_paths = subparsers.add_parser("paths", help="Show optvault paths.")
    p_paths.add_argument("--json", dest="as_json", action="store_true")
    p_paths.set_defaults(func=show_paths)

    p_switch = subparsers.add_parser("switch", help="Snapshot OUTGOING and restore INCOMING.")
    p_switch.add_argument("outgoing")
    p_switch.add_argument("incoming")
    p_switch.set_defaults(func=switch_cmd)

    p_snap = subparsers.add_parser("snapshot", help="Save the active options for CONTEXT.")
    p_snap.add_argument("context")
    p_snap.set_defaults(func=snapshot_cmd)

    p_restore = subparsers.add_parser("restore", help="Restore the options saved for CONTEXT.")
    p_restore.add_argument("context")
    p_restore.set_defaults(func=restore_cmd)

    p_list = subparsers.add_parser("list", help="List saved snapshots.")
    p_list.set_defaults(func=list_cmd)

    p_discard = subparsers.add_parser("discard", help="Delete the snapshot for CONTEXT.")
    p_discard.add_argument("context")
    p_discard.set_defaults(func=discard_cmd)

    p_val = subparsers.add_parser("validate", help="Validate VALUE as option TYPE.")
    p_val.add_argument("type")
    p_val.add_argument("field")
    p_val.add_argument("value", help="JSON value, or a plain string")
    p_val.add_argument("--json", dest="as_json", action="store_true")
    p_val.set_defaults(func=validate_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1
    try:
        return int(func(args))
    except OptVaultError as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
