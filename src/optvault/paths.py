from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir as _uc, user_data_dir as _ud

APP_NAME = "optvault"


def _app_name(default: str) -> str:
    return os.getenv("OPTVAULT_APP_NAME", default)


def user_config_dir(app_name: str = APP_NAME) -> Path:
    return Path(_uc(appname=_app_name(app_name))).resolve()


def user_data_dir(app_name: str = APP_NAME) -> Path:
    return Path(_ud(appname=_app_name(app_name))).resolve()


def default_config_file(app_name: str = APP_NAME) -> Path:
    return user_config_dir(app_name) / f"{APP_NAME}.ini"


def default_storage_root(app_name: str = APP_NAME) -> Path:
    """Directory holding one ``.cnf`` snapshot per context."""
    return user_data_dir(app_name) / "settings"


def default_store_path(app_name: str = APP_NAME) -> Path:
    return user_config_dir(app_name) / "options.json"
