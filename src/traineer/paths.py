from __future__ import annotations

import os
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths


APP_NAME = "Traineer"


def get_base_dir() -> Path:
    """
    Return application read-only base directory.

    Priority:
    1) APP_BASE_DIR environment variable
    2) PyInstaller _MEIPASS
    3) project root in development mode
    """
    env_base = os.environ.get("APP_BASE_DIR", "").strip()
    if env_base:
        return Path(env_base)

    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        return Path(sys._MEIPASS)  # type: ignore[attr-defined]

    return Path(__file__).resolve().parents[2]


def get_user_data_dir() -> Path:
    """
    Return writable user data directory.
    """
    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
    if location:
        target = Path(location)
    elif sys.platform == "win32":
        target = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local")) / APP_NAME
    else:
        target = Path.home() / ".local" / "share" / APP_NAME

    # Without application metadata Qt returns an app-agnostic location.
    if target.name.lower() != APP_NAME.lower():
        target = target / APP_NAME

    target.mkdir(parents=True, exist_ok=True)
    return target


def get_log_dir() -> Path:
    target = get_user_data_dir() / "logs"
    target.mkdir(parents=True, exist_ok=True)
    return target


def get_bundled_catalog() -> Path:
    return get_base_dir() / "config" / "catalog.yaml"


def resolve_config_path() -> Path:
    """
    Resolve writable config path.

    Priority:
    1) User data config path
    2) First-run bootstrap copy from the bundled config (if present)
    3) Return user data path (even if not created yet)
    """
    user_cfg = get_user_data_dir() / "config.json"
    if user_cfg.exists():
        return user_cfg

    bundled = get_base_dir() / "config" / "config.json"
    if bundled.exists():
        try:
            user_cfg.write_text(bundled.read_text(encoding="utf-8"), encoding="utf-8")
        except OSError:
            return bundled

    return user_cfg


def resolve_catalog_path(config_path: Path, catalog_path: str) -> Path:
    """Relative catalog paths are resolved against the config file's folder."""
    value = (catalog_path or "").strip()
    if not value:
        return get_bundled_catalog()
    candidate = Path(value).expanduser()
    if candidate.is_absolute():
        return candidate
    return config_path.parent / candidate
