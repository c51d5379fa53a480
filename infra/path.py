# infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "CriticalPathScheduler"


def user_data_dir() -> Path:
    """
    Per-user data directory for the schedule store and logs:

    Windows:
        C:\\Users\\<User>\\AppData\\Roaming\\CriticalPathScheduler

    macOS:
        ~/Library/Application Support/CriticalPathScheduler

    Linux:
        $XDG_DATA_HOME/CriticalPathScheduler (~/.local/share by default)

    SCHEDULER_DATA_DIR overrides all of the above.
    """
    override = (os.getenv("SCHEDULER_DATA_DIR") or "").strip()
    if override:
        path = Path(override).expanduser()
    elif sys.platform.startswith("win"):
        path = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming")) / APP_NAME
    elif sys.platform == "darwin":
        path = Path.home() / "Library" / "Application Support" / APP_NAME
    else:
        path = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share")) / APP_NAME

    try:
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError:
        # Last-resort fallback: use home directory
        fallback = Path.home() / f".{APP_NAME}"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def default_db_path() -> Path:
    return user_data_dir() / "schedules.db"
