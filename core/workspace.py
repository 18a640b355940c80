"""Workspace root, local clock, path helpers for RepRing."""

from __future__ import annotations

import logging
import os
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.fileio import read_yaml

logger = logging.getLogger(__name__)


def workspace_root() -> Path:
    """Get the workspace root directory (contains settings.yaml and data/)."""
    return Path(
        os.environ.get("REPRING_ROOT", str(Path.home() / "repring"))
    ).expanduser().resolve()


def resolve_timezone(name: Any) -> tzinfo:
    """Zone for an IANA name; the system's local zone if blank or unknown."""
    if isinstance(name, str) and name.strip():
        try:
            return ZoneInfo(name.strip())
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, using system local time", name)
    return datetime.now().astimezone().tzinfo


def get_user_timezone(root: Path | None = None) -> tzinfo:
    """Timezone from settings.yaml, defaulting to the system's local zone."""
    if root is None:
        root = workspace_root()
    return resolve_timezone(read_yaml(settings_path(root)).get("timezone"))


def now_local(root: Path | None = None) -> datetime:
    """Get current wall-clock datetime in the user's timezone."""
    return datetime.now(get_user_timezone(root))


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) in the user's timezone."""
    return now_local(root).date().isoformat()


def as_local(dt: datetime, tz: tzinfo | None = None) -> datetime:
    """Attach tz (default: the system's local zone) to naive datetimes."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz if tz is not None else datetime.now().astimezone().tzinfo)
    return dt


# ── Path helpers ──────────────────────────────────────────────

def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def data_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "data"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"
