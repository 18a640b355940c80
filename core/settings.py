"""User settings loaded from settings.yaml."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Any

from core.fileio import read_yaml, write_yaml_atomic
from core.workspace import resolve_timezone, settings_path, workspace_root

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass
class Settings:
    timezone: str = ""  # empty -> system local
    fast_goal_hours: float = 16.0
    history_display: int = 5
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        """Build settings, falling back to defaults for missing or bad values."""
        if not d or not isinstance(d, dict):
            return cls()
        defaults = cls()

        try:
            goal_hours = float(d.get("fast_goal_hours", defaults.fast_goal_hours))
        except (TypeError, ValueError):
            goal_hours = defaults.fast_goal_hours
        if not math.isfinite(goal_hours) or goal_hours <= 0:
            goal_hours = defaults.fast_goal_hours

        try:
            history_display = int(d.get("history_display", defaults.history_display))
        except (TypeError, ValueError, OverflowError):
            history_display = defaults.history_display
        if history_display < 0:
            history_display = defaults.history_display

        level = str(d.get("log_level", defaults.log_level)).upper()
        if level not in VALID_LOG_LEVELS:
            level = defaults.log_level

        tz = d.get("timezone")
        return cls(
            timezone=tz.strip() if isinstance(tz, str) else "",
            fast_goal_hours=goal_hours,
            history_display=history_display,
            log_level=level,
        )

    def zone(self) -> tzinfo:
        """The configured zone, or the system's local zone when unset."""
        return resolve_timezone(self.timezone)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "fast_goal_hours": self.fast_goal_hours,
            "history_display": self.history_display,
            "log_level": self.log_level,
        }
        if self.timezone:
            d["timezone"] = self.timezone
        return d


def load_settings(root: Path | None = None) -> Settings:
    return Settings.from_dict(read_yaml(settings_path(root)))


def init_workspace(root: Path | None = None) -> Path:
    """Create the workspace with default settings if it does not exist yet."""
    if root is None:
        root = workspace_root()
    path = settings_path(root)
    if not path.exists():
        write_yaml_atomic(path, Settings().to_dict())
    return root
