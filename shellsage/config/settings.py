"""
Settings management for ShellSage.

Settings are a two-level mapping (section -> key -> value) stored as JSON in
the platform configuration directory. Values found in the file are merged
over ``DEFAULT_SETTINGS``, so a partial file only overrides what it names.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from shellsage.executor import platform_utils

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "settings.json"
DEBUG_LOG_FILE_NAME = "shellsage.log"


def default_config_dir() -> Path:
    """Return the per-user configuration directory for this platform."""
    if platform_utils.is_windows():
        return Path(os.environ.get("APPDATA", "")) / "ShellSage"
    if platform_utils.is_macos():
        return Path.home() / "Library" / "Application Support" / "ShellSage"
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / "shellsage"


def merge_settings(target: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    """Merge ``overrides`` into ``target`` in place, descending into dicts."""
    for key, value in overrides.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merge_settings(current, value)
        else:
            target[key] = value


class Settings:
    """JSON-backed application settings."""

    DEFAULT_SETTINGS = {
        "api": {
            "url": "https://api.openai.com/v1/chat/completions",
            "model": "gpt-4o-mini",
            "temperature": 0.2,
            "max_tokens": 300,
            "timeout": 30,
        },
        "generation": {
            "fallback_on_api_error": True,
        },
        "advanced": {
            "debug_mode": False,
            "log_level": "WARNING",
            "log_file": "",
        },
    }

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the settings manager.

        Nothing is written to disk here; the directory is created by save().

        Args:
            config_dir (Optional[Path]): Directory holding settings.json.
                Defaults to the platform configuration directory.
        """
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        self.config_dir = Path(config_dir) if config_dir else default_config_dir()
        self.config_file = self.config_dir / SETTINGS_FILE_NAME

        if self.config_file.exists():
            self.load()

    def load(self) -> bool:
        """
        Merge the settings file over the current values.

        Returns:
            bool: True if the file was read and merged.
        """
        try:
            loaded = json.loads(self.config_file.read_text(encoding="utf-8"))
        except (ValueError, OSError) as e:
            logger.error(f"Error loading settings from {self.config_file}: {e}")
            return False

        if not isinstance(loaded, dict):
            logger.error(f"Ignoring settings file {self.config_file}: not an object")
            return False

        merge_settings(self.settings, loaded)
        return True

    def save(self) -> bool:
        """
        Write the current values to the settings file.

        Returns:
            bool: True if the file was written.
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(
                json.dumps(self.settings, indent=2), encoding="utf-8"
            )
        except OSError as e:
            logger.error(f"Error saving settings to {self.config_file}: {e}")
            return False
        return True

    def get(self, section: str, key: str, default: Any = None) -> Any:
        return self.settings.get(section, {}).get(key, default)

    def set(self, section: str, key: str, value: Any) -> None:
        self.settings.setdefault(section, {})[key] = value

    def get_all(self) -> Dict[str, Dict[str, Any]]:
        """Return a deep copy of every section."""
        return copy.deepcopy(self.settings)

    def reset_to_defaults(self) -> None:
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)

    def reset_section(self, section: str) -> bool:
        """
        Restore one section to its defaults.

        Returns:
            bool: False if the section has no defaults.
        """
        if section not in self.DEFAULT_SETTINGS:
            return False
        self.settings[section] = copy.deepcopy(self.DEFAULT_SETTINGS[section])
        return True

    def get_log_file_path(self) -> Optional[Path]:
        """
        Resolve the log file.

        An explicit ``advanced.log_file`` wins; otherwise debug mode logs to
        shellsage.log in the configuration directory.
        """
        log_file = self.get("advanced", "log_file", "")
        if log_file:
            return Path(log_file)
        if self.get("advanced", "debug_mode", False):
            return self.config_dir / DEBUG_LOG_FILE_NAME
        return None


# Global settings instance
settings = Settings()
