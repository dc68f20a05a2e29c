"""User settings for the editing core.

Settings are stored as JSON in an OS-appropriate config directory and
survive application restarts. Invalid values are logged and replaced by
their defaults; a broken settings file never stops an editing session.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)


@dataclass
class EditorSettings:
    history_limit: int = EditorConstants.DEFAULT_HISTORY_LIMIT
    id_strategy: str = "random"
    mirror_system_clipboard: bool = False
    seed_title: str = EditorConstants.SEED_TITLE
    seed_paragraph: str = EditorConstants.SEED_PARAGRAPH

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorSettings":
        """Build settings from a dict, dropping unknown or invalid keys."""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                # Forward compatibility: newer versions may add keys
                continue
            if not validate_setting(key, value):
                logger.warning(f"Ignoring invalid value for setting {key}: {value!r}")
                continue
            values[key] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def validate_setting(key: str, value: Any) -> bool:
    """Validate a setting value.

    Args:
        key: Setting key name.
        value: Setting value to validate.

    Returns:
        True if setting is valid, False otherwise.
    """
    if key == "history_limit":
        # bool is an int subclass
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        return EditorConstants.MIN_HISTORY_LIMIT <= value <= EditorConstants.MAX_HISTORY_LIMIT

    if key == "id_strategy":
        return value in EditorConstants.ID_STRATEGIES

    if key == "mirror_system_clipboard":
        return isinstance(value, bool)

    if key in ("seed_title", "seed_paragraph"):
        return isinstance(value, str)

    # Unknown settings are considered valid (forward compatibility)
    return True


class SettingsStore:
    """Loads and saves EditorSettings as JSON in the user config directory."""

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = Path(platformdirs.user_config_dir(EditorConstants.SETTINGS_APP_NAME))
        self._config_dir = Path(config_dir)
        self._settings_file = self._config_dir / EditorConstants.SETTINGS_FILENAME
        self._cache: Optional[EditorSettings] = None

    @property
    def path(self) -> Path:
        return self._settings_file

    def load(self) -> EditorSettings:
        """Load settings from disk.

        Returns defaults if the file doesn't exist or can't be read.
        """
        if self._cache is not None:
            return self._cache

        if not self._settings_file.exists():
            self._cache = EditorSettings()
            return self._cache

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            self._cache = EditorSettings()
            return self._cache

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            self._cache = EditorSettings()
            return self._cache

        self._cache = EditorSettings.from_dict(data)
        return self._cache

    def save(self, settings: EditorSettings) -> bool:
        """Save settings to disk atomically.

        Returns:
            True if save was successful, False otherwise.
        """
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")
            return False

        # Atomic write: temp file + rename
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings.to_dict(), f, indent=2)
            temp_file.replace(self._settings_file)
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

        self._cache = settings
        return True

    def clear_cache(self) -> None:
        """Clear the in-memory cache of settings."""
        self._cache = None


# Global instance
_store: Optional[SettingsStore] = None


def get_settings_store() -> SettingsStore:
    """Get the process-wide settings store.

    Returns:
        The singleton SettingsStore instance.
    """
    global _store
    if _store is None:
        _store = SettingsStore()
    return _store
