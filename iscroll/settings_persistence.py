"""Per-document viewer settings that survive restarts.

Stores whether smooth scrolling is on and where the viewport was left,
keyed by the absolute path of the document, in a JSON file in the
user's config directory.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import platformdirs

logger = logging.getLogger(__name__)

SettingsMap = Dict[str, Any]


class SettingsKeys:
    """Names of the settings stored per document."""

    SMOOTH_SCROLL = "smooth_scroll"
    WINDOW_START_LINE = "window_start_line"
    VSCROLL = "vscroll"


def _is_count(value: Any) -> bool:
    # bool is an int subclass; a stray true/false is not a line number
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


_VALIDATORS: Dict[str, Callable[[Any], bool]] = {
    SettingsKeys.SMOOTH_SCROLL: lambda value: isinstance(value, bool),
    SettingsKeys.WINDOW_START_LINE: _is_count,
    SettingsKeys.VSCROLL: _is_count,
}


def _document_key(document_path: str) -> str:
    return os.path.abspath(document_path)


class SettingsPersistence:
    """JSON store of settings for every document the viewer has opened."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir or platformdirs.user_config_dir("iscroll"))
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, SettingsMap]] = None

    def _read_store(self) -> Dict[str, SettingsMap]:
        """Settings for all documents; {} when the file is missing or unusable."""
        if self._settings_cache is None:
            self._settings_cache = self._read_file()
        return self._settings_cache

    def _read_file(self) -> Dict[str, SettingsMap]:
        if not self._settings_file.exists():
            return {}
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable settings file {self._settings_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {self._settings_file}: top level is not an object")
            return {}
        return data

    def _write_store(self, store: Dict[str, SettingsMap]) -> bool:
        """Replace the settings file atomically: write a sibling temp file, then rename."""
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(store, f, indent=2)
            os.replace(temp_file, self._settings_file)
        except OSError as e:
            logger.warning(f"Settings not saved to {self._settings_file}: {e}")
            try:
                temp_file.unlink(missing_ok=True)
            except OSError:
                pass
            return False
        self._settings_cache = store
        return True

    def load_settings(self, document_path: Optional[str]) -> SettingsMap:
        """Return the valid settings stored for a document ({} if none)."""
        if document_path is None:
            return {}
        key = _document_key(document_path)
        stored = self._read_store().get(key, {})
        if not isinstance(stored, dict):
            logger.warning(f"Ignoring settings for {key}: not an object")
            return {}

        settings = {}
        for name, value in stored.items():
            if self.validate_setting(name, value):
                settings[name] = value
            else:
                logger.warning(f"Ignoring invalid setting {name}={value!r} for {key}")
        return settings

    def save_settings(self, document_path: Optional[str], settings: SettingsMap) -> bool:
        """Store settings for a document. Returns False if nothing was written."""
        if document_path is None:
            return False
        store = dict(self._read_store())
        store[_document_key(document_path)] = settings
        return self._write_store(store)

    def validate_setting(self, key: str, value: Any) -> bool:
        """Check a single setting's type and range.

        Unknown keys are accepted so older versions can read newer files.
        """
        validator = _VALIDATORS.get(key)
        return validator is None or validator(value)

    def clear_cache(self) -> None:
        """Drop the in-memory copy so the next read goes to disk."""
        self._settings_cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the process-wide settings persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
