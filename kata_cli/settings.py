"""Persisted user settings for the download modal.

A small JSON record under the user's home directory:

    {"editor_command": "code", "download_path": "/home/me/katas"}

It is read the first time the download modal opens in a session and
written after each successful download.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from kata_api.core.config import APP_DIR
from kata_api.model import FilesystemError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = os.path.join(APP_DIR, "settings.json")


@dataclass
class Settings:
    """Editor command and default download path (empty when never saved)."""

    editor_command: str = ""
    download_path: str = ""


class SettingsStore:
    """Load and save Settings as JSON."""

    def __init__(self, path: Optional[str] = None):
        self._path = Path(path or DEFAULT_SETTINGS_FILE)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Settings:
        """Read settings; a missing or corrupt file yields empty settings."""
        if not self._path.exists():
            return Settings()
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load settings from %s: %s", self._path, e)
            return Settings()

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed settings file %s", self._path)
            return Settings()

        return Settings(
            editor_command=str(data.get("editor_command") or ""),
            download_path=str(data.get("download_path") or ""),
        )

    def save(self, settings: Settings) -> None:
        """Write settings to disk.

        Raises:
            FilesystemError: If the file cannot be written
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(asdict(settings), f, indent=2)
        except OSError as e:
            logger.warning("Failed to save settings to %s: %s", self._path, e)
            raise FilesystemError(str(self._path), f"Could not save settings: {e}") from e
        logger.debug("Saved settings to %s", self._path)


__all__ = ["DEFAULT_SETTINGS_FILE", "Settings", "SettingsStore"]
