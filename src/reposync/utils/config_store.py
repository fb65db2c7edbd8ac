import json
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional

import keyring
from keyring.errors import KeyringError

from reposync.constants import KEYRING_SERVICE_NAME

APP_DIR_NAME = "reposync"


class ConfigStore:
    """User settings in ``settings.json`` and git tokens in the OS keyring."""

    def __init__(self):
        self.base_dir = self._get_config_dir()
        self.settings_file = self.base_dir / "settings.json"
        self.base_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _get_config_dir() -> Path:
        system = platform.system()
        if system == "Windows":
            return Path(os.environ.get("APPDATA", "")) / APP_DIR_NAME
        if system == "Darwin":
            return Path.home() / "Library" / "Application Support" / APP_DIR_NAME
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / APP_DIR_NAME
        return Path.home() / f".{APP_DIR_NAME}"

    def get_settings(self) -> Dict[str, Any]:
        """All stored settings; an unreadable file counts as empty"""
        try:
            settings = json.loads(self.settings_file.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return settings if isinstance(settings, dict) else {}

    def get_setting(self, key: str, default: Any = None) -> Any:
        return self.get_settings().get(key, default)

    def set_setting(self, key: str, value: Any) -> None:
        settings = {**self.get_settings(), key: value}
        self.settings_file.write_text(json.dumps(settings, indent=2), encoding="utf-8")

    def save_git_token(self, username: str, token: str) -> None:
        keyring.set_password(KEYRING_SERVICE_NAME, username, token)

    def get_git_token(self, username: str) -> Optional[str]:
        """Token stored for ``username``, or None when there is none or no keyring backend"""
        try:
            return keyring.get_password(KEYRING_SERVICE_NAME, username)
        except KeyringError:
            return None
