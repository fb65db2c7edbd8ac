"""
Logging configuration: levels, handler parameters and where log files live.
"""

import logging
import os
import platform
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from reposync.constants import LOG_FILE_NAME, LOG_RETENTION_DAYS, SENSITIVE_KEYS


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @property
    def level(self) -> int:
        return logging.getLevelName(self.value)

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional["LogLevel"]:
        """Return the level called ``name`` (any case), or None"""
        if not name:
            return None
        try:
            return cls(str(name).upper())
        except ValueError:
            return None


@dataclass
class LogConfig:
    """Parameters used by setup_logging"""

    log_filename: str = f"{LOG_FILE_NAME}.log"
    retention_days: int = LOG_RETENTION_DAYS
    file_level: LogLevel = LogLevel.INFO
    console_level: LogLevel = LogLevel.WARNING
    include_thread_info: bool = False
    log_api_requests: bool = True
    sanitize: bool = True
    sensitive_keys: tuple = SENSITIVE_KEYS

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "LogConfig":
        """Build a config honouring the ``log_level`` user setting"""
        config = cls()
        level = LogLevel.parse(settings.get("log_level"))
        if level is not None:
            config.file_level = level
        return config


def _data_home() -> Path:
    system = platform.system()
    if system == "Windows":
        appdata = Path(os.environ.get("APPDATA", ""))
        return appdata if appdata.exists() else Path.home()
    return Path(os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def get_log_directory() -> Path:
    """
    Directory holding the log files, created if needed.

    macOS uses ``~/Library/Logs/reposync``, other systems
    ``<data home>/reposync/logs``. When that cannot be created the logs go
    to the system temp directory.
    """
    if platform.system() == "Darwin":
        log_dir = Path.home() / "Library" / "Logs" / LOG_FILE_NAME
    else:
        log_dir = _data_home() / LOG_FILE_NAME / "logs"

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        log_dir = Path(tempfile.gettempdir()) / f"{LOG_FILE_NAME}-logs"
        log_dir.mkdir(exist_ok=True)
    return log_dir


def get_log_file_path(config: Optional[LogConfig] = None) -> Path:
    return get_log_directory() / (config or LogConfig()).log_filename
