"""
Logger setup for reposync.

``setup_logging`` is called once by the CLI entry point. Library code only
calls ``get_logger`` and leaves handler configuration to the application.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

from .config import LogConfig, get_log_file_path
from .formatters import APICallFormatter, ReposyncFormatter
from .utils import cleanup_old_logs

API_LOGGER_NAME = "reposync.api"

_loggers: Dict[str, logging.Logger] = {}
_configured = False


def _load_config() -> LogConfig:
    from reposync.utils.config_store import ConfigStore

    return LogConfig.from_settings(ConfigStore().get_settings())


def _daily_file_handler(
    path: Path, config: LogConfig, level: int, formatter: logging.Formatter
) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=path,
        when="midnight",
        backupCount=config.retention_days,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(config: Optional[LogConfig] = None, force_reconfigure: bool = False) -> None:
    """
    Attach the file and console handlers to the ``reposync`` logger.

    Args:
        config: Logging parameters, read from the user settings if None
        force_reconfigure: Replace handlers even if logging is already set up
    """
    global _configured
    if _configured and not force_reconfigure:
        return

    config = config or _load_config()
    log_file = get_log_file_path(config)

    root = logging.getLogger("reposync")
    root.setLevel(config.file_level.level)
    root.handlers.clear()
    root.addHandler(
        _daily_file_handler(
            log_file,
            config,
            config.file_level.level,
            ReposyncFormatter(
                include_thread_info=config.include_thread_info,
                sanitize_sensitive=config.sanitize,
                sensitive_keys=config.sensitive_keys,
            ),
        )
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(config.console_level.level)
    console.setFormatter(
        ReposyncFormatter(
            include_timestamps=False,
            sanitize_sensitive=config.sanitize,
            sensitive_keys=config.sensitive_keys,
        )
    )
    root.addHandler(console)

    # provider HTTP calls share the log file but not the line format
    api_logger = logging.getLogger(API_LOGGER_NAME)
    api_logger.setLevel(logging.DEBUG)
    api_logger.propagate = False
    api_logger.handlers.clear()
    if config.log_api_requests:
        api_logger.addHandler(
            _daily_file_handler(
                log_file, config, logging.DEBUG, APICallFormatter(config.sanitize)
            )
        )

    try:
        cleanup_old_logs(log_file.parent, config.retention_days)
    except OSError as e:
        root.debug(f"Could not clean up old logs: {e}")

    _configured = True
    root.info(f"Logging to {log_file} at level {config.file_level.value}")


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, e.g. ``reposync.git.provisioner``"""
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]


def _api_call_level(status_code: Optional[int], error: Optional[str]) -> int:
    if error or (status_code and status_code >= 500):
        return logging.ERROR
    if status_code and status_code >= 400:
        return logging.WARNING
    return logging.DEBUG


def log_api_call(
    method: str,
    url: str,
    status_code: Optional[int] = None,
    duration: Optional[float] = None,
    error: Optional[str] = None,
    logger_name: str = API_LOGGER_NAME,
) -> None:
    """
    Record one provider HTTP call.

    Server errors and transport failures are logged at ERROR, client
    errors at WARNING and everything else at DEBUG.
    """
    extra = {
        "api_method": method,
        "api_url": url,
        "api_status": status_code,
        "api_duration": duration or 0,
    }
    if error:
        extra["api_error"] = error

    get_logger(logger_name).log(
        _api_call_level(status_code, error), f"{method} {url}", extra=extra
    )
