"""
reposync logging: a daily rotated log file, a stderr console handler and
provider API call records, with tokens and credentialed URLs masked.
"""

from .config import LogConfig, LogLevel, get_log_directory, get_log_file_path
from .logger import get_logger, log_api_call, setup_logging
from .utils import sanitize_data

__all__ = [
    "get_logger",
    "setup_logging",
    "log_api_call",
    "LogLevel",
    "LogConfig",
    "sanitize_data",
    "get_log_directory",
    "get_log_file_path",
]
