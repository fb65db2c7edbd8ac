"""
Bounded retry for operations that may hit a not-yet-reachable remote.
"""

import logging
import threading
import time
from typing import Callable, Optional, TypeVar

from reposync.constants import FAILURE_BACKOFF_TIME, PUSH_RETRIES
from reposync.git.errors import OperationCancelledError, RemoteNotFoundError
from reposync.logging import get_logger

logger = get_logger("reposync.git.retry")

T = TypeVar("T")


def check_cancelled(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelledError()


def wait(delay: float, cancel: Optional[threading.Event] = None) -> None:
    """Sleep for ``delay`` seconds, returning early with an error if cancelled."""
    if cancel is None:
        time.sleep(delay)
        return
    if cancel.wait(delay):
        raise OperationCancelledError()


def retry_on_not_found(
    operation: Callable[[], T],
    description: str,
    attempts: int = PUSH_RETRIES,
    backoff: float = FAILURE_BACKOFF_TIME,
    cancel: Optional[threading.Event] = None,
    log_level: int = logging.WARNING,
) -> T:
    """
    Run ``operation``, retrying only while it raises RemoteNotFoundError.

    Args:
        operation: Callable performing one attempt
        description: What is being attempted, for log messages
        attempts: Maximum number of attempts
        backoff: Seconds to wait between attempts
        cancel: Event that aborts the retry loop when set
        log_level: Level used to log failed attempts

    Returns:
        The operation's result

    Raises:
        RemoteNotFoundError: The last error once attempts are exhausted
        OperationCancelledError: If ``cancel`` is set before or between attempts
    """
    for attempt in range(attempts):
        check_cancelled(cancel)
        try:
            return operation()
        except RemoteNotFoundError as e:
            if attempt == attempts - 1:
                raise
            logger.log(
                log_level,
                f"Failed to {description}, trying again in {backoff} seconds... "
                f"(retry: {attempt}, err: {e})",
            )
            wait(backoff, cancel)

    raise ValueError("attempts must be at least 1")
