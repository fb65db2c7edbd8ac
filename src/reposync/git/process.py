"""
Long-running git network commands (clone, push) driven as processes.

GitPython hands git's stderr to the progress handler, so the text used to
classify a failure is rebuilt from the lines the progress instance kept.
A process is killed as soon as the cancel event is set.
"""

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from git import GitCommandError
from git.cmd import Git, handle_process_output
from git.util import RemoteProgress

from reposync.git.errors import raise_classified
from reposync.git.retry import check_cancelled
from reposync.logging import get_logger

logger = get_logger("reposync.git.process")

CANCEL_POLL_INTERVAL = 0.1


def _output_since(progress: RemoteProgress, errors_from: int, others_from: int) -> str:
    lines = progress.error_lines[errors_from:] + progress.other_lines[others_from:]
    return "\n".join(line.strip() for line in lines)


@contextmanager
def _kill_on_cancel(
    proc: Git.AutoInterrupt, cancel: Optional[threading.Event]
) -> Iterator[None]:
    if cancel is None:
        yield
        return

    finished = threading.Event()

    def watch() -> None:
        while not finished.wait(CANCEL_POLL_INTERVAL):
            if cancel.is_set():
                popen = proc.proc
                if popen is not None and popen.poll() is None:
                    logger.debug(f"Cancelled, killing git process {popen.pid}")
                    popen.kill()
                return

    watcher = threading.Thread(target=watch, name="reposync-git-cancel", daemon=True)
    watcher.start()
    try:
        yield
    finally:
        finished.set()
        watcher.join()


def run_git_process(
    proc: Git.AutoInterrupt,
    progress: RemoteProgress,
    cancel: Optional[threading.Event] = None,
    stdout_handler: Optional[Callable[[str], None]] = None,
) -> None:
    """
    Wait for a git process started with ``as_process=True``.

    stderr is parsed by ``progress``; stdout lines go to ``stdout_handler``.

    Raises:
        OperationCancelledError: If ``cancel`` was set while the process ran
        RemoteNotFoundError, RemoteEmptyError: Classified git failures
        GitCommandError: Any other failure
    """
    errors_from = len(progress.error_lines)
    others_from = len(progress.other_lines)

    with _kill_on_cancel(proc, cancel):
        handle_process_output(
            proc,
            stdout_handler,
            progress.new_message_handler(),
            finalizer=None,
            decode_streams=False,
        )
        try:
            proc.wait(stderr=_output_since(progress, errors_from, others_from))
        except GitCommandError as e:
            check_cancelled(cancel)
            raise_classified(e)


def output_lines(sink: List[str]) -> Callable[[str], None]:
    """stdout handler collecting stripped, non-empty lines into ``sink``"""

    def handle(line: str) -> None:
        line = line.rstrip("\r\n")
        if line:
            sink.append(line)

    return handle
