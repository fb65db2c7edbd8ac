import sys
from typing import Any, Optional, TextIO

from git import RemoteProgress
from git.util import CallableRemoteProgress


class StreamProgress(RemoteProgress):
    """Writes git transfer progress lines to a text stream"""

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self.stream = stream if stream is not None else sys.stderr

    def update(self, op_code, cur_count, max_count=None, message=""):
        self.stream.write(self._cur_line + "\n")
        self.stream.flush()


def as_progress(sink: Any) -> RemoteProgress:
    """Adapt a progress sink (RemoteProgress, callable or text stream) for GitPython"""
    if isinstance(sink, RemoteProgress):
        return sink
    if callable(sink):
        return CallableRemoteProgress(sink)
    return StreamProgress(sink)
