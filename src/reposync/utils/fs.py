"""
Rooted filesystem view used as the git working tree.
"""

from pathlib import Path
from typing import Union


class FS:
    """
    A filesystem scoped to a root directory.

    All relative paths are resolved against ``root``; ``chroot`` returns
    a new view scoped to a sub-directory.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"FS({str(self.root)!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, FS) and self.root == other.root

    def join(self, *parts: str) -> Path:
        return self.root.joinpath(*(p.lstrip("/") for p in parts))

    def chroot(self, path: str) -> "FS":
        """Return a view rooted at ``path`` (relative to this root)."""
        if not path or path.strip("/") in ("", "."):
            return FS(self.root)
        return FS(self.join(path))

    def exists(self, path: str) -> bool:
        return self.join(path).exists()

    def read_file(self, path: str) -> str:
        return self.join(path).read_text(encoding="utf-8")

    def write_file(self, path: str, content: str) -> Path:
        target = self.join(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    def mkdir_all(self, path: str = "") -> Path:
        target = self.join(path) if path else self.root
        target.mkdir(parents=True, exist_ok=True)
        return target
