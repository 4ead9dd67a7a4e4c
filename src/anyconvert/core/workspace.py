"""Scratch directories for path-based providers."""
from __future__ import annotations

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from anyconvert.utils.logging import get_logger

logger = get_logger("workspace")


class WorkspaceHandle:
    """A uniquely named directory owned by one conversion."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def file(self, name: str) -> Path:
        """Path of ``name`` inside the workspace (not created)."""
        return self.path / name

    def release(self) -> None:
        """Remove the directory and everything in it.

        Errors are logged and never raised, so cleanup can not replace
        the result of the conversion that used the workspace.
        """
        if self._released:
            return
        self._released = True
        try:
            shutil.rmtree(self.path)
            logger.debug("Removed workspace %s", self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Cleanup error for workspace %s: %s", self.path, e)

    def __enter__(self) -> "WorkspaceHandle":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"WorkspaceHandle(path={str(self.path)!r}, released={self._released})"


class TemporaryWorkspace:
    """Factory for per-conversion scratch directories.

    Every :meth:`acquire` call creates a fresh directory with a random
    suffix, so concurrent conversions never share a path.
    """

    def __init__(
        self,
        base_dir: str | Path | None = None,
        prefix: str = "convert-",
    ) -> None:
        self.base_dir = Path(base_dir) if base_dir else None
        self.prefix = prefix

    def acquire(self) -> WorkspaceHandle:
        if self.base_dir is not None:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        path = Path(tempfile.mkdtemp(prefix=self.prefix, dir=self.base_dir))
        logger.debug("Created workspace %s", path)
        return WorkspaceHandle(path)

    @contextmanager
    def scoped(self) -> Iterator[WorkspaceHandle]:
        """Acquire a workspace that is released however the block exits."""
        handle = self.acquire()
        try:
            yield handle
        finally:
            handle.release()
