"""Working-directory lock for report compiles.

Only one compile may run per working directory because every compile writes
the same transient source file.  ``CompileLock`` makes that explicit with a
lock file created with ``O_CREAT | O_EXCL``; the file holds the owning PID
and is removed when the lock is released.
"""

from __future__ import annotations

import os
from pathlib import Path
from types import TracebackType
from typing import Optional

from pentreport.errors import CompileLockError, FileAccessError


class CompileLock:
    """Exclusive lock file, usable as a context manager.

    Example::

        with CompileLock(Path("tmp.typ.lock")):
            ...  # write tmp.typ, run the compiler, remove tmp.typ
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._held = False

    @property
    def held(self) -> bool:
        """``True`` while this instance owns the lock file."""
        return self._held

    def acquire(self) -> None:
        """Create the lock file.

        Raises:
            CompileLockError: If the lock file already exists.
            FileAccessError: If the lock file cannot be created.
        """
        if self._held:
            return
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            raise CompileLockError(
                self.path,
                f"Another compile holds the lock {self.path}. "
                "Remove the file if no compile is running.",
            ) from None
        except OSError as exc:
            raise FileAccessError(self.path, "create", exc.strerror or str(exc)) from exc
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(f"{os.getpid()}\n")
        self._held = True

    def release(self) -> None:
        """Remove the lock file if this instance holds it."""
        if not self._held:
            return
        self._held = False
        self.path.unlink(missing_ok=True)

    def __enter__(self) -> "CompileLock":
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.release()
