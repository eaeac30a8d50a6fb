"""Error taxonomy for pentreport.

Every failure the tool can report to the user derives from ``ReportError``.
The CLI catches that base class, prints a single diagnostic line on stderr and
exits with status 1.  Nothing is retried.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pentreport.compiler.runner import CompileResult


class ReportError(Exception):
    """Base class for all user-facing pentreport errors."""


class MissingPathError(ReportError):
    """Raised when a required file or directory does not exist."""

    def __init__(self, path: str | Path, what: str = "Path") -> None:
        self.path = Path(path)
        super().__init__(f"{what} not found: {self.path}")


class ProjectExistsError(ReportError):
    """Raised when ``new`` targets a path that already exists."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Directory already exists: {self.path}")


class FileAccessError(ReportError):
    """Raised when a project file cannot be read, decoded or written."""

    def __init__(self, path: str | Path, action: str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Cannot {action} {self.path}: {reason}")


class FragmentNameError(ReportError):
    """Raised when a fragment filename has no numeric ordinal prefix."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Invalid fragment file {self.path.name!r}: {reason}")


class FragmentOrderError(ReportError):
    """Raised when fragment ordinals collide or fall outside ``[1, count]``.

    Attributes:
        directory: The category directory that failed validation.
        duplicates: ``{ordinal: [filenames]}`` for ordinals used more than once.
        out_of_range: ``{filename: ordinal}`` for ordinals outside the range.
    """

    def __init__(
        self,
        directory: str | Path,
        count: int,
        duplicates: dict[int, list[str]] | None = None,
        out_of_range: dict[str, int] | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.count = count
        self.duplicates = duplicates or {}
        self.out_of_range = out_of_range or {}

        problems: list[str] = []
        for ordinal, names in sorted(self.duplicates.items()):
            problems.append(f"ordinal {ordinal} used by {', '.join(names)}")
        for name, ordinal in sorted(self.out_of_range.items()):
            problems.append(f"{name} has ordinal {ordinal}, expected 1-{count}")
        super().__init__(
            f"Fragment ordering in {self.directory} is invalid: " + "; ".join(problems)
        )


class TemplateError(ReportError):
    """Raised when a report template does not satisfy the placeholder contract."""


class CompileLockError(ReportError):
    """Raised when another compile holds the working directory."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(message)


class RenderError(ReportError):
    """Raised when the external compiler is missing, fails or times out."""

    def __init__(self, message: str, result: CompileResult | None = None) -> None:
        self.result = result
        super().__init__(message)
