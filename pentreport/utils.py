"""Shared utility functions for pentreport.

Provides Rich-based console output, name sanitising for fragment filenames,
duration formatting and verbatim text file I/O.  Progress output goes to
stdout; diagnostics go to the stderr console so they stay visible when the
assembled source is piped.
"""

from __future__ import annotations

import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pentreport.errors import FileAccessError

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def sanitize_name(name: str, separator: str = "-") -> str:
    """Convert an arbitrary fragment title to a safe filename component.

    * Lowercases the input.
    * Replaces runs of characters other than letters, digits, ``-`` and ``_``
      with *separator*.
    * Collapses repeated separators and strips them from both ends.

    Dots are always replaced, because the first ``.`` of a fragment filename
    ends its ordinal prefix.

    Examples::

        sanitize_name("SQL Injection") -> "sql-injection"
        sanitize_name("  XSS (stored)  ", "_") -> "xss_stored"
    """
    result = re.sub(r"[^a-zA-Z0-9_-]+", separator, name.strip().lower())
    result = re.sub(re.escape(separator) + "+", separator, result)
    return result.strip(separator)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Text file I/O
# ---------------------------------------------------------------------------


def read_text_verbatim(path: str | Path) -> str:
    """Read a UTF-8 file exactly as stored, without newline translation.

    Raises:
        FileAccessError: If the file cannot be read or is not valid UTF-8.
    """
    file_path = Path(path)
    try:
        raw = file_path.read_bytes()
    except OSError as exc:
        raise FileAccessError(file_path, "read", exc.strerror or str(exc)) from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FileAccessError(
            file_path, "read", f"invalid UTF-8 at byte {exc.start}"
        ) from exc


def write_text_verbatim(path: str | Path, content: str) -> None:
    """Write *content* to *path* as UTF-8, without newline translation.

    Raises:
        FileAccessError: If the file cannot be written.
    """
    file_path = Path(path)
    try:
        with file_path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise FileAccessError(file_path, "write", exc.strerror or str(exc)) from exc


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]", soft_wrap=True)


def print_error(message: str) -> None:
    """Print a red error message on stderr."""
    err_console.print(
        f"[bold red]Error:[/bold red] {escape(message)}", highlight=False, soft_wrap=True
    )


def print_warning(message: str) -> None:
    """Print a yellow warning message on stderr."""
    err_console.print(f"[bold yellow]{escape(message)}[/bold yellow]", soft_wrap=True)
