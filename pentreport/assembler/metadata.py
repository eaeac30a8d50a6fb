"""Parser for the ``key:value`` metadata file of a report project."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pentreport.errors import MissingPathError
from pentreport.utils import read_text_verbatim

from .models import MetadataDefaults, ReportMetadata

METADATA_KEYS: tuple[str, ...] = ("title", "prepared_for", "prepared_by")


def parse_metadata(text: str, defaults: Optional[MetadataDefaults] = None) -> ReportMetadata:
    """Parse metadata text into a ``ReportMetadata``.

    Lines end at a line feed only; one trailing carriage return is dropped so
    CRLF files parse the same.  Each line is split on every ``:``; the first
    part is the key and the second the value, anything after a second ``:`` is
    dropped.  Values are kept verbatim (no trimming).  Lines without ``:`` and unknown keys are ignored,
    and keys that never appear keep their value from *defaults*.  Parsing
    never fails.
    """
    values = (defaults or MetadataDefaults()).model_dump()

    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        parts = line.split(":")
        if len(parts) < 2:
            continue
        key, value = parts[0], parts[1]
        if key in METADATA_KEYS:
            values[key] = value

    return ReportMetadata(**values)


def load_metadata(path: str | Path, defaults: Optional[MetadataDefaults] = None) -> ReportMetadata:
    """Read and parse the metadata file at *path*.

    Raises:
        MissingPathError: If the file does not exist.
        FileAccessError: If the file cannot be read or is not valid UTF-8.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise MissingPathError(file_path, "Metadata file")
    return parse_metadata(read_text_verbatim(file_path), defaults)
