"""Collection of numbered fragment files (sections and findings).

A category directory holds files named ``<ordinal>.<name>.typ``.  The number
of entries in the directory is the number of fragments expected, so the
ordinals must be exactly ``1..count``: a duplicate or an ordinal outside that
range is reported as a ``FragmentOrderError`` instead of being dropped or
overwritten.  Each fragment body is prefixed with a Typst page break and the
bodies are joined in ordinal order.
"""

from __future__ import annotations

import re
from pathlib import Path

from pentreport.errors import FragmentNameError, FragmentOrderError, MissingPathError
from pentreport.utils import read_text_verbatim

from .models import Fragment, FragmentCategory

PAGE_BREAK = "#pagebreak()"
FRAGMENT_SEPARATOR = "\n"

_ORDINAL_RE = re.compile(r"[0-9]+")


# ---------------------------------------------------------------------------
# Filename parsing
# ---------------------------------------------------------------------------


def parse_ordinal(filename: str) -> int:
    """Return the ordinal encoded before the first ``.`` of *filename*.

    Examples::

        parse_ordinal("3.methodology.typ") -> 3
        parse_ordinal("12.typ")            -> 12

    Raises:
        FragmentNameError: If the prefix is not a decimal number.
    """
    prefix = filename.split(".", 1)[0]
    if not _ORDINAL_RE.fullmatch(prefix):
        raise FragmentNameError(
            filename, f"expected a numeric prefix before the first '.', got {prefix!r}"
        )
    return int(prefix)


def wrap_fragment(body: str) -> str:
    """Prefix a fragment body with a blank line and a page break."""
    return f"\n{PAGE_BREAK}\n{body}"


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------


def load_fragments(directory: str | Path, category: FragmentCategory) -> list[Fragment]:
    """Read every entry of *directory* as a fragment of *category*.

    Entries are visited in filename order and read byte for byte, so CRLF
    line endings survive.  Subdirectories are not descended into; they are
    rejected like any other entry without a valid name.

    Raises:
        MissingPathError: If *directory* does not exist.
        FragmentNameError: If an entry is not a file or has no numeric prefix.
        FileAccessError: If a file cannot be read or is not valid UTF-8.
    """
    dir_path = Path(directory)
    if not dir_path.is_dir():
        raise MissingPathError(dir_path, f"{category.value.capitalize()} directory")

    fragments: list[Fragment] = []
    for entry in sorted(dir_path.iterdir(), key=lambda p: p.name):
        ordinal = parse_ordinal(entry.name)
        if not entry.is_file():
            raise FragmentNameError(entry, "not a regular file")
        fragments.append(
            Fragment(
                category=category,
                ordinal=ordinal,
                body=read_text_verbatim(entry),
                path=entry,
            )
        )
    return fragments


def order_fragments(
    fragments: list[Fragment], directory: str | Path = "."
) -> dict[int, Fragment]:
    """Validate ordinals and return the fragments keyed by ordinal, ascending.

    The expected ordinals are ``1..len(fragments)``.

    Raises:
        FragmentOrderError: If an ordinal is used twice or lies outside the
            expected range.
    """
    count = len(fragments)
    by_ordinal: dict[int, list[Fragment]] = {}
    out_of_range: dict[str, int] = {}

    for fragment in fragments:
        if not 1 <= fragment.ordinal <= count:
            out_of_range[fragment.path.name] = fragment.ordinal
            continue
        by_ordinal.setdefault(fragment.ordinal, []).append(fragment)

    duplicates = {
        ordinal: sorted(f.path.name for f in group)
        for ordinal, group in by_ordinal.items()
        if len(group) > 1
    }
    if duplicates or out_of_range:
        raise FragmentOrderError(directory, count, duplicates, out_of_range)

    return {ordinal: by_ordinal[ordinal][0] for ordinal in sorted(by_ordinal)}


def join_fragments(ordered: dict[int, Fragment]) -> str:
    """Wrap each fragment body and join them in ordinal order."""
    return FRAGMENT_SEPARATOR.join(
        wrap_fragment(ordered[ordinal].body) for ordinal in sorted(ordered)
    )


def collect_fragments(directory: str | Path, category: FragmentCategory) -> tuple[str, int]:
    """Load, validate and join the fragments of one category directory.

    Returns:
        A ``(joined_text, fragment_count)`` tuple.  An empty directory yields
        ``("", 0)``.
    """
    fragments = load_fragments(directory, category)
    ordered = order_fragments(fragments, directory)
    return join_fragments(ordered), len(ordered)
