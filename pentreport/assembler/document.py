"""Report template loading and document assembly.

The report template is a Typst file containing six literal placeholders of the
form ``{{ name }}``.  Templates are checked when loaded: each placeholder must
appear exactly once.  Rendering replaces all six in a single pass, so text
inserted for one placeholder is never scanned for another.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from pentreport.errors import MissingPathError, TemplateError
from pentreport.utils import read_text_verbatim

from .fragments import collect_fragments
from .metadata import load_metadata
from .models import AssembledDocument, FragmentCategory

if TYPE_CHECKING:
    from pentreport.config import Config


# ---------------------------------------------------------------------------
# Template discovery
# ---------------------------------------------------------------------------

DEFAULT_TEMPLATE_PATH = Path(__file__).parent / "templates" / "report.typ"

# Logical substitution order.
PLACEHOLDERS: tuple[str, ...] = (
    "report_title",
    "date",
    "prepared_for",
    "prepared_by",
    "sections",
    "findings",
)

DATE_FORMAT = "%B %d, %Y"


def placeholder_token(name: str) -> str:
    """Return the literal template token for *name*, e.g. ``{{ date }}``."""
    return "{{ " + name + " }}"


_TOKEN_RE = re.compile("|".join(re.escape(placeholder_token(n)) for n in PLACEHOLDERS))
_NAME_BY_TOKEN = {placeholder_token(n): n for n in PLACEHOLDERS}


def format_report_date(moment: Optional[datetime] = None) -> str:
    """Format *moment* (default: now, local time) as ``March 05, 2024``."""
    return (moment or datetime.now()).strftime(DATE_FORMAT)


# ---------------------------------------------------------------------------
# ReportTemplate
# ---------------------------------------------------------------------------


class ReportTemplate:
    """A validated report template.

    Raises ``TemplateError`` on construction if any placeholder is missing or
    repeated.
    """

    def __init__(self, text: str, source: str = "<string>") -> None:
        self.text = text
        self.source = source
        self._validate()

    @classmethod
    def load(cls, path: str | Path | None = None) -> "ReportTemplate":
        """Load a template file; the packaged template when *path* is ``None``."""
        template_path = Path(path) if path is not None else DEFAULT_TEMPLATE_PATH
        if not template_path.is_file():
            raise MissingPathError(template_path, "Report template")
        return cls(read_text_verbatim(template_path), source=str(template_path))

    def _validate(self) -> None:
        problems: list[str] = []
        for name in PLACEHOLDERS:
            count = self.text.count(placeholder_token(name))
            if count != 1:
                problems.append(f"{placeholder_token(name)} appears {count} times")
        if problems:
            raise TemplateError(
                f"Template {self.source} must contain each placeholder exactly once: "
                + "; ".join(problems)
            )

    def render(self, values: Mapping[str, str]) -> str:
        """Substitute every placeholder with its value, verbatim.

        Raises:
            TemplateError: If *values* lacks one of the placeholder names.
        """
        missing = [name for name in PLACEHOLDERS if name not in values]
        if missing:
            raise TemplateError(f"No value supplied for: {', '.join(missing)}")
        return _TOKEN_RE.sub(lambda m: values[_NAME_BY_TOKEN[m.group(0)]], self.text)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def assemble_report(
    project_dir: str | Path,
    config: Config,
    template: Optional[ReportTemplate] = None,
    now: Optional[datetime] = None,
) -> AssembledDocument:
    """Build the Typst source for the report project at *project_dir*.

    Reads ``metadata.typ``, collects the sections and findings, computes the
    date once and fills the template.

    Args:
        project_dir: Root of a scaffolded report project.
        config: Layout names and metadata defaults.
        template: Pre-loaded template; loaded from ``config.template_path``
            (or the packaged default) when omitted.
        now: Moment used for the report date; the current local time if omitted.

    Raises:
        MissingPathError: If the project, its metadata file or a category
            directory does not exist.
        FragmentNameError: If a fragment filename has no numeric prefix.
        FragmentOrderError: If fragment ordinals are duplicated or out of range.
    """
    root = Path(project_dir)
    if not root.is_dir():
        raise MissingPathError(root, "Report directory")

    if template is None:
        template = ReportTemplate.load(config.template_path)

    metadata = load_metadata(config.metadata_path(root), config.defaults)
    sections, section_count = collect_fragments(
        config.category_path(root, FragmentCategory.SECTION), FragmentCategory.SECTION
    )
    findings, finding_count = collect_fragments(
        config.category_path(root, FragmentCategory.FINDING), FragmentCategory.FINDING
    )
    date = format_report_date(now)

    source = template.render({
        "report_title": metadata.title,
        "date": date,
        "prepared_for": metadata.prepared_for,
        "prepared_by": metadata.prepared_by,
        "sections": sections,
        "findings": findings,
    })

    return AssembledDocument(
        source=source,
        metadata=metadata,
        date=date,
        section_count=section_count,
        finding_count=finding_count,
    )
