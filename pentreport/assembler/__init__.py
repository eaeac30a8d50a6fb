"""pentreport assembler -- turns a report project directory into Typst source.

Key pieces:
    parse_metadata / load_metadata  - ``key:value`` metadata parsing
    collect_fragments               - ordered, validated section/finding bodies
    ReportTemplate                  - placeholder-checked report template
    assemble_report                 - full project -> ``AssembledDocument``
"""

from .document import (
    DEFAULT_TEMPLATE_PATH,
    PLACEHOLDERS,
    ReportTemplate,
    assemble_report,
    format_report_date,
)
from .fragments import (
    PAGE_BREAK,
    collect_fragments,
    load_fragments,
    order_fragments,
    parse_ordinal,
)
from .metadata import load_metadata, parse_metadata
from .models import (
    AssembledDocument,
    Fragment,
    FragmentCategory,
    MetadataDefaults,
    ReportMetadata,
)

__all__ = [
    # Models
    "AssembledDocument",
    "Fragment",
    "FragmentCategory",
    "MetadataDefaults",
    "ReportMetadata",
    # Metadata
    "load_metadata",
    "parse_metadata",
    # Fragments
    "PAGE_BREAK",
    "collect_fragments",
    "load_fragments",
    "order_fragments",
    "parse_ordinal",
    # Document
    "DEFAULT_TEMPLATE_PATH",
    "PLACEHOLDERS",
    "ReportTemplate",
    "assemble_report",
    "format_report_date",
]
