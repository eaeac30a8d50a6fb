"""Pydantic v2 models for report assembly.

Defines the metadata, fragment and assembled-document types shared by the
metadata parser, the fragment collector and the document assembler.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class FragmentCategory(str, Enum):
    """Kind of numbered fragment. Each category has its own ordinal space."""

    SECTION = "section"
    FINDING = "finding"


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

class MetadataDefaults(BaseModel):
    """Placeholder values used for metadata keys the project never sets."""

    title: str = Field(default="[REPORT TITLE - CHANGE ME]")
    prepared_for: str = Field(default="[PREPARED FOR - CHANGE ME]")
    prepared_by: str = Field(default="[PREPARED BY - CHANGE ME]")


class ReportMetadata(BaseModel):
    """Values read from a project's ``metadata.typ``."""

    title: str = Field(..., description="Report title")
    prepared_for: str = Field(..., description="Client the report is prepared for")
    prepared_by: str = Field(..., description="Author or company preparing the report")


# ---------------------------------------------------------------------------
# Fragments
# ---------------------------------------------------------------------------

class Fragment(BaseModel):
    """One numbered content file of a category directory."""

    category: FragmentCategory
    ordinal: int = Field(..., description="Position parsed from the filename prefix")
    body: str = Field(default="", description="Raw file contents")
    path: Path


# ---------------------------------------------------------------------------
# Assembled output
# ---------------------------------------------------------------------------

class AssembledDocument(BaseModel):
    """Typst source produced from a project, plus what went into it."""

    source: str
    metadata: ReportMetadata
    date: str
    section_count: int = Field(default=0, ge=0)
    finding_count: int = Field(default=0, ge=0)
