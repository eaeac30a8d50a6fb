"""Report project scaffolding.

Creates a new report project directory with example content::

    <project>/
        metadata.typ
        sections/
            1.summary.typ
            2.scope.typ
            3.methodology.typ
            4.example_section.typ
        findings/
            1.example_finding.typ

and adds further numbered section/finding files to an existing project.  The
layout is exactly what ``pentreport.assembler`` consumes.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from pentreport.assembler.fragments import load_fragments, order_fragments
from pentreport.assembler.models import FragmentCategory
from pentreport.config import Config
from pentreport.errors import MissingPathError, ProjectExistsError
from pentreport.utils import sanitize_name

from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Example content
# ---------------------------------------------------------------------------

EXAMPLE_METADATA: dict[str, str] = {
    "title": "Example Pentest Report",
    "prepared_for": "Example prepared for",
    "prepared_by": "Example prepared by",
}


class ExampleFragment(BaseModel):
    """An example fragment written by ``new``."""

    category: FragmentCategory
    filename: str = Field(..., description="File name including the ordinal prefix")
    heading: str
    lead: str = Field(default="", description="First line of body text under the heading")


EXAMPLE_FRAGMENTS: list[ExampleFragment] = [
    ExampleFragment(
        category=FragmentCategory.SECTION,
        filename="1.summary.typ",
        heading="Summary",
        lead="Example summary content",
    ),
    ExampleFragment(
        category=FragmentCategory.SECTION,
        filename="2.scope.typ",
        heading="Scope",
        lead="Example scope",
    ),
    ExampleFragment(
        category=FragmentCategory.SECTION,
        filename="3.methodology.typ",
        heading="Methodology",
        lead="Example methodology",
    ),
    ExampleFragment(
        category=FragmentCategory.SECTION,
        filename="4.example_section.typ",
        heading="Example section",
        lead="Look at this gorgeous section content",
    ),
    ExampleFragment(
        category=FragmentCategory.FINDING,
        filename="1.example_finding.typ",
        heading="Example finding",
        lead="Look at this amazing finding",
    ),
]

DEFAULT_LEADS: dict[FragmentCategory, str] = {
    FragmentCategory.SECTION: "Section content goes here.",
    FragmentCategory.FINDING: "Describe the finding, its impact and the remediation.",
}


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Creates report projects and adds fragments to them."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()
        self.renderer = TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def generate(self, project_dir: str | Path) -> Path:
        """Create a new report project at *project_dir*.

        Args:
            project_dir: Directory to create.  Its parent must exist; the
                directory itself must not.

        Returns:
            Path to the created project root.

        Raises:
            ProjectExistsError: If *project_dir* already exists.  Nothing is
                written in that case.
            MissingPathError: If the parent directory does not exist.
        """
        root = Path(project_dir)
        if root.exists():
            raise ProjectExistsError(root)
        if not root.parent.is_dir():
            raise MissingPathError(root.parent, "Parent directory")

        await asyncio.to_thread(root.mkdir)
        for category in FragmentCategory:
            await asyncio.to_thread(self.config.category_path(root, category).mkdir)

        await self.renderer.render_to_file(
            "metadata.typ.j2", self.config.metadata_path(root), EXAMPLE_METADATA
        )
        for example in EXAMPLE_FRAGMENTS:
            target = self.config.category_path(root, example.category) / example.filename
            await self.renderer.render_to_file(
                "fragment.typ.j2",
                target,
                {"heading": example.heading, "lead": example.lead},
            )

        return root

    async def add_fragment(
        self,
        project_dir: str | Path,
        category: FragmentCategory,
        name: str,
        lead: Optional[str] = None,
    ) -> Path:
        """Append a new fragment file to the *category* directory.

        The file gets the next ordinal (``count + 1``) and a filename slug
        derived from *name*; its body starts with *name* as a heading.  The
        existing fragments are validated first, so a directory with broken
        ordinals is reported rather than extended.

        Returns:
            Path to the created fragment file.

        Raises:
            MissingPathError: If the category directory does not exist.
            FragmentNameError / FragmentOrderError: If the existing files do
                not form a valid ``1..count`` sequence.
        """
        directory = self.config.category_path(Path(project_dir), category)
        existing = await asyncio.to_thread(load_fragments, directory, category)
        order_fragments(existing, directory)

        ordinal = len(existing) + 1
        slug = sanitize_name(name, "_") or category.value
        target = directory / f"{ordinal}.{slug}.typ"

        context = {
            "heading": name.strip(),
            "lead": lead if lead is not None else DEFAULT_LEADS[category],
        }
        return await self.renderer.render_to_file("fragment.typ.j2", target, context)
