"""pentreport configuration.

Typed configuration for the whole tool.  All settings use Pydantic v2 models so
they can be validated at construction time and serialised to/from JSON or
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from pentreport.assembler.models import FragmentCategory, MetadataDefaults

__all__ = ["CompilerConfig", "Config", "MetadataDefaults"]


class CompilerConfig(BaseModel):
    """How the external Typst compiler is invoked."""

    binary: str = Field(default="typst", min_length=1)
    tmp_filename: str = Field(
        default="tmp.typ",
        min_length=1,
        description="Transient source file written to the working directory",
    )
    timeout: Optional[int] = Field(
        default=None, ge=1, description="Seconds before the compiler is killed; None waits forever"
    )


class Config(BaseModel):
    """Global pentreport configuration.

    Instances are created once by the CLI entry point (or by tests) and passed
    to ``ReportPipeline``, which hands the relevant parts to each component.
    """

    defaults: MetadataDefaults = Field(default_factory=MetadataDefaults)
    compiler: CompilerConfig = Field(default_factory=CompilerConfig)
    template_path: Optional[Path] = Field(
        default=None, description="Report template; the packaged template when unset"
    )
    default_output: Path = Field(default=Path("report.pdf"))

    # Project layout
    metadata_file: str = Field(default="metadata.typ")
    sections_dir: str = Field(default="sections")
    findings_dir: str = Field(default="findings")

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def metadata_path(self, project_dir: Path) -> Path:
        """Path to the metadata file of *project_dir*."""
        return Path(project_dir) / self.metadata_file

    def category_path(self, project_dir: Path, category: FragmentCategory) -> Path:
        """Directory holding the fragments of *category* in *project_dir*."""
        name = self.sections_dir if category is FragmentCategory.SECTION else self.findings_dir
        return Path(project_dir) / name

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            PENTREPORT_TEMPLATE, PENTREPORT_OUTPUT, PENTREPORT_COMPILER,
            PENTREPORT_TMP_FILE, PENTREPORT_COMPILE_TIMEOUT.
        """
        compiler_kwargs: dict[str, Any] = {}
        if os.environ.get("PENTREPORT_COMPILER"):
            compiler_kwargs["binary"] = os.environ["PENTREPORT_COMPILER"]
        if os.environ.get("PENTREPORT_TMP_FILE"):
            compiler_kwargs["tmp_filename"] = os.environ["PENTREPORT_TMP_FILE"]
        if os.environ.get("PENTREPORT_COMPILE_TIMEOUT"):
            compiler_kwargs["timeout"] = int(os.environ["PENTREPORT_COMPILE_TIMEOUT"])

        kwargs: dict[str, Any] = {"compiler": CompilerConfig(**compiler_kwargs)}
        if os.environ.get("PENTREPORT_TEMPLATE"):
            kwargs["template_path"] = Path(os.environ["PENTREPORT_TEMPLATE"])
        if os.environ.get("PENTREPORT_OUTPUT"):
            kwargs["default_output"] = Path(os.environ["PENTREPORT_OUTPUT"])

        return cls(**kwargs)
