"""pentreport scaffolder -- creates report projects and fragment files.

Quick usage::

    from pentreport.scaffolder import ProjectGenerator

    generator = ProjectGenerator()
    project_path = await generator.generate("./acme-report")
    await generator.add_fragment(project_path, FragmentCategory.FINDING, "SQL Injection")
"""

from pentreport.scaffolder.generator import (
    EXAMPLE_FRAGMENTS,
    EXAMPLE_METADATA,
    ExampleFragment,
    ProjectGenerator,
)
from pentreport.scaffolder.templates import TemplateRenderer

__all__ = [
    "EXAMPLE_FRAGMENTS",
    "EXAMPLE_METADATA",
    "ExampleFragment",
    "ProjectGenerator",
    "TemplateRenderer",
]
