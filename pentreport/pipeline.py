"""pentreport pipeline orchestrator and CLI.

Ties the components together:

new      -- scaffold a report project with example content.
add      -- append a numbered section or finding to a project.
assemble -- build the Typst source of a project.
compile  -- assemble, then render the source with ``typst compile``.

Usage::

    pentreport new ./acme-report
    pentreport add finding ./acme-report "Stored XSS"
    pentreport compile ./acme-report -o acme.pdf
    python -m pentreport assemble ./acme-report > report.typ
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel

from pentreport.assembler import (
    AssembledDocument,
    FragmentCategory,
    ReportTemplate,
    assemble_report,
)
from pentreport.compiler import CompileResult, CompilerRunner
from pentreport.config import Config
from pentreport.errors import ReportError
from pentreport.scaffolder import ProjectGenerator
from pentreport.utils import (
    console,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    write_text_verbatim,
)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class ReportPipeline:
    """Runs the report operations against one configuration.

    Attributes:
        config: Global configuration.
        generator: Scaffolder for ``new`` and ``add``.
        compiler: Runner for the external Typst compiler.
    """

    def __init__(self, config: Config, workdir: str | Path | None = None) -> None:
        self.config = config
        self.generator = ProjectGenerator(config)
        self.compiler = CompilerRunner.from_config(config.compiler, workdir)
        self._template: Optional[ReportTemplate] = None

    @property
    def template(self) -> ReportTemplate:
        """The report template, loaded and validated on first use."""
        if self._template is None:
            self._template = ReportTemplate.load(self.config.template_path)
        return self._template

    async def new(self, project_dir: str | Path) -> Path:
        """Scaffold a new report project."""
        return await self.generator.generate(project_dir)

    async def add(
        self, project_dir: str | Path, category: FragmentCategory, name: str
    ) -> Path:
        """Append a section or finding file to an existing project."""
        return await self.generator.add_fragment(project_dir, category, name)

    def assemble(
        self, project_dir: str | Path, now: Optional[datetime] = None
    ) -> AssembledDocument:
        """Assemble the Typst source of *project_dir*."""
        return assemble_report(project_dir, self.config, template=self.template, now=now)

    async def compile(
        self,
        project_dir: str | Path,
        output: str | Path | None = None,
        now: Optional[datetime] = None,
    ) -> tuple[AssembledDocument, CompileResult]:
        """Assemble *project_dir* and render it to *output*.

        The output defaults to ``config.default_output``.  Assembly errors
        are raised before the compiler is touched.
        """
        document = self.assemble(project_dir, now=now)
        destination = Path(output) if output is not None else self.config.default_output
        result = await self.compiler.compile(document.source, destination)
        return document, result


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pentreport",
        description="Scaffold and compile Typst penetration-test reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  pentreport new ./acme-report\n"
            "  pentreport add finding ./acme-report \"Stored XSS\"\n"
            "  pentreport compile ./acme-report -o acme.pdf\n"
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration file (default: built-in settings plus PENTREPORT_* env vars)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    new_parser = subparsers.add_parser("new", help="Create a new report project")
    new_parser.add_argument("dir", help="Directory to create")

    compile_parser = subparsers.add_parser("compile", help="Compile a report project")
    compile_parser.add_argument("dir", help="Report project directory")
    compile_parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output file (default: report.pdf)",
    )

    assemble_parser = subparsers.add_parser(
        "assemble", help="Write the assembled Typst source without compiling"
    )
    assemble_parser.add_argument("dir", help="Report project directory")
    assemble_parser.add_argument(
        "--output", "-o",
        default=None,
        help="Destination .typ file (default: stdout)",
    )

    add_parser = subparsers.add_parser("add", help="Add a section or finding to a project")
    add_parser.add_argument(
        "kind",
        choices=[c.value for c in FragmentCategory],
        help="Fragment category",
    )
    add_parser.add_argument("dir", help="Report project directory")
    add_parser.add_argument("name", help="Heading of the new fragment")

    return parser


def _load_config(path: Optional[str]) -> Config:
    if path is None:
        return Config.from_env()
    return Config.load(Path(path))


async def _dispatch(pipeline: ReportPipeline, args: argparse.Namespace) -> None:
    if args.command == "new":
        root = await pipeline.new(args.dir)
        print_success(f"Created report project at {root}")

    elif args.command == "add":
        path = await pipeline.add(args.dir, FragmentCategory(args.kind), args.name)
        print_success(f"Created {args.kind} {path}")

    elif args.command == "assemble":
        document = pipeline.assemble(args.dir)
        if args.output is None:
            sys.stdout.write(document.source)
            sys.stdout.flush()
        else:
            write_text_verbatim(args.output, document.source)
            print_success(f"Wrote assembled source to {args.output}")

    elif args.command == "compile":
        console.print(Panel(f"Compiling [bold]{escape(args.dir)}[/bold]", border_style="cyan"))
        document, result = await pipeline.compile(args.dir, args.output)
        print_summary_table(
            {
                "Title": document.metadata.title,
                "Date": document.date,
                "Sections": str(document.section_count),
                "Findings": str(document.finding_count),
                "Output": str(result.output_path),
                "Duration": format_duration(result.duration_seconds),
            },
            title="Report",
        )
        print_success(f"Report written to {result.output_path}")


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``pentreport`` / ``python -m pentreport``."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        print_error("No command given. The interactive mode is not available yet; see --help.")
        sys.exit(1)

    try:
        config = _load_config(args.config)
    except (OSError, ValidationError, ValueError) as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    pipeline = ReportPipeline(config)
    try:
        asyncio.run(_dispatch(pipeline, args))
    except (ReportError, OSError) as exc:
        print_error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
