"""Shared pytest fixtures for the pentreport test suite.

Provides reusable fixtures for:
- Hand-built report project directories
- A fixed report date
- Mock subprocess helpers for the Typst compiler
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest


# ---------------------------------------------------------------------------
# Report projects
# ---------------------------------------------------------------------------

ProjectFactory = Callable[..., Path]


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Factory that writes a report project layout under ``tmp_path``.

    Usage:
        def test_x(make_project):
            root = make_project(
                metadata="title:Acme Report",
                sections={"1.intro.typ": "= Intro"},
                findings={"1.xss.typ": "= XSS"},
            )
    """
    def factory(
        metadata: Optional[str] = "",
        sections: Optional[dict[str, str]] = None,
        findings: Optional[dict[str, str]] = None,
        name: str = "report",
    ) -> Path:
        root = tmp_path / name
        root.mkdir()
        if metadata is not None:
            (root / "metadata.typ").write_text(metadata, encoding="utf-8")
        for dirname, files in (("sections", sections), ("findings", findings)):
            if files is None:
                continue
            directory = root / dirname
            directory.mkdir()
            for filename, body in files.items():
                (directory / filename).write_text(body, encoding="utf-8")
        return root

    return factory


@pytest.fixture
def sample_project(make_project: ProjectFactory) -> Path:
    """A valid project: three sections and two findings, written out of order."""
    return make_project(
        metadata=(
            "title:Acme Web Application Assessment\n"
            "prepared_for:Acme Co\n"
            "prepared_by:Red Team Ltd\n"
        ),
        sections={
            "3.methodology.typ": "= Methodology\nOWASP WSTG",
            "1.summary.typ": "= Summary\nTwo issues found.",
            "2.scope.typ": "= Scope\napp.acme.test",
        },
        findings={
            "2.csrf.typ": "= CSRF\nMissing token on /settings",
            "1.sqli.typ": "= SQL Injection\nLogin form is injectable",
        },
    )


@pytest.fixture
def fixed_now() -> datetime:
    """The moment used as 'today' in assembly tests."""
    return datetime(2024, 3, 5, 14, 30)


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing compiler execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stderr="error: unknown variable", returncode=1)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
