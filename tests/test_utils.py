"""Unit tests for utility functions (pentreport.utils).

Tests cover:
- sanitize_name (various inputs and separators)
- format_duration
- read_text_verbatim / write_text_verbatim
- Rich output helpers (print_success, print_error, print_warning, print_summary_table)
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pentreport.errors import FileAccessError
from pentreport.utils import (
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    read_text_verbatim,
    sanitize_name,
    write_text_verbatim,
)


# ---------------------------------------------------------------------------
# sanitize_name
# ---------------------------------------------------------------------------


class TestSanitizeName:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("SQL Injection", "sql-injection"),
            ("  XSS (stored)  ", "xss-stored"),
            ("already-clean", "already-clean"),
            ("under_score", "under_score"),
            ("TLS 1.0", "tls-1-0"),
            ("---", ""),
            ("", ""),
        ],
    )
    def test_default_separator(self, name: str, expected: str):
        assert sanitize_name(name) == expected

    @pytest.mark.unit
    def test_underscore_separator(self):
        assert sanitize_name("Broken Access Control!", "_") == "broken_access_control"

    @pytest.mark.unit
    def test_result_has_no_dots(self):
        assert "." not in sanitize_name("v1.2.3 release.notes", "_")


# ---------------------------------------------------------------------------
# format_duration
# ---------------------------------------------------------------------------


class TestFormatDuration:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (0.0, "0.0s"),
            (3.7, "3.7s"),
            (65.2, "1m 5s"),
            (3661.0, "1h 1m 1s"),
            (-1.0, "0.0s"),
        ],
    )
    def test_format(self, seconds: float, expected: str):
        assert format_duration(seconds) == expected


# ---------------------------------------------------------------------------
# Text file I/O
# ---------------------------------------------------------------------------


class TestTextFileIO:
    @pytest.mark.unit
    def test_read_keeps_crlf(self, tmp_path: Path):
        path = tmp_path / "a.typ"
        path.write_bytes(b"= A\r\nline\r\n")
        assert read_text_verbatim(path) == "= A\r\nline\r\n"

    @pytest.mark.unit
    def test_read_invalid_utf8(self, tmp_path: Path):
        path = tmp_path / "a.typ"
        path.write_bytes(b"ok \xff")
        with pytest.raises(FileAccessError, match="invalid UTF-8 at byte 3"):
            read_text_verbatim(path)

    @pytest.mark.unit
    def test_read_missing_file(self, tmp_path: Path):
        with pytest.raises(FileAccessError, match="Cannot read"):
            read_text_verbatim(tmp_path / "absent.typ")

    @pytest.mark.unit
    def test_write_keeps_crlf(self, tmp_path: Path):
        path = tmp_path / "out.typ"
        write_text_verbatim(path, "a\r\nb\n")
        assert path.read_bytes() == b"a\r\nb\n"

    @pytest.mark.unit
    def test_write_into_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileAccessError, match="Cannot write"):
            write_text_verbatim(tmp_path / "absent" / "out.typ", "x")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    @pytest.mark.unit
    def test_print_success_goes_to_stdout(self, capsys):
        print_success("Report written")
        captured = capsys.readouterr()
        assert "Report written" in captured.out
        assert captured.err == ""

    @pytest.mark.unit
    def test_print_error_goes_to_stderr(self, capsys):
        print_error("Directory already exists: acme")
        captured = capsys.readouterr()
        assert "Error:" in captured.err
        assert "Directory already exists: acme" in captured.err
        assert captured.out == ""

    @pytest.mark.unit
    def test_print_error_keeps_brackets(self, capsys):
        print_error("bad value [REPORT TITLE - CHANGE ME] in [sections]")
        assert "[sections]" in capsys.readouterr().err

    @pytest.mark.unit
    def test_print_warning_goes_to_stderr(self, capsys):
        print_warning("Compiler output follows")
        assert "Compiler output follows" in capsys.readouterr().err

    @pytest.mark.unit
    def test_print_summary_table(self, capsys):
        print_summary_table({"Title": "[REPORT TITLE - CHANGE ME]", "Sections": "4"}, title="Report")
        out = capsys.readouterr().out
        assert "Report" in out
        assert "Sections" in out
        assert "[REPORT TITLE - CHANGE ME]" in out
