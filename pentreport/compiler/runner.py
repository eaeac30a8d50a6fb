"""Typst compiler process management.

Writes assembled report source to a transient file, runs
``typst compile <tmp> <output>`` and removes the transient file again.  The
compile is scoped by a ``CompileLock``; the exit code and captured output of
the compiler are returned as a ``CompileResult`` and a failed render raises
``RenderError``.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pentreport.config import CompilerConfig
from pentreport.errors import CompileLockError, FileAccessError, RenderError
from pentreport.utils import console, format_duration

from .lock import CompileLock


@dataclass
class CompileResult:
    """Structured result from a compiler execution."""

    success: bool
    exit_code: int = -1
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    output_path: Optional[Path] = None

    def summary(self) -> str:
        """Return a human-readable one-line summary of the result."""
        status = "succeeded" if self.success else "failed"
        line = (
            f"Compile {status} (exit code {self.exit_code}) "
            f"in {format_duration(self.duration_seconds)}"
        )
        if not self.success and self.stderr.strip():
            line += f": {self.stderr.strip().splitlines()[-1]}"
        return line


class CompilerRunner:
    """Runs the external Typst compiler on assembled report source.

    Args:
        binary: Compiler executable (default: ``typst``).
        tmp_filename: Transient source file name.
        timeout: Seconds before the compiler is killed; ``None`` waits forever.
        workdir: Directory for the transient and lock files (default: the
            current working directory).
    """

    def __init__(
        self,
        binary: str = "typst",
        tmp_filename: str = "tmp.typ",
        timeout: Optional[float] = None,
        workdir: str | Path | None = None,
    ) -> None:
        self.binary = binary
        self.tmp_filename = tmp_filename
        self.timeout = timeout
        self.workdir = Path(workdir) if workdir is not None else None

    @classmethod
    def from_config(
        cls, config: CompilerConfig, workdir: str | Path | None = None
    ) -> "CompilerRunner":
        return cls(
            binary=config.binary,
            tmp_filename=config.tmp_filename,
            timeout=config.timeout,
            workdir=workdir,
        )

    @property
    def tmp_path(self) -> Path:
        """Path of the transient source file."""
        if self.workdir is None:
            return Path(self.tmp_filename)
        return self.workdir / self.tmp_filename

    @property
    def lock_path(self) -> Path:
        """Path of the lock file guarding the transient source file."""
        return self.tmp_path.with_name(self.tmp_path.name + ".lock")

    async def compile(self, source: str, output: str | Path) -> CompileResult:
        """Render *source* to *output* with the external compiler.

        Raises:
            CompileLockError: If another compile holds the lock, or the
                transient file already exists (it is left untouched).
            RenderError: If the compiler is missing, exits non-zero or times
                out.  ``RenderError.result`` carries the ``CompileResult``.
        """
        output_path = Path(output)
        tmp = self.tmp_path

        with CompileLock(self.lock_path):
            try:
                await asyncio.to_thread(_write_new_file, tmp, source)
            except FileExistsError:
                raise CompileLockError(
                    tmp,
                    f"Transient file {tmp} already exists. "
                    "Remove it if no compile is running.",
                ) from None
            except OSError as exc:
                raise FileAccessError(tmp, "write", exc.strerror or str(exc)) from exc

            try:
                result = await self._run(tmp, output_path)
            finally:
                tmp.unlink(missing_ok=True)

        if not result.success:
            raise RenderError(result.summary(), result)
        return result

    async def _run(self, source_path: Path, output_path: Path) -> CompileResult:
        cmd = [self.binary, "compile", str(source_path), str(output_path)]
        start_time = time.monotonic()

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise RenderError(
                f"Compiler not found: '{self.binary}'. "
                "Ensure Typst is installed and in PATH."
            ) from None
        except PermissionError:
            raise RenderError(
                f"Permission denied executing: '{self.binary}'."
            ) from None

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            elapsed = time.monotonic() - start_time
            result = CompileResult(
                success=False,
                exit_code=-1,
                stderr=f"Compiler timed out after {self.timeout}s",
                duration_seconds=elapsed,
                output_path=output_path,
            )
            raise RenderError(result.summary(), result) from None
        finally:
            # The child must not outlive the transient file it reads.
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()

        elapsed = time.monotonic() - start_time
        exit_code = process.returncode if process.returncode is not None else -1
        stderr_text = (stderr_bytes or b"").decode("utf-8", errors="replace")

        # Echo compiler diagnostics
        for line in stderr_text.strip().splitlines()[:20]:
            console.print(f"  {line.rstrip()}", style="dim", markup=False, highlight=False)

        return CompileResult(
            success=exit_code == 0,
            exit_code=exit_code,
            stdout=(stdout_bytes or b"").decode("utf-8", errors="replace"),
            stderr=stderr_text,
            duration_seconds=elapsed,
            output_path=output_path,
        )

    async def check_available(self) -> bool:
        """Return ``True`` if ``<binary> --version`` runs successfully."""
        try:
            process = await asyncio.create_subprocess_exec(
                self.binary, "--version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            await asyncio.wait_for(process.communicate(), timeout=10.0)
        except (FileNotFoundError, PermissionError, asyncio.TimeoutError):
            return False
        return process.returncode == 0


def _write_new_file(path: Path, content: str) -> None:
    """Synchronous helper: write content to a file that must not exist yet."""
    with path.open("x", encoding="utf-8", newline="") as handle:
        handle.write(content)
