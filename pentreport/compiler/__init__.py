"""pentreport compiler module.

Key classes:
    CompilerRunner  - runs ``typst compile`` on assembled source
    CompileResult   - exit code, captured output and timing of one compile
    CompileLock     - per-working-directory compile lock
"""

from .lock import CompileLock
from .runner import CompileResult, CompilerRunner

__all__ = [
    "CompileLock",
    "CompileResult",
    "CompilerRunner",
]
