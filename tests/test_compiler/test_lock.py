"""Unit tests for CompileLock (pentreport.compiler.lock)."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from pentreport.compiler.lock import CompileLock
from pentreport.errors import CompileLockError, FileAccessError

pytestmark = pytest.mark.unit


class TestCompileLock:
    def test_acquire_creates_file_with_pid(self, tmp_path: Path):
        lock = CompileLock(tmp_path / "tmp.typ.lock")
        lock.acquire()
        try:
            assert lock.held is True
            assert lock.path.read_text(encoding="utf-8").strip() == str(os.getpid())
        finally:
            lock.release()
        assert not lock.path.exists()
        assert lock.held is False

    def test_context_manager_releases(self, tmp_path: Path):
        path = tmp_path / "tmp.typ.lock"
        with CompileLock(path) as lock:
            assert lock.held
            assert path.exists()
        assert not path.exists()

    def test_released_on_exception(self, tmp_path: Path):
        path = tmp_path / "tmp.typ.lock"
        with pytest.raises(RuntimeError):
            with CompileLock(path):
                raise RuntimeError("boom")
        assert not path.exists()

    def test_second_lock_rejected(self, tmp_path: Path):
        path = tmp_path / "tmp.typ.lock"
        with CompileLock(path):
            with pytest.raises(CompileLockError, match="Another compile holds the lock"):
                CompileLock(path).acquire()
            assert path.exists()
        assert not path.exists()

    def test_stale_lock_left_untouched(self, tmp_path: Path):
        path = tmp_path / "tmp.typ.lock"
        path.write_text("12345\n", encoding="utf-8")
        lock = CompileLock(path)
        with pytest.raises(CompileLockError):
            lock.acquire()
        lock.release()
        assert path.read_text(encoding="utf-8") == "12345\n"

    def test_acquire_is_reentrant_for_same_instance(self, tmp_path: Path):
        lock = CompileLock(tmp_path / "tmp.typ.lock")
        lock.acquire()
        lock.acquire()
        lock.release()
        assert not lock.path.exists()

    def test_missing_directory_raises_file_access_error(self, tmp_path: Path):
        lock = CompileLock(tmp_path / "absent" / "tmp.typ.lock")
        with pytest.raises(FileAccessError, match="Cannot create"):
            lock.acquire()
        assert not lock.held
