import sys
from pathlib import Path

import pytest

from wasmpawn import FilesystemError, LifecycleError, PawnCompiler
from wasmpawn.testing import FakeModuleLoader, build_artifact

SOURCE = "main() {}\n"


def test_get_artifact_before_compile_is_none(compiler: PawnCompiler):
    assert compiler.get_artifact() is None


def test_get_artifact_after_success(compiler: PawnCompiler):
    result = compiler.compile(SOURCE)
    artifact = compiler.get_artifact()
    assert artifact == build_artifact(SOURCE)
    assert len(artifact) == result.artifact_size


def test_get_artifact_before_initialize(fake_loader: FakeModuleLoader):
    with pytest.raises(LifecycleError):
        PawnCompiler(loader=fake_loader).get_artifact()


def test_cleanup_removes_transient_files(compiler: PawnCompiler, fs_root: Path):
    compiler.compile(SOURCE)
    compiler.lifecycle.require_module().fs.write_file("/output.txt", "log")

    removed = compiler.cleanup()

    assert removed == ["/input.pwn", "/output.amx", "/output.txt"]
    assert not (fs_root / "input.pwn").exists()
    assert not (fs_root / "output.amx").exists()
    assert not (fs_root / "output.txt").exists()
    assert compiler.get_artifact() is None


def test_cleanup_keeps_includes(compiler: PawnCompiler, fs_root: Path):
    compiler.add_include("a.inc", "x")
    compiler.compile(SOURCE)
    compiler.cleanup()
    assert (fs_root / "include" / "a.inc").exists()


def test_cleanup_is_idempotent(compiler: PawnCompiler):
    compiler.compile(SOURCE)
    assert compiler.cleanup() == ["/input.pwn", "/output.amx"]
    assert compiler.cleanup() == []


def test_cleanup_before_initialize(fake_loader: FakeModuleLoader):
    assert PawnCompiler(loader=fake_loader).cleanup() == []


def test_cleanup_reports_failures_and_continues(
    compiler: PawnCompiler, fs_root: Path, monkeypatch: pytest.MonkeyPatch
):
    compiler.compile(SOURCE)
    fs = compiler.lifecycle.require_module().fs
    original_unlink = fs.unlink

    def unlink(path: str) -> None:
        if path == "/input.pwn":
            raise PermissionError("read-only")
        original_unlink(path)

    monkeypatch.setattr(fs, "unlink", unlink)

    with pytest.raises(FilesystemError, match="/input.pwn"):
        compiler.cleanup()
    assert (fs_root / "input.pwn").exists()
    assert not (fs_root / "output.amx").exists()


if __name__ == "__main__":
    pytest.main(sys.argv)
