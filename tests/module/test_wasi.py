import asyncio
import os
import sys
from pathlib import Path

import pytest
from wasmtime import wat2wasm

from wasmpawn import (
    CompileOptions,
    CompilerConfig,
    InvocationError,
    LifecycleError,
    PawnCompiler,
)
from wasmpawn.compile import module_result
from wasmpawn.module import WasiCompilerModule


def test_invalid_binary_raises_lifecycle_error(tmp_path: Path):
    binary = tmp_path / "pawnc.wasm"
    binary.write_bytes(b"definitely not wasm")
    with pytest.raises(LifecycleError, match="Failed to load compiler module"):
        WasiCompilerModule(binary, tmp_path / "root")


def test_invalid_binary_through_compiler(tmp_path: Path):
    binary = tmp_path / "pawnc.wasm"
    binary.write_bytes(b"\x00asm\x01\x00\x00\x00")
    compiler = PawnCompiler(CompilerConfig(module_path=binary, fs_root=tmp_path / "root"))
    with pytest.raises(LifecycleError):
        asyncio.run(compiler.initialize())


STUB_MESSAGE = "Compilation successful! AMX file size: 42 bytes\n"
STUB_CONSOLE = "input.pwn(1) : warning 203: symbol is never used: x"
UNTERMINATED_ADDRESS = 65532

# Echoes the source back as the result message, prints one console line through WASI,
# remembers the options pointer and counts released results.
STUB_WAT = f"""
(module
  (import "wasi_snapshot_preview1" "fd_write"
    (func $fd_write (param i32 i32 i32 i32) (result i32)))
  (memory (export "memory") 1)
  (global $heap (mut i32) (i32.const 1024))
  (global $last_options (export "last_options") (mut i32) (i32.const 0))
  (global $release_count (export "release_count") (mut i32) (i32.const 0))
  (data (i32.const 256) "{STUB_CONSOLE}\\n")
  (data (i32.const {UNTERMINATED_ADDRESS}) "ABCD")
  (func (export "malloc") (param $size i32) (result i32)
    (local $ptr i32)
    (local.set $ptr (global.get $heap))
    (global.set $heap (i32.add (global.get $heap) (local.get $size)))
    (local.get $ptr))
  (func (export "free") (param i32))
  (func (export "pawncl_compile") (param $source i32) (param $options i32) (result i32)
    (i32.store (i32.const 0) (i32.const 256))
    (i32.store (i32.const 4) (i32.const {len(STUB_CONSOLE) + 1}))
    (drop (call $fd_write (i32.const 1) (i32.const 0) (i32.const 1) (i32.const 8)))
    (global.set $last_options (local.get $options))
    (local.get $source))
  (func (export "pawncl_free") (param i32)
    (global.set $release_count
      (i32.add (global.get $release_count) (i32.const 1)))))
"""


@pytest.fixture
def stub_path(tmp_path: Path) -> Path:
    path = tmp_path / "stub.wasm"
    path.write_bytes(wat2wasm(STUB_WAT))
    return path


@pytest.fixture
def stub_module(stub_path: Path, tmp_path: Path) -> WasiCompilerModule:
    return WasiCompilerModule(stub_path, tmp_path / "root", tmp_path / "console")


def _exported_global(module: WasiCompilerModule, name: str) -> int:
    return module._instance.exports(module._store)[name].value(module._store)


def test_stub_result_round_trips(stub_module: WasiCompilerModule):
    handle = stub_module.compile_source(STUB_MESSAGE, "-O2 -d0 -i/include")
    assert stub_module.read_result(handle) == STUB_MESSAGE
    assert stub_module.read_result(_exported_global(stub_module, "last_options")) == (
        "-O2 -d0 -i/include"
    )
    stub_module.release_result(handle)
    assert _exported_global(stub_module, "release_count") == 1
    assert stub_module.drain_console() == STUB_CONSOLE + "\n"
    assert stub_module.drain_console() == ""


def test_stub_unicode_source_round_trips(stub_module: WasiCompilerModule):
    source = "main() { print(\"héllo wörld\"); }\n"
    with module_result(stub_module, source, "") as message:
        assert message == source
    assert _exported_global(stub_module, "release_count") == 1


def test_stub_through_compiler(stub_path: Path, tmp_path: Path):
    module = WasiCompilerModule(stub_path, tmp_path / "root", tmp_path / "console")
    compiler = PawnCompiler(loader=lambda: module)
    asyncio.run(compiler.initialize())

    result = compiler.compile(STUB_MESSAGE, CompileOptions(optimization_level=2))
    assert result.success is True
    assert result.artifact_size == 42
    assert result.warnings == [STUB_CONSOLE]
    assert result.errors == []
    assert _exported_global(module, "release_count") == 1
    assert (tmp_path / "root" / "include").is_dir()


def test_stub_released_once_when_read_fails(
    stub_module: WasiCompilerModule, monkeypatch: pytest.MonkeyPatch
):
    def broken_read(handle: int) -> str:
        raise InvocationError("bad result")

    monkeypatch.setattr(stub_module, "read_result", broken_read)
    with pytest.raises(InvocationError, match="bad result"):
        with module_result(stub_module, STUB_MESSAGE, ""):
            pass
    assert _exported_global(stub_module, "release_count") == 1


def test_stub_released_when_argument_free_fails(
    stub_module: WasiCompilerModule, monkeypatch: pytest.MonkeyPatch
):
    def broken_free(store, ptr: int) -> None:
        raise InvocationError("free failed")

    monkeypatch.setattr(stub_module, "_free", broken_free)
    with pytest.raises(InvocationError, match="free failed"):
        stub_module.compile_source(STUB_MESSAGE, "-O1")
    assert _exported_global(stub_module, "release_count") == 1


def test_stub_missing_terminator(stub_module: WasiCompilerModule):
    with pytest.raises(InvocationError, match="not NUL-terminated"):
        stub_module.read_result(UNTERMINATED_ADDRESS)


def test_stub_null_handle(stub_module: WasiCompilerModule):
    with pytest.raises(InvocationError, match="null result"):
        stub_module.read_result(0)
    # Releasing a null handle is a no-op
    stub_module.release_result(0)
    assert _exported_global(stub_module, "release_count") == 0


def test_stub_missing_export(tmp_path: Path):
    path = tmp_path / "partial.wasm"
    path.write_bytes(wat2wasm('(module (memory (export "memory") 1))'))
    with pytest.raises(LifecycleError, match="lacks required exports"):
        WasiCompilerModule(path, tmp_path / "root")


@pytest.fixture
def real_compiler(tmp_path: Path) -> PawnCompiler:
    config = CompilerConfig(
        module_path=Path(os.environ["WASMPAWN_MODULE_PATH"]), fs_root=tmp_path / "root"
    )
    compiler = PawnCompiler(config)
    asyncio.run(compiler.initialize())
    return compiler


@pytest.mark.requires_wasm_module
def test_real_module_compiles(real_compiler: PawnCompiler):
    result = real_compiler.compile("main()\n{\n}\n", CompileOptions(optimization_level=1))
    assert result.success, result.output
    artifact = real_compiler.get_artifact()
    assert artifact is not None
    assert len(artifact) == result.artifact_size
    real_compiler.cleanup()
    assert real_compiler.get_artifact() is None


@pytest.mark.requires_wasm_module
def test_real_module_reports_errors(real_compiler: PawnCompiler):
    result = real_compiler.compile("main()\n{\n    undefined_call();\n}\n")
    assert result.success is False
    assert any("error" in line for line in result.errors)


if __name__ == "__main__":
    pytest.main(sys.argv)
