"""wasmtime host for a WASI build of the compiler module."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, List, Optional

from wasmtime import Engine, Linker, Module, Store, Trap, WasiConfig, WasmtimeError

from wasmpawn.errors import InvocationError, LifecycleError
from wasmpawn.logging import get_logger

from .base import CompilerModule
from .hostfs import HostDirFS

logger = get_logger("WasiModule")

_REQUIRED_EXPORTS = ("memory", "malloc", "free", "pawncl_compile", "pawncl_free")
"""Exports the host relies on. Instantiation fails if any is missing."""

_READ_CHUNK = 4096
"""Bytes read per step when scanning guest memory for a NUL terminator."""


class _ConsoleCapture:
    """Tracks how much of a console file has already been handed out."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.write_bytes(b"")
        self._offset = 0

    def drain(self) -> str:
        with self.path.open("rb") as f:
            f.seek(self._offset)
            data = f.read()
        self._offset += len(data)
        return data.decode("utf-8", errors="replace")


class WasiCompilerModule(CompilerModule):
    """The compiler module instantiated with wasmtime and WASI.

    The host directory `fs_root` is preopened as the guest `/`, so paths the module
    uses (e.g. `/input.pwn`) land below it. Standard output and standard error of the
    guest go to console files in `console_dir` when capture is enabled.

    Parameters
    ----------
    module_path : Path
        Path to `pawnc.wasm`.
    fs_root : Path
        Host directory backing the module filesystem. Created if missing.
    console_dir : Optional[Path]
        Directory for the captured console files. None disables capture and the guest
        inherits the host's stdout and stderr.

    Raises
    ------
    LifecycleError
        If the binary cannot be compiled or instantiated, or lacks a required export.
    """

    def __init__(
        self, module_path: Path, fs_root: Path, console_dir: Optional[Path] = None
    ) -> None:
        self._module_path = Path(module_path)
        fs_root = Path(fs_root)
        fs_root.mkdir(parents=True, exist_ok=True)
        self._fs = HostDirFS(fs_root)

        self._console: List[_ConsoleCapture] = []
        wasi = WasiConfig()
        wasi.preopen_dir(str(fs_root), "/")
        if console_dir is not None:
            console_dir = Path(console_dir)
            console_dir.mkdir(parents=True, exist_ok=True)
            stdout = _ConsoleCapture(console_dir / "stdout.log")
            stderr = _ConsoleCapture(console_dir / "stderr.log")
            wasi.stdout_file = str(stdout.path)
            wasi.stderr_file = str(stderr.path)
            self._console = [stdout, stderr]
        else:
            wasi.inherit_stdout()
            wasi.inherit_stderr()

        try:
            self._engine = Engine()
            module = Module.from_file(self._engine, str(self._module_path))
            linker = Linker(self._engine)
            linker.define_wasi()
            self._store = Store(self._engine)
            self._store.set_wasi(wasi)
            self._instance = linker.instantiate(self._store, module)
            exports = self._instance.exports(self._store)
            missing = [name for name in _REQUIRED_EXPORTS if exports.get(name) is None]
            if missing:
                raise LifecycleError(f"Compiler module lacks required exports: {missing}")
            self._memory = exports["memory"]
            self._malloc = exports["malloc"]
            self._free = exports["free"]
            self._compile = exports["pawncl_compile"]
            self._release = exports["pawncl_free"]
            initialize = exports.get("_initialize")
            if initialize is not None:
                initialize(self._store)
        except (WasmtimeError, Trap, OSError) as e:
            raise LifecycleError(f"Failed to load compiler module {self._module_path}: {e}") from e

        logger.info(f"Loaded compiler module {self._module_path} with root {fs_root}")

    @classmethod
    def create_temporary(
        cls, module_path: Path, cache_dir: Path, capture_console: bool = True
    ) -> "WasiCompilerModule":
        """Instantiate with a fresh filesystem root below `cache_dir`."""
        cache_dir.mkdir(parents=True, exist_ok=True)
        workdir = Path(tempfile.mkdtemp(prefix="module_", dir=cache_dir))
        console_dir = workdir / "console" if capture_console else None
        return cls(module_path, workdir / "root", console_dir)

    @property
    def fs(self) -> HostDirFS:
        return self._fs

    def _call(self, func: Any, *args: int) -> Any:
        try:
            return func(self._store, *args)
        except (WasmtimeError, Trap) as e:
            raise InvocationError(f"Module call failed: {e}") from e

    def _write_cstring(self, text: str) -> int:
        """Copy text into a fresh guest buffer as NUL-terminated UTF-8."""
        data = text.encode("utf-8") + b"\x00"
        ptr = self._call(self._malloc, len(data))
        if not ptr:
            raise InvocationError(f"Module could not allocate {len(data)} bytes")
        self._memory.write(self._store, data, ptr)
        return ptr

    def compile_source(self, source_code: str, options: str) -> int:
        handle = 0
        try:
            source_ptr = self._write_cstring(source_code)
            try:
                options_ptr = self._write_cstring(options)
                try:
                    handle = self._call(self._compile, source_ptr, options_ptr)
                finally:
                    self._call(self._free, options_ptr)
            finally:
                self._call(self._free, source_ptr)
        except BaseException:
            # The caller never sees the handle, so nobody else can release it
            self.release_result(handle)
            raise
        return handle

    def read_result(self, handle: int) -> str:
        if not handle:
            raise InvocationError("Module returned a null result")
        size = self._memory.data_len(self._store)
        buf = bytearray()
        pos = handle
        while pos < size:
            chunk = self._memory.read(self._store, pos, min(pos + _READ_CHUNK, size))
            end = chunk.find(0)
            if end >= 0:
                buf += chunk[:end]
                return buf.decode("utf-8", errors="replace")
            buf += chunk
            pos += len(chunk)
        raise InvocationError("Result string is not NUL-terminated")

    def release_result(self, handle: int) -> None:
        if handle:
            self._call(self._release, handle)

    def drain_console(self) -> str:
        return "".join(capture.drain() for capture in self._console)
