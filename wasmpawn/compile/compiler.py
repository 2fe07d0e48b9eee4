"""High-level compiler facade."""

from __future__ import annotations

import asyncio
import tempfile
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from wasmpawn.data import CompilationResult, CompileOptions
from wasmpawn.env import get_wasmpawn_cache_path, get_wasmpawn_module_path
from wasmpawn.errors import LifecycleError
from wasmpawn.module import CompilerModule, WasiCompilerModule

from .artifacts import ArtifactManager
from .bridge import InvocationBridge
from .config import CompilerConfig
from .includes import IncludeLike, IncludeStore
from .lifecycle import ModuleLifecycle, ModuleLoader, ModuleState


def wasi_module_loader(config: CompilerConfig) -> ModuleLoader:
    """Create a loader that instantiates the WASI build of the compiler.

    Parameters
    ----------
    config : CompilerConfig
        Supplies the module path, filesystem root and console capture setting.

    Returns
    -------
    ModuleLoader
        A blocking factory raising `LifecycleError` if no usable module is configured.
    """

    def load() -> CompilerModule:
        module_path = config.module_path or get_wasmpawn_module_path()
        if module_path is None:
            raise LifecycleError(
                "No compiler module configured. Set WASMPAWN_MODULE_PATH or "
                "CompilerConfig.module_path."
            )
        if not Path(module_path).is_file():
            raise LifecycleError(f"Compiler module not found: {module_path}")

        cache_dir = get_wasmpawn_cache_path()
        if config.fs_root is None:
            return WasiCompilerModule.create_temporary(
                Path(module_path), cache_dir, config.capture_console
            )
        console_dir = None
        if config.capture_console:
            cache_dir.mkdir(parents=True, exist_ok=True)
            console_dir = Path(tempfile.mkdtemp(prefix="console_", dir=cache_dir))
        return WasiCompilerModule(Path(module_path), config.fs_root, console_dir)

    return load


class PawnCompiler:
    """Entry point for hosts: initialize, stage includes, compile, fetch the artifact.

    Examples
    --------
    >>> compiler = PawnCompiler()
    >>> await compiler.initialize()
    >>> compiler.add_include("a_samp.inc", samp_content)
    >>> result = compiler.compile(source, CompileOptions(optimization_level=2))
    >>> if result.success:
    ...     amx = compiler.get_artifact()
    >>> compiler.cleanup()

    Parameters
    ----------
    config : Optional[CompilerConfig]
        Settings. Defaults to `CompilerConfig()`.
    loader : Optional[ModuleLoader]
        Factory for the module. Defaults to the wasmtime loader built from `config`.
    """

    def __init__(
        self, config: Optional[CompilerConfig] = None, loader: Optional[ModuleLoader] = None
    ) -> None:
        self._config = config if config is not None else CompilerConfig()
        self._lifecycle = ModuleLifecycle(
            loader if loader is not None else wasi_module_loader(self._config)
        )
        self._lock = threading.Lock()
        self._includes = IncludeStore(self._lifecycle)
        self._bridge = InvocationBridge(self._lifecycle, self._lock)
        self._artifacts = ArtifactManager(self._lifecycle, self._lock)

    @property
    def config(self) -> CompilerConfig:
        return self._config

    @property
    def state(self) -> ModuleState:
        return self._lifecycle.state

    @property
    def lifecycle(self) -> ModuleLifecycle:
        return self._lifecycle

    async def initialize(self) -> None:
        """Load the compiler module. Safe to call repeatedly and concurrently."""
        await self._lifecycle.initialize()

    def add_include(self, path: str, content: Union[str, bytes]) -> str:
        """Stage one include file. See `IncludeStore.add_include`."""
        return self._includes.add_include(path, content)

    def add_includes(self, files: Iterable[IncludeLike]) -> List[str]:
        """Stage include files in order. See `IncludeStore.add_includes`."""
        return self._includes.add_includes(files)

    async def load_includes(
        self, base_url: str, filenames: Sequence[str], *, raise_on_failure: bool = False
    ) -> int:
        """Fetch and stage remote include files, returning the number of failures."""
        return await self._includes.load_includes(
            base_url,
            filenames,
            timeout=self._config.fetch_timeout,
            max_concurrency=self._config.max_concurrent_fetches,
            raise_on_failure=raise_on_failure,
        )

    def compile(
        self, source_code: str, options: Optional[CompileOptions] = None
    ) -> CompilationResult:
        """Compile source text. Blocks until the module returns."""
        return self._bridge.compile(source_code, options)

    async def compile_async(
        self, source_code: str, options: Optional[CompileOptions] = None
    ) -> CompilationResult:
        """Compile in a worker thread. Concurrent calls still run one after another."""
        return await asyncio.to_thread(self._bridge.compile, source_code, options)

    def get_artifact(self) -> Optional[bytes]:
        """Return the compiled artifact, or None if there is none."""
        return self._artifacts.get_artifact()

    def cleanup(self) -> List[str]:
        """Remove transient input, output and log files. Returns the removed paths."""
        return self._artifacts.cleanup()


_global_compiler: Optional[PawnCompiler] = None


def get_compiler() -> PawnCompiler:
    """Get the process-wide compiler, creating it with the default config on first use."""
    global _global_compiler
    if _global_compiler is None:
        _global_compiler = PawnCompiler()
    return _global_compiler


def set_compiler(compiler: Optional[PawnCompiler]) -> None:
    """Replace the process-wide compiler. None clears it."""
    global _global_compiler
    _global_compiler = compiler
