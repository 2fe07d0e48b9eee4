"""The call across the host/module boundary."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from wasmpawn.data import CompilationResult, CompileOptions
from wasmpawn.logging import get_logger
from wasmpawn.module import CompilerModule
from wasmpawn.module.paths import INCLUDE_ROOT, OUTPUT_PATH

from .diagnostics import failure_result, parse_output
from .lifecycle import ModuleLifecycle
from .marshal import join_flags, marshal_options

logger = get_logger("InvocationBridge")
compiler_logger = get_logger("PawnCompiler")


@contextmanager
def module_result(module: CompilerModule, source_code: str, options: str) -> Iterator[str]:
    """Invoke the module and yield its result message as a host string.

    The module-owned buffer is released when the block exits, whether it exits normally
    or with an exception.
    """
    handle = module.compile_source(source_code, options)
    try:
        yield module.read_result(handle)
    finally:
        module.release_result(handle)


def _discard_console(module: CompilerModule) -> None:
    """Drop output left behind by a failed compile so the next one starts clean."""
    try:
        discarded = module.drain_console()
    except OSError as e:
        # The next compile drains again before invoking
        logger.warning(f"Failed to discard compiler output: {e}")
        return
    for line in discarded.splitlines():
        compiler_logger.debug(f"Discarded: {line}")


class InvocationBridge:
    """Runs compilations on the module, one at a time.

    The module filesystem has a single input path and a single output path, so two
    overlapping compilations would overwrite each other's files. Every compile holds
    `lock` for the whole stage, invoke and read sequence.

    Parameters
    ----------
    lifecycle : ModuleLifecycle
        Provides the ready module.
    lock : Optional[threading.Lock]
        Lock guarding the module's transient files. Shared with the artifact manager.
    include_root : str
        Include directory passed to the compiler.
    """

    def __init__(
        self,
        lifecycle: ModuleLifecycle,
        lock: Optional[threading.Lock] = None,
        include_root: str = INCLUDE_ROOT,
    ) -> None:
        self._lifecycle = lifecycle
        self._lock = lock if lock is not None else threading.Lock()
        self._include_root = include_root

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    def compile(
        self, source_code: str, options: Optional[CompileOptions] = None
    ) -> CompilationResult:
        """Compile source text.

        Parameters
        ----------
        source_code : str
            The source text.
        options : Optional[CompileOptions]
            Compiler options.

        Returns
        -------
        CompilationResult
            The parsed result. Failures of the boundary call itself are reported as a
            result with ``success=False`` and the failure text as the only error.

        Raises
        ------
        LifecycleError
            If the module is not initialized.
        """
        module = self._lifecycle.require_module()
        flags = join_flags(marshal_options(options, self._include_root))

        with self._lock:
            try:
                # Output printed outside this compile (start-up, an aborted call) is not ours
                module.drain_console()
                # A failed compile must not leave the previous artifact looking fresh
                if module.fs.exists(OUTPUT_PATH):
                    module.fs.unlink(OUTPUT_PATH)
                with module_result(module, source_code, flags) as message:
                    console = module.drain_console()
            except Exception as e:
                logger.error(f"Compilation error: {e}")
                _discard_console(module)
                return failure_result(e)

        for line in console.splitlines():
            compiler_logger.info(line)
        return parse_output(console + message)
