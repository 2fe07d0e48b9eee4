"""Single-initialization management of the compiler module."""

from __future__ import annotations

import asyncio
from collections import deque
from enum import Enum
from typing import Callable, Deque, Optional

from wasmpawn.errors import LifecycleError
from wasmpawn.logging import get_logger
from wasmpawn.module import CompilerModule
from wasmpawn.module.paths import INCLUDE_ROOT

logger = get_logger("Lifecycle")

ModuleLoader = Callable[[], CompilerModule]
"""Blocking factory that loads and instantiates the compiler module."""


class ModuleState(str, Enum):
    """Lifecycle of the module. Moves forward only, except that a failed load returns to
    UNINITIALIZED so a later caller can retry."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class ModuleLifecycle:
    """Owns the module handle and guarantees it is loaded at most once.

    Concurrent `initialize` calls share one load. Callers arriving while a load is in
    flight are queued and resumed in arrival order once it finishes, with the same
    outcome as the loading caller: the module on success, the same `LifecycleError`
    on failure. All callers must run on the same event loop.

    Parameters
    ----------
    loader : ModuleLoader
        Blocking factory for the module. It runs in a worker thread so the event loop
        stays responsive while the binary is compiled.
    """

    def __init__(self, loader: ModuleLoader) -> None:
        self._loader = loader
        self._state = ModuleState.UNINITIALIZED
        self._module: Optional[CompilerModule] = None
        self._waiters: Deque[asyncio.Future] = deque()
        self._load_attempts = 0
        self._load_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ModuleState:
        return self._state

    @property
    def load_attempts(self) -> int:
        """Number of times the loader has been invoked."""
        return self._load_attempts

    @property
    def module(self) -> Optional[CompilerModule]:
        """The loaded module, or None before the first successful initialization."""
        return self._module

    def require_module(self) -> CompilerModule:
        """Return the loaded module.

        Raises
        ------
        LifecycleError
            If the module is not ready.
        """
        if self._state is not ModuleState.READY or self._module is None:
            raise LifecycleError("Compiler not initialized. Call initialize() first.")
        return self._module

    async def initialize(self) -> CompilerModule:
        """Load the module if needed and wait until it is ready.

        The load itself runs as a separate task. Cancelling a caller only stops that
        caller from waiting; the load carries on and later callers join it instead of
        starting another one.

        Returns
        -------
        CompilerModule
            The ready module.

        Raises
        ------
        LifecycleError
            If loading failed. Every caller waiting on the same attempt receives the same
            error instance.
        """
        if self._state is ModuleState.READY:
            return self._module

        loop = asyncio.get_running_loop()
        waiter = loop.create_future()
        self._waiters.append(waiter)
        if self._state is ModuleState.UNINITIALIZED:
            self._state = ModuleState.INITIALIZING
            self._load_attempts += 1
            self._load_task = loop.create_task(self._load())
        return await waiter

    async def _load(self) -> None:
        logger.info("Initializing compiler module")
        try:
            module = await asyncio.to_thread(self._loader)
            _ensure_directory(module, INCLUDE_ROOT)
        except LifecycleError as e:
            logger.error(f"Failed to initialize compiler module: {e}")
            self._abort(e)
            return
        except Exception as e:
            logger.error(f"Failed to initialize compiler module: {e}")
            error = LifecycleError(f"Compiler initialization failed: {e}")
            error.__cause__ = e
            self._abort(error)
            return
        except BaseException:
            # Only reached when the event loop itself shuts down mid-load
            self._abort(LifecycleError("Compiler initialization was cancelled"))
            raise
        finally:
            self._load_task = None

        self._module = module
        self._state = ModuleState.READY
        logger.info("Compiler module ready")
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(module)

    def _abort(self, error: LifecycleError) -> None:
        self._state = ModuleState.UNINITIALIZED
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_exception(error)


def _ensure_directory(module: CompilerModule, path: str) -> None:
    """Create a directory in the module filesystem unless it already exists."""
    try:
        module.fs.mkdir(path)
    except FileExistsError:
        pass
