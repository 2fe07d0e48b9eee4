"""Exception hierarchy for the compiler boundary.

Only infrastructural failures are raised. A source file that does not compile
is reported through a normal `CompilationResult` with ``success=False``.
"""

from __future__ import annotations

from typing import Dict, Optional


class WasmPawnError(RuntimeError):
    """Base class for all errors raised by wasmpawn."""


class LifecycleError(WasmPawnError):
    """Raised when the compiler module failed to load or is not initialized yet."""


class FilesystemError(WasmPawnError):
    """Raised when an operation on the module filesystem fails for a reason other than
    the target already existing."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class InvocationError(WasmPawnError):
    """Raised by a module when the boundary call itself fails.

    The invocation bridge converts this into a failed `CompilationResult`; it never
    reaches callers of `compile`.
    """


class PartialFetchError(WasmPawnError):
    """Raised when one or more remote include fetches failed.

    Includes that were fetched successfully are already staged when this is raised.
    """

    def __init__(self, errors: Dict[str, BaseException]) -> None:
        self.errors = dict(errors)
        self.failures = len(self.errors)
        super().__init__(f"Failed to load {self.failures} include file(s): {sorted(self.errors)}")
