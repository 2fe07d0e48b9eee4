"""Abstract boundary between the host and the opaque compiler module."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union


class ModuleFS(ABC):
    """The module's private filesystem, addressed with absolute guest paths.

    Only the handful of operations needed to stage flat files are exposed. Failures
    surface as `OSError`; `mkdir` on an existing path raises `FileExistsError`.
    """

    @abstractmethod
    def mkdir(self, path: str) -> None:
        """Create a single directory. The parent must exist."""
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether a file or directory exists at the path."""
        ...

    @abstractmethod
    def write_file(self, path: str, content: Union[str, bytes]) -> None:
        """Write the content to the path. Text is encoded as UTF-8."""
        ...

    @abstractmethod
    def read_file(self, path: str) -> bytes:
        """Read the whole file at the path."""
        ...

    @abstractmethod
    def unlink(self, path: str) -> None:
        """Remove the file at the path. Raises `FileNotFoundError` if it is absent."""
        ...


class CompilerModule(ABC):
    """A loaded instance of the opaque compiler module.

    The module owns its filesystem and its memory. The host only copies bytes in and
    out: `compile_source` returns a handle to a module-owned result buffer which must be
    read with `read_result` and then given back with `release_result` exactly once.

    Implementations raise `InvocationError` when the boundary call itself fails.
    """

    @property
    @abstractmethod
    def fs(self) -> ModuleFS:
        """The module's private filesystem."""
        ...

    @abstractmethod
    def compile_source(self, source_code: str, options: str) -> int:
        """Cross into the module and run the compiler.

        Parameters
        ----------
        source_code : str
            The source text. The module writes it to the reserved input path.
        options : str
            Space-joined flags, spliced into the argument vector between the output
            flag and the input path.

        Returns
        -------
        int
            Handle of the module-owned result message.
        """
        ...

    @abstractmethod
    def read_result(self, handle: int) -> str:
        """Copy the result message behind the handle into a host string."""
        ...

    @abstractmethod
    def release_result(self, handle: int) -> None:
        """Return the result buffer to the module."""
        ...

    def drain_console(self) -> str:
        """Return text the module printed since the last call. Empty if not captured."""
        return ""
