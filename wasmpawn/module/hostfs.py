"""Module filesystem backed by a host directory mounted as the guest root."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Union

from .base import ModuleFS


class HostDirFS(ModuleFS):
    """Exposes a host directory as the guest filesystem root.

    Guest paths are absolute POSIX paths. They are resolved below `root` and never
    allowed to escape it.

    Parameters
    ----------
    root : Path
        Host directory that the module sees as `/`.
    """

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def host_path(self, path: str) -> Path:
        """Translate a guest path to the backing host path.

        Raises
        ------
        ValueError
            If the path is relative or contains parent directory traversal.
        """
        guest = PurePosixPath(path)
        if not guest.is_absolute():
            raise ValueError(f"Guest path must be absolute: {path}")
        if ".." in guest.parts:
            raise ValueError(f"Path traversal detected: {path}")
        return self._root.joinpath(*guest.parts[1:])

    def mkdir(self, path: str) -> None:
        self.host_path(path).mkdir()

    def exists(self, path: str) -> bool:
        return self.host_path(path).exists()

    def write_file(self, path: str, content: Union[str, bytes]) -> None:
        data = content.encode("utf-8") if isinstance(content, str) else content
        self.host_path(path).write_bytes(data)

    def read_file(self, path: str) -> bytes:
        return self.host_path(path).read_bytes()

    def unlink(self, path: str) -> None:
        self.host_path(path).unlink()
