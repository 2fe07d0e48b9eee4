"""Staging of include files inside the module filesystem."""

from __future__ import annotations

import asyncio
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

import aiohttp

from wasmpawn.data import IncludeFile
from wasmpawn.errors import FilesystemError, PartialFetchError
from wasmpawn.logging import get_logger
from wasmpawn.module import ModuleFS
from wasmpawn.module.paths import INCLUDE_ROOT

from .lifecycle import ModuleLifecycle

logger = get_logger("IncludeStore")

IncludeLike = Union[IncludeFile, Tuple[str, Union[str, bytes]], Mapping[str, Union[str, bytes]]]
"""Accepted forms for bulk staging: an IncludeFile, a (path, content) pair, or a mapping
with a 'path' (or 'filename') key and a 'content' key."""


def _to_include_file(item: IncludeLike) -> IncludeFile:
    if isinstance(item, IncludeFile):
        return item
    if isinstance(item, Mapping):
        path = item.get("path", item.get("filename"))
        return IncludeFile(path=path, content=item["content"])
    path, content = item
    return IncludeFile(path=path, content=content)


class IncludeStore:
    """Writes include files below the include root of the module filesystem.

    Include mutations are not synchronized with an in-flight compile. Which version of a
    file a running compile sees when both overlap is undefined; callers must not stage
    includes while compiling.

    Parameters
    ----------
    lifecycle : ModuleLifecycle
        Provides the module whose filesystem is written.
    include_root : str
        Absolute include directory inside the module filesystem.
    """

    def __init__(self, lifecycle: ModuleLifecycle, include_root: str = INCLUDE_ROOT) -> None:
        self._lifecycle = lifecycle
        self._include_root = include_root

    @property
    def include_root(self) -> str:
        return self._include_root

    def add_include(self, path: str, content: Union[str, bytes]) -> str:
        """Stage a single include file, replacing any previous file at the same path.

        Parameters
        ----------
        path : str
            Slash-separated path relative to the include root, e.g. 'sampstdlib/a_samp.inc'.
        content : Union[str, bytes]
            The file content.

        Returns
        -------
        str
            The absolute path of the staged file inside the module filesystem.

        Raises
        ------
        LifecycleError
            If the module is not initialized.
        ValueError
            If the path is not a clean relative path.
        FilesystemError
            If a directory or the file cannot be written.
        """
        include = IncludeFile(path=path, content=content)
        fs = self._lifecycle.require_module().fs

        parts = include.path.split("/")
        current = self._include_root
        for part in parts[:-1]:
            current = f"{current}/{part}"
            _make_directory(fs, current)

        target = f"{self._include_root}/{include.path}"
        try:
            # Remove first so a shorter file never keeps trailing bytes of a longer one
            if fs.exists(target):
                fs.unlink(target)
            fs.write_file(target, include.content)
        except OSError as e:
            logger.error(f"Failed to add include file {include.path}: {e}")
            raise FilesystemError(f"Failed to write {target}: {e}", target) from e
        logger.debug(f"Staged include {target}")
        return target

    def add_includes(self, files: Iterable[IncludeLike]) -> List[str]:
        """Stage several include files in order.

        A failure aborts the remaining entries. Entries staged before the failure stay in
        place; nothing is rolled back.

        Returns
        -------
        List[str]
            The staged absolute paths, in input order.
        """
        staged: List[str] = []
        for item in files:
            include = _to_include_file(item)
            staged.append(self.add_include(include.path, include.content))
        return staged

    async def load_includes(
        self,
        base_url: str,
        filenames: Sequence[str],
        *,
        timeout: float = 30.0,
        max_concurrency: int = 8,
        raise_on_failure: bool = False,
    ) -> int:
        """Fetch include files over HTTP(S) and stage each one as it arrives.

        Fetches run concurrently and fail independently: a failed file is logged and
        counted, the others are still staged.

        Parameters
        ----------
        base_url : str
            URL of the directory hosting the files. Each file is fetched from
            `<base_url>/<filename>` and staged under the same relative path.
        filenames : Sequence[str]
            Relative paths of the files to fetch.
        timeout : float
            Total timeout in seconds for each request.
        max_concurrency : int
            Maximum number of requests in flight.
        raise_on_failure : bool
            Raise `PartialFetchError` instead of returning a non-zero count.

        Returns
        -------
        int
            Number of files that could not be loaded.

        Raises
        ------
        LifecycleError
            If the module is not initialized.
        PartialFetchError
            If `raise_on_failure` is set and at least one file failed.
        """
        self._lifecycle.require_module()
        semaphore = asyncio.Semaphore(max_concurrency)
        base = base_url.rstrip("/")

        async def fetch_one(session: aiohttp.ClientSession, filename: str) -> None:
            async with semaphore:
                try:
                    async with session.get(f"{base}/{filename}") as response:
                        response.raise_for_status()
                        content = await response.text()
                    self.add_include(filename, content)
                except Exception as e:
                    logger.warning(f"Could not load include {filename}: {e}")
                    raise

        client_timeout = aiohttp.ClientTimeout(total=timeout)
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            results = await asyncio.gather(
                *(fetch_one(session, name) for name in filenames), return_exceptions=True
            )

        errors: Dict[str, BaseException] = {
            name: result
            for name, result in zip(filenames, results)
            if isinstance(result, BaseException)
        }
        if errors:
            logger.warning(f"Failed to load {len(errors)} include file(s)")
            if raise_on_failure:
                raise PartialFetchError(errors)
        return len(errors)


def _make_directory(fs: ModuleFS, path: str) -> None:
    """Create a directory, treating an existing one as success."""
    try:
        fs.mkdir(path)
    except FileExistsError:
        return
    except OSError as e:
        if fs.exists(path):
            return
        raise FilesystemError(f"Failed to create directory {path}: {e}", path) from e
