"""Retrieval of the compiled artifact and removal of transient files."""

from __future__ import annotations

import threading
from typing import List, Optional

from wasmpawn.errors import FilesystemError
from wasmpawn.logging import get_logger
from wasmpawn.module.paths import OUTPUT_PATH, TRANSIENT_PATHS

from .lifecycle import ModuleLifecycle, ModuleState

logger = get_logger("Artifacts")


class ArtifactManager:
    """Reads the artifact and removes the transient input, output and log files.

    Parameters
    ----------
    lifecycle : ModuleLifecycle
        Provides the module.
    lock : threading.Lock
        The lock held by compilations, so a read never observes a half-written artifact.
    """

    def __init__(self, lifecycle: ModuleLifecycle, lock: threading.Lock) -> None:
        self._lifecycle = lifecycle
        self._lock = lock

    def get_artifact(self) -> Optional[bytes]:
        """Return the compiled artifact.

        Returns
        -------
        Optional[bytes]
            The artifact bytes, or None if no successful compile has produced one since
            the last cleanup.

        Raises
        ------
        LifecycleError
            If the module is not initialized.
        FilesystemError
            If the artifact exists but cannot be read.
        """
        fs = self._lifecycle.require_module().fs
        with self._lock:
            if not fs.exists(OUTPUT_PATH):
                return None
            try:
                return fs.read_file(OUTPUT_PATH)
            except FileNotFoundError:
                return None
            except OSError as e:
                raise FilesystemError(f"Failed to read {OUTPUT_PATH}: {e}", OUTPUT_PATH) from e

    def cleanup(self) -> List[str]:
        """Remove the transient files that exist.

        Each file is handled independently. A missing file is skipped. Any other failure
        is logged and does not stop the remaining removals; after all files were tried,
        the failures are raised together. Before initialization there is nothing to
        remove.

        Returns
        -------
        List[str]
            Paths that were removed.

        Raises
        ------
        FilesystemError
            If at least one existing file could not be removed.
        """
        if self._lifecycle.state is not ModuleState.READY:
            return []
        fs = self._lifecycle.require_module().fs

        removed: List[str] = []
        failures: List[str] = []
        with self._lock:
            for path in TRANSIENT_PATHS:
                try:
                    if not fs.exists(path):
                        continue
                    fs.unlink(path)
                except FileNotFoundError:
                    continue
                except OSError as e:
                    logger.error(f"Cleanup error for {path}: {e}")
                    failures.append(f"{path}: {e}")
                    continue
                removed.append(path)

        if failures:
            raise FilesystemError("Cleanup failed for " + "; ".join(failures))
        return removed
