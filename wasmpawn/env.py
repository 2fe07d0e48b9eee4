"""Environment variable accessors for wasmpawn."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def get_wasmpawn_module_path() -> Optional[Path]:
    """Get the path of the compiler module binary from WASMPAWN_MODULE_PATH.

    Returns
    -------
    Optional[Path]
        The configured path, or None if the variable is not set.
    """
    value = os.environ.get("WASMPAWN_MODULE_PATH")
    if not value:
        return None
    return Path(value).expanduser()


def get_wasmpawn_cache_path() -> Path:
    """Get the cache directory from WASMPAWN_CACHE_PATH.

    Returns
    -------
    Path
        The cache directory. Default is `~/.cache/wasmpawn`.
    """
    value = os.environ.get("WASMPAWN_CACHE_PATH")
    if value:
        return Path(value).expanduser()
    return Path.home() / ".cache" / "wasmpawn"


def get_wasmpawn_log_level() -> Optional[str]:
    """Get the log level name from WASMPAWN_LOG_LEVEL, upper-cased."""
    value = os.environ.get("WASMPAWN_LOG_LEVEL")
    return value.upper() if value else None
