"""Configuration for the compiler facade."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class CompilerConfig(BaseModel):
    """Settings used when loading the module and fetching remote includes."""

    module_path: Optional[Path] = None
    """Path to `pawnc.wasm`. Falls back to WASMPAWN_MODULE_PATH when None."""
    fs_root: Optional[Path] = None
    """Host directory backing the module filesystem. A fresh temporary directory below
    WASMPAWN_CACHE_PATH is used when None."""
    capture_console: bool = True
    """Capture what the compiler prints and include it in the parsed output."""
    fetch_timeout: float = Field(default=30.0, gt=0)
    """Total timeout in seconds for each remote include request."""
    max_concurrent_fetches: int = Field(default=8, ge=1)
    """Maximum number of remote include requests in flight."""
