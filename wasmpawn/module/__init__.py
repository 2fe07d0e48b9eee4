"""The opaque compiler module and its private filesystem.

- CompilerModule / ModuleFS: the abstract boundary
- HostDirFS: a host directory mounted as the module's filesystem root
- WasiCompilerModule: the real module hosted by wasmtime
"""

from .base import CompilerModule, ModuleFS
from .hostfs import HostDirFS
from .wasi import WasiCompilerModule

__all__ = ["CompilerModule", "HostDirFS", "ModuleFS", "WasiCompilerModule"]
