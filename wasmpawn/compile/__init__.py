"""Compilation pipeline around the opaque compiler module.

- ModuleLifecycle: loads the module exactly once
- IncludeStore: stages include files in the module filesystem
- marshal_options: turns CompileOptions into compiler flags
- InvocationBridge: crosses the module boundary, one compilation at a time
- parse_output: classifies compiler output into a CompilationResult
- ArtifactManager: reads the artifact and removes transient files
- PawnCompiler: facade combining all of the above

The typical workflow is:
1. compiler = PawnCompiler(); await compiler.initialize()
2. compiler.add_includes([...])
3. result = compiler.compile(source, CompileOptions(optimization_level=2))
4. artifact = compiler.get_artifact(); compiler.cleanup()
"""

from .artifacts import ArtifactManager
from .bridge import InvocationBridge, module_result
from .compiler import PawnCompiler, get_compiler, set_compiler, wasi_module_loader
from .config import CompilerConfig
from .diagnostics import failure_result, parse_output
from .includes import IncludeStore
from .lifecycle import ModuleLifecycle, ModuleState
from .marshal import join_flags, marshal_options

__all__ = [
    "ArtifactManager",
    "CompilerConfig",
    "IncludeStore",
    "InvocationBridge",
    "ModuleLifecycle",
    "ModuleState",
    "PawnCompiler",
    "failure_result",
    "get_compiler",
    "join_flags",
    "marshal_options",
    "module_result",
    "parse_output",
    "set_compiler",
    "wasi_module_loader",
]
