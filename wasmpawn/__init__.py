from wasmpawn.compile import (
    CompilerConfig,
    ModuleState,
    PawnCompiler,
    get_compiler,
    parse_output,
    set_compiler,
)
from wasmpawn.data import CompilationResult, CompileOptions, IncludeFile
from wasmpawn.errors import (
    FilesystemError,
    InvocationError,
    LifecycleError,
    PartialFetchError,
    WasmPawnError,
)
from wasmpawn.logging import configure_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "PawnCompiler",
    "CompilerConfig",
    "ModuleState",
    "get_compiler",
    "set_compiler",
    "parse_output",
    # Data types
    "CompileOptions",
    "CompilationResult",
    "IncludeFile",
    # Errors
    "WasmPawnError",
    "LifecycleError",
    "FilesystemError",
    "InvocationError",
    "PartialFetchError",
    "configure_logging",
    "get_logger",
]
