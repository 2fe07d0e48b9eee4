"""Data layer with strongly-typed models for options, results and include files."""

from .include import IncludeFile
from .options import CompileOptions
from .result import CompilationResult
from .utils import BaseModelWithDocstrings, FlagToken, NonEmptyString

__all__ = [
    "BaseModelWithDocstrings",
    "CompilationResult",
    "CompileOptions",
    "FlagToken",
    "IncludeFile",
    "NonEmptyString",
]
