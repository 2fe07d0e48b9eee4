"""Structured compiler options."""

from typing import List, Optional

from pydantic import ConfigDict, Field

from .utils import BaseModelWithDocstrings, FlagToken


class CompileOptions(BaseModelWithDocstrings):
    """Options controlling a single compilation.

    Fields can also be given by their camelCase aliases, e.g.
    ``CompileOptions(optimizationLevel=2)``.
    """

    model_config = ConfigDict(use_attribute_docstrings=True, populate_by_name=True, frozen=True)

    optimization_level: Optional[int] = Field(
        default=None, ge=0, le=3, alias="optimizationLevel"
    )
    """Optimization level (0-3). Omitted from the argument vector when None."""
    debug_level: Optional[int] = Field(default=None, ge=0, le=3, alias="debugLevel")
    """Debug information level (0-3). Omitted from the argument vector when None."""
    additional_flags: List[FlagToken] = Field(default_factory=list, alias="additionalFlags")
    """Raw flag tokens appended verbatim after the include-path flag, in order."""
