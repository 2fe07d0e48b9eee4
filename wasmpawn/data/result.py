"""Structured result of one compilation."""

from typing import List, Optional

from pydantic import Field

from .utils import BaseModelWithDocstrings


class CompilationResult(BaseModelWithDocstrings):
    """Outcome of a compile call, derived entirely from the raw output text.

    A failed compilation is a normal value of this type, not an exception.
    """

    success: bool
    """True only if the output contained the success marker."""
    output: str
    """The raw text the result was derived from."""
    errors: List[str] = Field(default_factory=list)
    """Lines classified as errors, stripped, in output order."""
    warnings: List[str] = Field(default_factory=list)
    """Lines classified as warnings, stripped, in output order."""
    artifact_size: Optional[int] = Field(default=None, ge=0)
    """Size in bytes of the produced artifact, when reported by the module."""
