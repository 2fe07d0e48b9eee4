"""Conversion of structured options into the module's flag vector."""

from __future__ import annotations

from typing import List, Optional, Sequence

from wasmpawn.data import CompileOptions
from wasmpawn.module.paths import INCLUDE_ROOT


def marshal_options(
    options: Optional[CompileOptions] = None, include_root: str = INCLUDE_ROOT
) -> List[str]:
    """Build the flag vector for the given options.

    The order is fixed: optimization, debug, include path, then the caller's extra flags.
    The compiler treats a repeated flag as an override of the earlier one, so extras can
    override the generated flags. The source path is not included; the module appends it.

    Parameters
    ----------
    options : Optional[CompileOptions]
        The options. None behaves like default options.
    include_root : str
        Include directory inside the module filesystem.

    Returns
    -------
    List[str]
        The flag tokens.

    Examples
    --------
    >>> marshal_options(CompileOptions(optimization_level=2, debug_level=3,
    ...                                additional_flags=["-Z+"]))
    ['-O2', '-d3', '-i/include', '-Z+']
    """
    if options is None:
        options = CompileOptions()

    flags: List[str] = []
    if options.optimization_level is not None:
        flags.append(f"-O{options.optimization_level}")
    if options.debug_level is not None:
        flags.append(f"-d{options.debug_level}")
    flags.append(f"-i{include_root}")
    flags.extend(options.additional_flags)
    return flags


def join_flags(flags: Sequence[str]) -> str:
    """Join flag tokens into the single space-separated string the module expects."""
    return " ".join(flags)
