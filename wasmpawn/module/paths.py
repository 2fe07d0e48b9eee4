"""Reserved locations inside the module filesystem and the fixed argv layout."""

PROGRAM_NAME = "pawncc"
"""argv[0] handed to the opaque compiler."""

INPUT_PATH = "/input.pwn"
"""Where the module writes the source text before compiling."""

OUTPUT_PATH = "/output.amx"
"""Where the compiler leaves the artifact on success."""

LOG_PATH = "/output.txt"
"""Optional compiler log."""

INCLUDE_ROOT = "/include"
"""Root directory for all caller-supplied includes."""

SUCCESS_MARKER = "Compilation successful"
"""Literal the module puts in its result message when the compiler returned 0."""

TRANSIENT_PATHS = (INPUT_PATH, OUTPUT_PATH, LOG_PATH)
"""Files removed by cleanup, in removal order."""
