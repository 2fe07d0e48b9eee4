"""Classification of the compiler's free-text output.

Classification is substring based. A line containing both "error" and "warning" is
reported in both lists, and prose that happens to contain "error" and a colon is
reported as an error. Callers may rely on this, so it is kept as is.
"""

from __future__ import annotations

import re
from typing import List, Optional

from wasmpawn.data import CompilationResult
from wasmpawn.module.paths import SUCCESS_MARKER

_ARTIFACT_SIZE_PATTERN = re.compile(r"AMX file size: (\d+) bytes")


def parse_output(output: str) -> CompilationResult:
    """Turn raw compiler output into a structured result.

    Parameters
    ----------
    output : str
        The raw output text.

    Returns
    -------
    CompilationResult
        `success` is True only if some line contains the success marker. `errors` and
        `warnings` hold the stripped matching lines in output order.
    """
    errors: List[str] = []
    warnings: List[str] = []
    success = False
    artifact_size: Optional[int] = None

    for line in output.split("\n"):
        if SUCCESS_MARKER in line:
            success = True
            match = _ARTIFACT_SIZE_PATTERN.search(line)
            if match:
                artifact_size = int(match.group(1))

        if "error" in line and ":" in line:
            errors.append(line.strip())

        if "warning" in line and ":" in line:
            warnings.append(line.strip())

    return CompilationResult(
        success=success,
        output=output,
        errors=errors,
        warnings=warnings,
        artifact_size=artifact_size,
    )


def failure_result(error: BaseException) -> CompilationResult:
    """Result reported when the boundary call itself failed."""
    message = str(error) or type(error).__name__
    return CompilationResult(success=False, output=message, errors=[message], warnings=[])
