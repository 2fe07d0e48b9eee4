"""Include files staged into the module filesystem."""

from typing import Union

from pydantic import model_validator

from .utils import BaseModelWithDocstrings, NonEmptyString


class IncludeFile(BaseModelWithDocstrings):
    """A single include file addressed relative to the include root."""

    path: NonEmptyString
    """Slash-separated path relative to the include root (e.g. 'a_samp.inc' or
    'sampstdlib/a_samp.inc'). Every segment before the last denotes a directory."""
    content: Union[str, bytes]
    """The file content. Text is written as UTF-8."""

    @model_validator(mode="after")
    def _validate_include_path(self) -> "IncludeFile":
        """Reject absolute paths, empty segments and parent directory traversal.

        Raises
        ------
        ValueError
            If the path is not a clean relative path.
        """
        if self.path.startswith("/"):
            raise ValueError(f"Invalid include path (absolute path not allowed): {self.path}")
        parts = self.path.split("/")
        if any(part in ("", ".", "..") for part in parts):
            raise ValueError(f"Invalid include path: {self.path}")
        return self
