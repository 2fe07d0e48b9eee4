from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints

NonEmptyString = Annotated[str, StringConstraints(min_length=1)]
"""Type alias for non-empty strings with minimum length of 1."""

FlagToken = Annotated[str, StringConstraints(pattern=r"^\S+$")]
"""A single compiler flag. The module splits the joined option string on spaces, so a
token must be non-empty and free of whitespace."""


class BaseModelWithDocstrings(BaseModel):
    """Base model whose attribute docstrings end up in the JSON schema."""

    model_config = ConfigDict(use_attribute_docstrings=True)
