"""Validator run options."""

from pydantic import BaseModel, Field


class ValidatorOptions(BaseModel):
    """Options for a validation run.

    max_workers > 1 validates interactions concurrently; the report order
    is the same either way.
    """

    max_workers: int = Field(default=1, ge=1)
