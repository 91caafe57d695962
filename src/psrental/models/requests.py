"""Pydantic request models for lifecycle entrypoints.

These models provide a consistent "validate → normalize → execute" flow.
They are used by :mod:`psrental.lifecycle` and by input prompts.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StartRequest(BaseModel):
    """Customer name and duration collected before starting a rental."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    customer: str
    duration_hours: float = Field(gt=0, allow_inf_nan=False)

    @field_validator("customer")
    @classmethod
    def _customer_non_empty(cls, value: str) -> str:
        customer = value.strip()
        if not customer:
            raise ValueError("customer must be non-empty")
        return customer

    @field_validator("duration_hours", mode="before")
    @classmethod
    def _duration_not_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("duration_hours must be a number")
        return value
