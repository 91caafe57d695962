"""Base model for persisted rental documents.

Every document model inherits from :class:`RentalBaseModel` which
provides:

* ``alias_generator=to_camel`` so the camelCase document keys
  (``isRented``, ``startTime``, ``actualEndTime``) map to snake_case
  fields.
* Frozen instances: transitions build new values with
  :meth:`~pydantic.BaseModel.model_copy` instead of mutating.
* :meth:`RentalBaseModel.to_document` which omits unset optional
  fields, so a free unit is stored as ``{"id": 1, "isRented": false}``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


Instant = Annotated[datetime, AfterValidator(ensure_aware)]
"""Timezone-aware datetime; naive input is assumed to be UTC."""


class RentalBaseModel(BaseModel):
    """Base for persisted rental documents."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict using the camelCase document keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
