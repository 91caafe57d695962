"""Value types produced by the query layer."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict

from psrental.exceptions import RentalValidationError
from psrental.models._base import Instant, RentalBaseModel


class OccupancyStats(RentalBaseModel):
    """Aggregate unit counts across all rooms."""

    total_units: int
    rented_units: int
    available_units: int
    occupancy_rate_percent: float


class ActiveRental(RentalBaseModel):
    """Flattened view of a rented unit."""

    room_id: int
    unit_id: int
    customer: str
    start_time: Instant
    end_time: Instant


class SortDirection(enum.StrEnum):
    ASC = "asc"
    DESC = "desc"

    def reversed(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC

    @classmethod
    def parse(cls, value: str | SortDirection) -> SortDirection:
        normalized = str(value).strip().lower()
        aliases = {"ascending": "asc", "descending": "desc"}
        try:
            return cls(aliases.get(normalized, normalized))
        except ValueError as exc:
            raise RentalValidationError(f"unknown sort direction {value!r}") from exc


class HistoryField(enum.StrEnum):
    """Sortable history columns, keyed by their document names."""

    ROOM_ID = "roomId"
    UNIT_ID = "unitId"
    CUSTOMER = "customer"
    START_TIME = "startTime"
    END_TIME = "endTime"
    ACTUAL_END_TIME = "actualEndTime"
    STATUS = "status"

    @property
    def attribute(self) -> str:
        """Matching :class:`~psrental.models.history.RentalHistoryRecord` attribute."""
        return _ATTRIBUTES[self]

    @classmethod
    def parse(cls, value: str | HistoryField) -> HistoryField:
        """Accept the document name (``startTime``) or attribute name (``start_time``)."""
        if isinstance(value, HistoryField):
            return value
        name = str(value).strip()
        for member in cls:
            if name in (member.value, member.attribute):
                return member
        raise RentalValidationError(f"unknown history field {value!r}")


_ATTRIBUTES: dict[HistoryField, str] = {
    HistoryField.ROOM_ID: "room_id",
    HistoryField.UNIT_ID: "unit_id",
    HistoryField.CUSTOMER: "customer",
    HistoryField.START_TIME: "start_time",
    HistoryField.END_TIME: "end_time",
    HistoryField.ACTUAL_END_TIME: "actual_end_time",
    HistoryField.STATUS: "status",
}


class HistorySort(BaseModel):
    """Current sort of the history view.

    Defaults to newest first by start time.
    """

    model_config = ConfigDict(frozen=True)

    field: HistoryField = HistoryField.START_TIME
    direction: SortDirection = SortDirection.DESC

    def toggle(self, field: str | HistoryField) -> HistorySort:
        """Select *field*: the current field flips direction, a new one sorts ascending."""
        selected = HistoryField.parse(field)
        if selected is self.field:
            return HistorySort(field=selected, direction=self.direction.reversed())
        return HistorySort(field=selected, direction=SortDirection.ASC)
