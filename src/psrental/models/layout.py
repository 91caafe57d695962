"""Room and unit layout models.

The layout is the single mutable source of truth for which units are
currently rented.  It is modelled as immutable values: a transition
produces a new :class:`Layout` through :meth:`Layout.replace_unit`.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import Field, model_validator

from psrental.exceptions import RentalNotFoundError
from psrental.models._base import Instant, RentalBaseModel


class Unit(RentalBaseModel):
    """A single rentable console unit."""

    id: int = Field(gt=0)
    """Unit number, unique within its room."""

    is_rented: bool = False

    customer: str | None = None
    """Customer name while rented."""

    start_time: Instant | None = None
    """Instant the rental started."""

    end_time: Instant | None = None
    """Scheduled end of the rental."""

    @model_validator(mode="after")
    def _rental_fields_all_or_nothing(self) -> Unit:
        present = [value is not None for value in (self.customer, self.start_time, self.end_time)]
        if self.is_rented and not all(present):
            raise ValueError(f"rented unit {self.id} must have customer, startTime and endTime")
        if not self.is_rented and any(present):
            raise ValueError(f"free unit {self.id} must not carry customer, startTime or endTime")
        return self

    @classmethod
    def free(cls, unit_id: int) -> Unit:
        return cls(id=unit_id, is_rented=False)


class Room(RentalBaseModel):
    """A fixed grouping of units."""

    id: int = Field(gt=0)
    units: tuple[Unit, ...] = ()

    @model_validator(mode="after")
    def _unique_unit_ids(self) -> Room:
        ids = [unit.id for unit in self.units]
        if len(ids) != len(set(ids)):
            raise ValueError(f"room {self.id} has duplicate unit ids")
        return self

    def find_unit(self, unit_id: int) -> Unit | None:
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None


class Layout(RentalBaseModel):
    """Ordered rooms with lookup-by-id accessors.

    Persisted as a bare JSON array of rooms under ``psRooms``; see
    :mod:`psrental.store.documents`.
    """

    rooms: tuple[Room, ...] = ()

    @model_validator(mode="after")
    def _unique_room_ids(self) -> Layout:
        ids = [room.id for room in self.rooms]
        if len(ids) != len(set(ids)):
            raise ValueError("layout has duplicate room ids")
        return self

    def room(self, room_id: int) -> Room:
        """Return the room with *room_id*.

        Raises :class:`RentalNotFoundError` when there is none.
        """
        for room in self.rooms:
            if room.id == room_id:
                return room
        raise RentalNotFoundError(f"room {room_id} does not exist", room_id=room_id)

    def unit(self, room_id: int, unit_id: int) -> Unit:
        """Return unit *unit_id* of room *room_id*.

        Raises :class:`RentalNotFoundError` when either does not resolve.
        """
        unit = self.room(room_id).find_unit(unit_id)
        if unit is None:
            raise RentalNotFoundError(
                f"unit {unit_id} does not exist in room {room_id}",
                room_id=room_id,
                unit_id=unit_id,
            )
        return unit

    def replace_unit(self, room_id: int, unit: Unit) -> Layout:
        """Return a new layout with *unit* swapped in for the unit with the same id."""
        self.unit(room_id, unit.id)
        rooms = tuple(
            room
            if room.id != room_id
            else Room(id=room.id, units=tuple(unit if u.id == unit.id else u for u in room.units))
            for room in self.rooms
        )
        return Layout(rooms=rooms)

    def iter_units(self) -> Iterator[tuple[Room, Unit]]:
        """Yield ``(room, unit)`` pairs in room-then-unit order."""
        for room in self.rooms:
            for unit in room.units:
                yield room, unit
