"""Derived views over the layout and the history log.

Every function here is pure and keeps no state between calls, so the
active-rentals view can be recomputed on every refresh tick.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta

from psrental._constants import EXPIRED
from psrental.models._base import ensure_aware
from psrental.models.derived import ActiveRental, HistoryField, OccupancyStats, SortDirection
from psrental.models.history import RentalHistoryRecord
from psrental.models.layout import Layout, Room

_HOUR = timedelta(hours=1)
_MINUTE = timedelta(minutes=1)


def _rooms(layout: Layout | Iterable[Room]) -> Iterable[Room]:
    if isinstance(layout, Layout):
        return layout.rooms
    return layout


def occupancy_stats(layout: Layout | Iterable[Room]) -> OccupancyStats:
    total = 0
    rented = 0
    for room in _rooms(layout):
        total += len(room.units)
        rented += sum(1 for unit in room.units if unit.is_rented)
    rate = 100.0 * rented / total if total else 0.0
    return OccupancyStats(
        total_units=total,
        rented_units=rented,
        available_units=total - rented,
        occupancy_rate_percent=rate,
    )


class ActiveRentals:
    """Lazy, restartable sequence of :class:`ActiveRental`.

    Each iteration walks the rooms again in room-then-unit order.
    """

    def __init__(self, rooms: Iterable[Room]) -> None:
        self._rooms = tuple(rooms)

    def __iter__(self) -> Iterator[ActiveRental]:
        for room in self._rooms:
            for unit in room.units:
                if not unit.is_rented:
                    continue
                yield ActiveRental(
                    room_id=room.id,
                    unit_id=unit.id,
                    customer=unit.customer,
                    start_time=unit.start_time,
                    end_time=unit.end_time,
                )

    def __len__(self) -> int:
        return sum(1 for room in self._rooms for unit in room.units if unit.is_rented)

    def __bool__(self) -> bool:
        return any(unit.is_rented for room in self._rooms for unit in room.units)


def active_rentals(layout: Layout | Iterable[Room]) -> ActiveRentals:
    return ActiveRentals(_rooms(layout))


def is_expired(end_time: datetime, now: datetime) -> bool:
    return ensure_aware(now) >= ensure_aware(end_time)


def time_remaining(end_time: datetime, now: datetime) -> str:
    """Return ``"Expired"`` once *now* reaches *end_time*, else ``"{h}h {m}m"``.

    Partial minutes are floored, so 59 seconds left reads ``"0h 0m"``.
    """
    if is_expired(end_time, now):
        return EXPIRED
    remaining = ensure_aware(end_time) - ensure_aware(now)
    hours = remaining // _HOUR
    minutes = (remaining % _HOUR) // _MINUTE
    return f"{hours}h {minutes}m"


def sort_history(
    records: Iterable[RentalHistoryRecord],
    field: str | HistoryField,
    direction: str | SortDirection = SortDirection.ASC,
) -> list[RentalHistoryRecord]:
    """Stable sort of history records by *field*.

    Records with equal keys keep their input order in both directions.
    """
    selected = HistoryField.parse(field)
    order = SortDirection.parse(direction)
    attribute = selected.attribute
    return sorted(
        records,
        key=lambda record: getattr(record, attribute),
        reverse=order is SortDirection.DESC,
    )
