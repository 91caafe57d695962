"""Rental lifecycle engine.

Pure state transitions: every function takes the current :class:`Layout`
and returns a new one.  Inputs are validated completely before the new
layout is built, so a raised error never leaves partial state behind.
Persistence is the caller's job (see :class:`psrental.desk.RentalDesk`).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

from pydantic import ValidationError

from psrental._constants import DEFAULT_ROOM_COUNT, DEFAULT_UNITS_PER_ROOM
from psrental.exceptions import RentalConflictError, RentalValidationError
from psrental.models._base import ensure_aware
from psrental.models.history import RentalHistoryRecord, RentalStatus
from psrental.models.layout import Layout, Room, Unit
from psrental.models.requests import StartRequest

_logger = logging.getLogger(__name__)


def initialize_layout(
    room_count: int = DEFAULT_ROOM_COUNT,
    units_per_room: int = DEFAULT_UNITS_PER_ROOM,
) -> Layout:
    """Build the default layout: rooms ``1..room_count`` of free units ``1..units_per_room``."""
    if room_count < 0 or units_per_room < 0:
        raise RentalValidationError(
            f"room_count and units_per_room must be >= 0, got {room_count} and {units_per_room}"
        )
    return Layout(
        rooms=tuple(
            Room(id=room_id, units=tuple(Unit.free(unit_id) for unit_id in range(1, units_per_room + 1)))
            for room_id in range(1, room_count + 1)
        )
    )


def parse_start_request(customer: Any, duration_hours: Any) -> StartRequest:
    """Validate and normalise start-rental input.

    Raises :class:`RentalValidationError` for an empty customer or a
    duration that is not a positive finite number.
    """
    try:
        return StartRequest(customer=customer, duration_hours=duration_hours)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "input"
        raise RentalValidationError(f"{field}: {first['msg']}") from exc


def rental_status(scheduled_end: datetime, actual_end: datetime) -> RentalStatus:
    """Classify how a rental ended by comparing instants."""
    if ensure_aware(actual_end) < ensure_aware(scheduled_end):
        return RentalStatus.EARLY_TERMINATION
    return RentalStatus.COMPLETED


def require_free(layout: Layout, room_id: int, unit_id: int) -> Unit:
    """Look up a unit that can be rented; :class:`RentalConflictError` if it is taken."""
    unit = layout.unit(room_id, unit_id)
    if unit.is_rented:
        raise RentalConflictError(
            f"unit {unit_id} in room {room_id} is already rented",
            room_id=room_id,
            unit_id=unit_id,
        )
    return unit


def require_rented(layout: Layout, room_id: int, unit_id: int) -> Unit:
    unit = layout.unit(room_id, unit_id)
    if not unit.is_rented:
        raise RentalConflictError(
            f"unit {unit_id} in room {room_id} is not rented",
            room_id=room_id,
            unit_id=unit_id,
        )
    return unit


def start_rental(
    layout: Layout,
    room_id: int,
    unit_id: int,
    customer: Any,
    duration_hours: Any,
    *,
    now: datetime,
) -> tuple[Layout, Unit]:
    """Rent a free unit to *customer* for *duration_hours* starting at *now*.

    Returns the new layout and the updated unit.  A duration whose end
    time falls outside the representable date range is a validation error.
    """
    request = parse_start_request(customer, duration_hours)
    unit = require_free(layout, room_id, unit_id)

    start = ensure_aware(now)
    try:
        end = start + timedelta(hours=request.duration_hours)
    except OverflowError as exc:
        raise RentalValidationError(f"duration_hours: {request.duration_hours} is out of range") from exc
    rented = Unit(
        id=unit.id,
        is_rented=True,
        customer=request.customer,
        start_time=start,
        end_time=end,
    )
    _logger.debug(
        "Rental started room=%s unit=%s duration_hours=%s end=%s",
        room_id,
        unit_id,
        request.duration_hours,
        rented.end_time,
    )
    return layout.replace_unit(room_id, rented), rented


def end_rental(
    layout: Layout,
    room_id: int,
    unit_id: int,
    *,
    now: datetime,
) -> tuple[Layout, RentalHistoryRecord]:
    """End the rental on a unit at *now*.

    Returns the new layout (unit reset to free) and the history record
    to append.  Both must be persisted together.
    """
    unit = require_rented(layout, room_id, unit_id)
    # Guaranteed by the Unit model invariant.
    assert unit.customer is not None and unit.start_time is not None and unit.end_time is not None  # noqa: S101

    actual_end = ensure_aware(now)
    record = RentalHistoryRecord(
        room_id=room_id,
        unit_id=unit_id,
        customer=unit.customer,
        start_time=unit.start_time,
        end_time=unit.end_time,
        actual_end_time=actual_end,
        status=rental_status(unit.end_time, actual_end),
    )
    _logger.debug("Rental ended room=%s unit=%s status=%s", room_id, unit_id, record.status)
    return layout.replace_unit(room_id, Unit.free(unit.id)), record
