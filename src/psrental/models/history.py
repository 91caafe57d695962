"""Rental history record model."""

from __future__ import annotations

import enum

from psrental.models._base import Instant, RentalBaseModel


class RentalStatus(enum.StrEnum):
    """How a rental ended."""

    COMPLETED = "completed"
    EARLY_TERMINATION = "early_termination"


class RentalHistoryRecord(RentalBaseModel):
    """Immutable snapshot of a rental, written once when it ends.

    Holds no reference back to the live unit; ``room_id`` and ``unit_id``
    are plain identifiers.
    """

    room_id: int
    unit_id: int
    customer: str
    start_time: Instant
    end_time: Instant
    """Scheduled end."""

    actual_end_time: Instant
    status: RentalStatus
