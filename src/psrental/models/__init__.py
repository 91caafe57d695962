"""Data models for rooms, units and rental history."""

from psrental.models._base import Instant, RentalBaseModel, ensure_aware
from psrental.models.derived import (
    ActiveRental,
    HistoryField,
    HistorySort,
    OccupancyStats,
    SortDirection,
)
from psrental.models.history import RentalHistoryRecord, RentalStatus
from psrental.models.layout import Layout, Room, Unit
from psrental.models.requests import StartRequest

__all__ = [
    "ActiveRental",
    "HistoryField",
    "HistorySort",
    "Instant",
    "Layout",
    "OccupancyStats",
    "RentalBaseModel",
    "RentalHistoryRecord",
    "RentalStatus",
    "Room",
    "SortDirection",
    "StartRequest",
    "Unit",
    "ensure_aware",
]
