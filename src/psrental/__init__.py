"""psrental - Rental state tracking for console units organised into rooms."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("psrental")
except PackageNotFoundError:
    __version__ = "0+local"
from psrental.config import RentalConfig
from psrental.desk import AsyncRentalPrompt, RentalDesk, RentalPrompt
from psrental.exceptions import (
    RentalConfigError,
    RentalConflictError,
    RentalError,
    RentalNotFoundError,
    RentalStoreError,
    RentalValidationError,
)
from psrental.lifecycle import end_rental, initialize_layout, rental_status, start_rental
from psrental.models import (
    ActiveRental,
    HistoryField,
    HistorySort,
    Layout,
    OccupancyStats,
    RentalHistoryRecord,
    RentalStatus,
    Room,
    SortDirection,
    StartRequest,
    Unit,
)
from psrental.queries import active_rentals, is_expired, occupancy_stats, sort_history, time_remaining
from psrental.store import FileBackend, KeyValueBackend, MemoryBackend, RentalStore

__all__ = [
    "__version__",
    "ActiveRental",
    "AsyncRentalPrompt",
    "FileBackend",
    "HistoryField",
    "HistorySort",
    "KeyValueBackend",
    "Layout",
    "MemoryBackend",
    "OccupancyStats",
    "RentalConfig",
    "RentalConfigError",
    "RentalConflictError",
    "RentalDesk",
    "RentalError",
    "RentalHistoryRecord",
    "RentalNotFoundError",
    "RentalPrompt",
    "RentalStatus",
    "RentalStore",
    "RentalStoreError",
    "RentalValidationError",
    "Room",
    "SortDirection",
    "StartRequest",
    "Unit",
    "active_rentals",
    "end_rental",
    "initialize_layout",
    "is_expired",
    "occupancy_stats",
    "rental_status",
    "sort_history",
    "start_rental",
    "time_remaining",
]
