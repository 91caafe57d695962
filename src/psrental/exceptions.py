"""Custom exception hierarchy for psrental."""

from __future__ import annotations


class RentalError(Exception):
    """Base exception for all psrental errors."""


class RentalConfigError(RentalError):
    """Invalid or missing configuration."""


class RentalStoreError(RentalError):
    """A persisted document could not be read or decoded."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class RentalValidationError(RentalError):
    """Malformed or missing user input (empty customer, bad duration)."""


class _UnitError(RentalError):
    def __init__(
        self,
        message: str,
        *,
        room_id: int | None = None,
        unit_id: int | None = None,
    ) -> None:
        self.room_id = room_id
        self.unit_id = unit_id
        super().__init__(message)


class RentalNotFoundError(_UnitError):
    """The referenced room or unit does not exist."""


class RentalConflictError(_UnitError):
    """Operation is invalid for the unit's current state.

    Raised when starting a rental on a unit that is already rented, or
    ending a rental on a unit that is free.  Safe to retry once the
    caller has refreshed its view of the layout.
    """
