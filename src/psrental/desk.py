"""Rental desk: lifecycle transitions wired to persistence.

Each mutation is a read-modify-write of whole documents: read the full
layout, apply a pure transition from :mod:`psrental.lifecycle`, write the
full layout back.  Nothing is written when a transition raises.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Protocol

from psrental import lifecycle, queries
from psrental.config import RentalConfig
from psrental.models.derived import HistorySort, OccupancyStats
from psrental.models.history import RentalHistoryRecord
from psrental.models.layout import Layout, Unit
from psrental.models.requests import StartRequest
from psrental.queries import ActiveRentals
from psrental.store.backends import FileBackend
from psrental.store.documents import RentalStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RentalPrompt(Protocol):
    """Collects input for a lifecycle operation.

    ``ask_start`` returns ``None`` and ``confirm_end`` returns ``False``
    when the user cancels.
    """

    def ask_start(self, room_id: int, unit_id: int) -> StartRequest | None: ...

    def confirm_end(self, room_id: int, unit_id: int) -> bool: ...


class AsyncRentalPrompt(Protocol):
    """Coroutine flavour of :class:`RentalPrompt`."""

    def ask_start(self, room_id: int, unit_id: int) -> Awaitable[StartRequest | None]: ...

    def confirm_end(self, room_id: int, unit_id: int) -> Awaitable[bool]: ...


class RentalDesk:
    """Front desk for a single-user rental site.

    Usage::

        desk = RentalDesk.from_config(RentalConfig.from_env())
        desk.start_rental(1, 2, "Alice", 2)
        desk.end_rental(1, 2)
    """

    def __init__(
        self,
        store: RentalStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    @classmethod
    def from_config(cls, config: RentalConfig, *, clock: Callable[[], datetime] = _utcnow) -> RentalDesk:
        store = RentalStore(
            FileBackend(config.data_path),
            room_count=config.room_count,
            units_per_room=config.units_per_room,
        )
        return cls(store, clock=clock)

    @property
    def store(self) -> RentalStore:
        return self._store

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def layout(self) -> Layout:
        return self._store.load_layout()

    def history(self) -> tuple[RentalHistoryRecord, ...]:
        return self._store.load_history()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_rental(self, room_id: int, unit_id: int, customer: str, duration_hours: float) -> Unit:
        layout, unit = lifecycle.start_rental(
            self._store.load_layout(),
            room_id,
            unit_id,
            customer,
            duration_hours,
            now=self._clock(),
        )
        self._store.save_layout(layout)
        _logger.info("Unit %s in room %s rented until %s", unit_id, room_id, unit.end_time)
        return unit

    def end_rental(self, room_id: int, unit_id: int) -> RentalHistoryRecord:
        """End a rental, appending its history record and freeing the unit.

        The history document is written first.  If the layout write then
        fails, the previous history document is put back before the error
        propagates.
        """
        layout, record = lifecycle.end_rental(
            self._store.load_layout(),
            room_id,
            unit_id,
            now=self._clock(),
        )
        previous_raw = self._store.raw_history()
        history = self._store.decode_history(previous_raw)
        self._store.save_history((*history, record))
        try:
            self._store.save_layout(layout)
        except Exception:
            _logger.warning("Layout write failed; rolling back history for room=%s unit=%s", room_id, unit_id)
            self._store.restore_raw_history(previous_raw)
            raise
        _logger.info("Unit %s in room %s released (%s)", unit_id, room_id, record.status)
        return record

    # ------------------------------------------------------------------
    # Prompt-driven entrypoints
    # ------------------------------------------------------------------

    def request_start(self, room_id: int, unit_id: int, prompt: RentalPrompt) -> Unit | None:
        """Ask *prompt* for customer and duration, then start the rental.

        The prompt is only asked when the unit exists and is free.  Returns
        ``None`` without touching the store when the prompt is cancelled.
        """
        lifecycle.require_free(self.layout(), room_id, unit_id)
        request = prompt.ask_start(room_id, unit_id)
        if request is None:
            _logger.debug("Start rental cancelled room=%s unit=%s", room_id, unit_id)
            return None
        return self.start_rental(room_id, unit_id, request.customer, request.duration_hours)

    def request_end(self, room_id: int, unit_id: int, prompt: RentalPrompt) -> RentalHistoryRecord | None:
        """Ask *prompt* to confirm, then end the rental. ``None`` when declined."""
        lifecycle.require_rented(self.layout(), room_id, unit_id)
        if not prompt.confirm_end(room_id, unit_id):
            _logger.debug("End rental cancelled room=%s unit=%s", room_id, unit_id)
            return None
        return self.end_rental(room_id, unit_id)

    async def request_start_async(
        self,
        room_id: int,
        unit_id: int,
        prompt: AsyncRentalPrompt | RentalPrompt,
    ) -> Unit | None:
        lifecycle.require_free(self.layout(), room_id, unit_id)
        request = prompt.ask_start(room_id, unit_id)
        if inspect.isawaitable(request):
            request = await request
        if request is None:
            _logger.debug("Start rental cancelled room=%s unit=%s", room_id, unit_id)
            return None
        return self.start_rental(room_id, unit_id, request.customer, request.duration_hours)

    async def request_end_async(
        self,
        room_id: int,
        unit_id: int,
        prompt: AsyncRentalPrompt | RentalPrompt,
    ) -> RentalHistoryRecord | None:
        lifecycle.require_rented(self.layout(), room_id, unit_id)
        confirmed = prompt.confirm_end(room_id, unit_id)
        if inspect.isawaitable(confirmed):
            confirmed = await confirmed
        if not confirmed:
            _logger.debug("End rental cancelled room=%s unit=%s", room_id, unit_id)
            return None
        return self.end_rental(room_id, unit_id)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def occupancy(self) -> OccupancyStats:
        return queries.occupancy_stats(self.layout())

    def active_rentals(self) -> ActiveRentals:
        return queries.active_rentals(self.layout())

    def sorted_history(self, sort: HistorySort | None = None) -> list[RentalHistoryRecord]:
        sort = sort or HistorySort()
        return queries.sort_history(self.history(), sort.field, sort.direction)
