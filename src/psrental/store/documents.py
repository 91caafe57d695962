"""Persisted document contract.

Two documents live in the backend:

* ``psRooms``: JSON array of rooms (the current layout).
* ``rentalHistory``: JSON array of history records, append-only.

Reads fall back to a default when a document is absent; writes replace
the whole document.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from pydantic import TypeAdapter, ValidationError

from psrental._constants import (
    DEFAULT_ROOM_COUNT,
    DEFAULT_UNITS_PER_ROOM,
    HISTORY_KEY,
    ROOMS_KEY,
)
from psrental.exceptions import RentalStoreError
from psrental.lifecycle import initialize_layout
from psrental.models.history import RentalHistoryRecord
from psrental.models.layout import Layout, Room
from psrental.store.backends import KeyValueBackend

_logger = logging.getLogger(__name__)

_ROOMS_ADAPTER: TypeAdapter[list[Room]] = TypeAdapter(list[Room])
_HISTORY_ADAPTER: TypeAdapter[list[RentalHistoryRecord]] = TypeAdapter(list[RentalHistoryRecord])


def _decode(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RentalStoreError(f"document {key} is not valid JSON: {exc}", key=key) from exc


class RentalStore:
    """Typed access to the ``psRooms`` and ``rentalHistory`` documents."""

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        room_count: int = DEFAULT_ROOM_COUNT,
        units_per_room: int = DEFAULT_UNITS_PER_ROOM,
    ) -> None:
        self._backend = backend
        self._room_count = room_count
        self._units_per_room = units_per_room

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    def load_layout(self) -> Layout:
        """Return the persisted layout, or a freshly initialised one if absent."""
        raw = self._backend.get(ROOMS_KEY)
        if raw is None:
            _logger.debug(
                "No persisted layout; initialising %d rooms x %d units",
                self._room_count,
                self._units_per_room,
            )
            return initialize_layout(self._room_count, self._units_per_room)
        try:
            rooms = _ROOMS_ADAPTER.validate_python(_decode(ROOMS_KEY, raw))
            return Layout(rooms=tuple(rooms))
        except ValidationError as exc:
            raise RentalStoreError(f"document {ROOMS_KEY} is malformed: {exc}", key=ROOMS_KEY) from exc

    def save_layout(self, layout: Layout) -> None:
        document = [room.to_document() for room in layout.rooms]
        self._backend.set(ROOMS_KEY, json.dumps(document))

    def load_history(self) -> tuple[RentalHistoryRecord, ...]:
        """Return the history records in append order, or ``()`` if absent."""
        return self.decode_history(self._backend.get(HISTORY_KEY))

    def decode_history(self, raw: str | None) -> tuple[RentalHistoryRecord, ...]:
        """Decode a ``rentalHistory`` value already read from the backend."""
        if raw is None:
            return ()
        try:
            return tuple(_HISTORY_ADAPTER.validate_python(_decode(HISTORY_KEY, raw)))
        except ValidationError as exc:
            raise RentalStoreError(f"document {HISTORY_KEY} is malformed: {exc}", key=HISTORY_KEY) from exc

    def save_history(self, records: Iterable[RentalHistoryRecord]) -> None:
        document = [record.to_document() for record in records]
        self._backend.set(HISTORY_KEY, json.dumps(document))

    def raw_history(self) -> str | None:
        """Undecoded ``rentalHistory`` document, used to roll back a failed end-rental."""
        return self._backend.get(HISTORY_KEY)

    def restore_raw_history(self, raw: str | None) -> None:
        # An absent document is restored as an empty array.
        self._backend.set(HISTORY_KEY, raw if raw is not None else "[]")
