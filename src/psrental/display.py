"""Text renditions of the dashboard, active-rental table and history log.

These adapters consume the outputs of :mod:`psrental.queries` verbatim
and are the only place instants become clock-time strings.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo

from psrental._constants import DEFAULT_CLOCK_FORMAT, EXPIRED
from psrental.config import RentalConfig
from psrental.models.derived import ActiveRental, OccupancyStats
from psrental.models.history import RentalHistoryRecord, RentalStatus
from psrental.models.layout import Layout
from psrental.queries import is_expired, time_remaining

STATUS_LABELS: dict[RentalStatus, str] = {
    RentalStatus.COMPLETED: "Completed",
    RentalStatus.EARLY_TERMINATION: "Early Termination",
}

ACTIVE_HEADERS = ("Room", "PS Unit", "Customer", "Start Time", "End Time", "Time Remaining", "Status")
HISTORY_HEADERS = ("Room", "PS Unit", "Customer", "Start Time", "Scheduled End", "Actual End", "Status")
NO_ACTIVE_RENTALS = "No active rentals"
NO_HISTORY = "No rental history available"


@dataclass(frozen=True, slots=True)
class ClockFormatter:
    """Render instants as clock times in a fixed zone (``None`` = local)."""

    tz: tzinfo | None = None
    fmt: str = DEFAULT_CLOCK_FORMAT

    @classmethod
    def from_config(cls, config: RentalConfig) -> ClockFormatter:
        return cls(tz=config.tz(), fmt=config.clock_format)

    def __call__(self, value: datetime) -> str:
        return value.astimezone(self.tz).strftime(self.fmt)


def room_label(room_id: int) -> str:
    return f"Room {room_id}"


def unit_label(unit_id: int) -> str:
    return f"PS Unit {unit_id}"


def format_percent(rate: float) -> str:
    return f"{rate:.1f}%"


def dashboard_cards(stats: OccupancyStats) -> list[tuple[str, str]]:
    return [
        ("Total Units", str(stats.total_units)),
        ("Rented Units", str(stats.rented_units)),
        ("Available Units", str(stats.available_units)),
        ("Occupancy Rate", format_percent(stats.occupancy_rate_percent)),
    ]


def room_panel_rows(layout: Layout, clock: ClockFormatter) -> list[list[str]]:
    rows: list[list[str]] = []
    for room, unit in layout.iter_units():
        if unit.is_rented and unit.start_time is not None and unit.end_time is not None:
            rows.append(
                [
                    room_label(room.id),
                    unit_label(unit.id),
                    "Rented",
                    unit.customer or "",
                    clock(unit.start_time),
                    clock(unit.end_time),
                ]
            )
        else:
            rows.append([room_label(room.id), unit_label(unit.id), "Available", "", "", ""])
    return rows


def active_rental_rows(
    rentals: Iterable[ActiveRental],
    now: datetime,
    clock: ClockFormatter,
) -> list[list[str]]:
    return [
        [
            room_label(rental.room_id),
            unit_label(rental.unit_id),
            rental.customer,
            clock(rental.start_time),
            clock(rental.end_time),
            time_remaining(rental.end_time, now),
            EXPIRED if is_expired(rental.end_time, now) else "Active",
        ]
        for rental in rentals
    ]


def history_rows(records: Iterable[RentalHistoryRecord], clock: ClockFormatter) -> list[list[str]]:
    return [
        [
            room_label(record.room_id),
            unit_label(record.unit_id),
            record.customer,
            clock(record.start_time),
            clock(record.end_time),
            clock(record.actual_end_time),
            STATUS_LABELS[record.status],
        ]
        for record in records
    ]


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]], *, empty_message: str = "") -> str:
    """Lay out *rows* under *headers* in left-aligned fixed-width columns."""
    widths = [len(header) for header in headers]
    for row in rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    def _line(cells: Sequence[str]) -> str:
        return "  ".join(f"{cell:<{widths[index]}}" for index, cell in enumerate(cells)).rstrip()

    lines = [_line(headers), "  ".join("-" * width for width in widths)]
    if rows:
        lines.extend(_line(row) for row in rows)
    elif empty_message:
        lines.append(empty_message)
    return "\n".join(lines)


def render_dashboard(stats: OccupancyStats, layout: Layout, clock: ClockFormatter) -> str:
    cards = "   ".join(f"{label}: {value}" for label, value in dashboard_cards(stats))
    panels = render_table(
        ("Room", "PS Unit", "State", "Customer", "Start", "End"),
        room_panel_rows(layout, clock),
    )
    return f"{cards}\n\n{panels}"


def render_active_rentals(rentals: Iterable[ActiveRental], now: datetime, clock: ClockFormatter) -> str:
    table = render_table(
        ACTIVE_HEADERS,
        active_rental_rows(rentals, now, clock),
        empty_message=NO_ACTIVE_RENTALS,
    )
    return f"Current Time: {clock(now)}\n\n{table}"


def render_history(records: Sequence[RentalHistoryRecord], clock: ClockFormatter) -> str:
    table = render_table(HISTORY_HEADERS, history_rows(records, clock), empty_message=NO_HISTORY)
    return f"Total Records: {len(records)}\n\n{table}"
