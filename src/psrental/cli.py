"""Command-line front end for a psrental site.

Usage
-----
    psrental dashboard
    psrental start 1 2 --customer Alice --hours 2
    psrental rentals
    psrental end 1 2 --yes
    psrental history --sort customer --direction asc
    psrental watch --interval 60
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import time
from collections.abc import Sequence
from typing import TextIO

from psrental.config import RentalConfig
from psrental.desk import RentalDesk
from psrental.display import (
    ClockFormatter,
    format_percent,
    render_active_rentals,
    render_dashboard,
    render_history,
)
from psrental.exceptions import RentalError
from psrental.lifecycle import parse_start_request
from psrental.models.derived import HistoryField, HistorySort, SortDirection
from psrental.models.requests import StartRequest

_logger = logging.getLogger(__name__)

_YES = frozenset({"y", "yes"})


class StreamPrompt:
    """Collect rental input line by line from a text stream.

    An empty answer (or end of input) cancels.  Values passed to the
    constructor are used instead of asking.
    """

    def __init__(
        self,
        stdin: TextIO,
        stdout: TextIO,
        *,
        customer: str | None = None,
        hours: float | None = None,
        assume_yes: bool = False,
    ) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self._customer = customer
        self._hours = hours
        self._assume_yes = assume_yes

    def _ask(self, question: str) -> str:
        self._stdout.write(question)
        self._stdout.flush()
        return self._stdin.readline().strip()

    def ask_start(self, room_id: int, unit_id: int) -> StartRequest | None:
        customer = self._customer
        if customer is None:
            customer = self._ask(f"Customer name for room {room_id} unit {unit_id}: ")
            if not customer:
                return None
        hours: float | str | None = self._hours
        if hours is None:
            hours = self._ask("Duration (hours): ")
            if not hours:
                return None
        return parse_start_request(customer, hours)

    def confirm_end(self, room_id: int, unit_id: int) -> bool:
        if self._assume_yes:
            return True
        answer = self._ask(f"End rental on room {room_id} unit {unit_id}? [y/N] ")
        return answer.lower() in _YES


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="psrental", description="Console rental desk.")
    parser.add_argument("--data-dir", help="Directory holding psRooms/rentalHistory (default: $PSRENTAL_DATA_DIR)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("dashboard", help="Occupancy stats and room panels")
    commands.add_parser("rentals", help="Active rental table")

    watch = commands.add_parser("watch", help="Re-render the active rental table on a timer")
    watch.add_argument("--interval", type=float, help="Seconds between refreshes (default: config)")
    watch.add_argument("--count", type=int, help="Stop after N renders (default: run until interrupted)")

    history = commands.add_parser("history", help="Rental history log")
    history.add_argument(
        "--sort",
        default=HistoryField.START_TIME.value,
        choices=[member.value for member in HistoryField],
        help="Field to sort by",
    )
    history.add_argument(
        "--direction",
        default=SortDirection.DESC.value,
        choices=[member.value for member in SortDirection],
    )

    start = commands.add_parser("start", help="Start a rental")
    start.add_argument("room", type=int)
    start.add_argument("unit", type=int)
    start.add_argument("--customer", help="Customer name (asked if omitted)")
    start.add_argument("--hours", type=float, help="Rental duration in hours (asked if omitted)")

    end = commands.add_parser("end", help="End a rental")
    end.add_argument("room", type=int)
    end.add_argument("unit", type=int)
    end.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    return parser


def _watch(desk: RentalDesk, clock: ClockFormatter, interval: float, count: int | None, out: TextIO) -> None:
    rendered = 0
    while count is None or rendered < count:
        if rendered:
            time.sleep(interval)
            out.write("\n")
        out.write(render_active_rentals(desk.active_rentals(), desk.now(), clock) + "\n")
        out.flush()
        rendered += 1


def run(
    args: argparse.Namespace,
    desk: RentalDesk,
    config: RentalConfig,
    *,
    stdin: TextIO,
    stdout: TextIO,
) -> int:
    clock = ClockFormatter.from_config(config)

    if args.command == "dashboard":
        stdout.write(render_dashboard(desk.occupancy(), desk.layout(), clock) + "\n")
    elif args.command == "rentals":
        stdout.write(render_active_rentals(desk.active_rentals(), desk.now(), clock) + "\n")
    elif args.command == "watch":
        if args.interval is not None:
            # Revalidated like the environment value.
            config = dataclasses.replace(config, refresh_interval=args.interval)
        _watch(desk, clock, config.refresh_interval, args.count, stdout)
    elif args.command == "history":
        sort = HistorySort(field=HistoryField.parse(args.sort), direction=SortDirection.parse(args.direction))
        stdout.write(render_history(desk.sorted_history(sort), clock) + "\n")
    elif args.command == "start":
        prompt = StreamPrompt(stdin, stdout, customer=args.customer, hours=args.hours)
        unit = desk.request_start(args.room, args.unit, prompt)
        if unit is None:
            stdout.write("Cancelled.\n")
        else:
            assert unit.end_time is not None  # noqa: S101
            stdout.write(f"PS Unit has been rented to {unit.customer} until {clock(unit.end_time)}\n")
            stdout.write(f"Occupancy Rate: {format_percent(desk.occupancy().occupancy_rate_percent)}\n")
    elif args.command == "end":
        prompt = StreamPrompt(stdin, stdout, assume_yes=args.yes)
        record = desk.request_end(args.room, args.unit, prompt)
        if record is None:
            stdout.write("Cancelled.\n")
        else:
            stdout.write(f"Rental ended ({record.status.value}). The PS Unit is now available for new rentals\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        overrides = {"data_dir": args.data_dir} if args.data_dir else {}
        config = RentalConfig.from_env(**overrides)
        desk = RentalDesk.from_config(config)
        return run(args, desk, config, stdin=sys.stdin, stdout=sys.stdout)
    except RentalError as exc:
        _logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
