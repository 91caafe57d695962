from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from psrental.exceptions import RentalConflictError, RentalNotFoundError, RentalValidationError
from psrental.lifecycle import end_rental, initialize_layout, parse_start_request, rental_status, start_rental
from psrental.models.history import RentalStatus
from psrental.models.layout import Layout


def _dt(hour: int = 10, minute: int = 0, day: int = 1) -> datetime:
    return datetime(2026, 1, day, hour, minute, tzinfo=UTC)


def _assert_invariant(layout: Layout) -> None:
    for _room, unit in layout.iter_units():
        fields = (unit.customer, unit.start_time, unit.end_time)
        if unit.is_rented:
            assert all(value is not None for value in fields)
        else:
            assert all(value is None for value in fields)


# ------------------------------------------------------------------
# initialize_layout
# ------------------------------------------------------------------


def test_default_layout_is_eight_rooms_of_three_free_units() -> None:
    layout = initialize_layout()
    assert [room.id for room in layout.rooms] == list(range(1, 9))
    assert all([unit.id for unit in room.units] == [1, 2, 3] for room in layout.rooms)
    assert not any(unit.is_rented for _room, unit in layout.iter_units())


def test_custom_layout_size() -> None:
    layout = initialize_layout(2, 5)
    assert len(layout.rooms) == 2
    assert len(layout.room(2).units) == 5


def test_empty_layout_allowed() -> None:
    assert initialize_layout(0, 0).rooms == ()


def test_negative_layout_size_rejected() -> None:
    with pytest.raises(RentalValidationError):
        initialize_layout(-1, 3)


# ------------------------------------------------------------------
# start_rental
# ------------------------------------------------------------------


class TestStartRental:
    def test_sets_rental_fields(self) -> None:
        layout, unit = start_rental(initialize_layout(), 2, 3, "Alice", 2, now=_dt(10))
        assert unit.is_rented
        assert unit.customer == "Alice"
        assert unit.start_time == _dt(10)
        assert unit.end_time == _dt(12)
        assert layout.unit(2, 3) == unit
        _assert_invariant(layout)

    def test_fractional_hours(self) -> None:
        _layout, unit = start_rental(initialize_layout(), 1, 1, "Bob", 1.5, now=_dt(10))
        assert unit.end_time == _dt(11, 30)

    def test_input_layout_untouched(self) -> None:
        original = initialize_layout()
        start_rental(original, 1, 1, "Alice", 1, now=_dt())
        assert not original.unit(1, 1).is_rented

    def test_customer_whitespace_stripped(self) -> None:
        _layout, unit = start_rental(initialize_layout(), 1, 1, "  Alice  ", 1, now=_dt())
        assert unit.customer == "Alice"

    @pytest.mark.parametrize("customer", ["", "  ", None])
    def test_empty_customer_is_validation_error(self, customer: object) -> None:
        with pytest.raises(RentalValidationError):
            start_rental(initialize_layout(), 1, 1, customer, 1, now=_dt())

    @pytest.mark.parametrize("duration", [0, -2, float("nan"), None, False])
    def test_bad_duration_is_validation_error(self, duration: object) -> None:
        with pytest.raises(RentalValidationError):
            start_rental(initialize_layout(), 1, 1, "Alice", duration, now=_dt())

    @pytest.mark.parametrize("duration", [1e20, 24 * 365 * 9000])
    def test_out_of_range_duration_is_validation_error(self, duration: float) -> None:
        with pytest.raises(RentalValidationError, match="duration_hours"):
            start_rental(initialize_layout(), 1, 1, "Alice", duration, now=_dt())

    def test_validation_checked_before_lookup(self) -> None:
        with pytest.raises(RentalValidationError):
            start_rental(initialize_layout(), 99, 1, "", 1, now=_dt())

    def test_unknown_unit_is_not_found(self) -> None:
        with pytest.raises(RentalNotFoundError):
            start_rental(initialize_layout(), 1, 4, "Alice", 1, now=_dt())

    def test_unknown_room_is_not_found(self) -> None:
        with pytest.raises(RentalNotFoundError):
            start_rental(initialize_layout(), 9, 1, "Alice", 1, now=_dt())

    def test_double_start_is_conflict(self) -> None:
        layout, _unit = start_rental(initialize_layout(), 1, 1, "Alice", 1, now=_dt())
        with pytest.raises(RentalConflictError) as exc_info:
            start_rental(layout, 1, 1, "Bob", 1, now=_dt(10, 5))
        assert exc_info.value.room_id == 1
        assert exc_info.value.unit_id == 1
        assert layout.unit(1, 1).customer == "Alice"


# ------------------------------------------------------------------
# end_rental
# ------------------------------------------------------------------


class TestEndRental:
    def test_start_then_end_restores_unit_and_builds_record(self) -> None:
        layout, unit = start_rental(initialize_layout(), 4, 2, "Alice", 1, now=_dt(10))
        layout, record = end_rental(layout, 4, 2, now=_dt(11, 15))

        assert not layout.unit(4, 2).is_rented
        _assert_invariant(layout)
        assert record.room_id == 4
        assert record.unit_id == 2
        assert record.customer == "Alice"
        assert record.start_time == unit.start_time
        assert record.end_time == unit.end_time
        assert record.actual_end_time == _dt(11, 15)
        assert record.status is RentalStatus.COMPLETED

    def test_ending_before_schedule_is_early_termination(self) -> None:
        layout, _unit = start_rental(initialize_layout(), 1, 1, "Alice", 1, now=_dt(10))
        _layout, record = end_rental(layout, 1, 1, now=_dt(10, 30))
        assert record.status is RentalStatus.EARLY_TERMINATION
        assert record.actual_end_time == _dt(10, 30)

    def test_ending_exactly_on_schedule_is_completed(self) -> None:
        layout, _unit = start_rental(initialize_layout(), 1, 1, "Alice", 1, now=_dt(10))
        _layout, record = end_rental(layout, 1, 1, now=_dt(11))
        assert record.status is RentalStatus.COMPLETED

    def test_rental_over_midnight_ended_early(self) -> None:
        layout, _unit = start_rental(initialize_layout(), 1, 1, "Night Owl", 3, now=_dt(22))
        _layout, record = end_rental(layout, 1, 1, now=_dt(0, 30, day=2))
        assert record.status is RentalStatus.EARLY_TERMINATION

    def test_rental_over_midnight_completed(self) -> None:
        layout, _unit = start_rental(initialize_layout(), 1, 1, "Night Owl", 1, now=_dt(23, 30))
        _layout, record = end_rental(layout, 1, 1, now=_dt(0, 45, day=2))
        assert record.status is RentalStatus.COMPLETED

    def test_end_on_free_unit_is_conflict(self) -> None:
        layout = initialize_layout()
        with pytest.raises(RentalConflictError):
            end_rental(layout, 1, 1, now=_dt())
        assert layout == initialize_layout()

    def test_end_on_unknown_unit_is_not_found(self) -> None:
        with pytest.raises(RentalNotFoundError):
            end_rental(initialize_layout(), 1, 9, now=_dt())

    def test_other_units_untouched(self) -> None:
        layout, _ = start_rental(initialize_layout(), 1, 1, "Alice", 1, now=_dt())
        layout, _ = start_rental(layout, 1, 2, "Bob", 1, now=_dt())
        layout, _ = end_rental(layout, 1, 1, now=_dt(10, 10))
        assert layout.unit(1, 2).customer == "Bob"


# ------------------------------------------------------------------
# helpers
# ------------------------------------------------------------------


def test_rental_status_boundary() -> None:
    end = _dt(11)
    assert rental_status(end, end - timedelta(seconds=1)) is RentalStatus.EARLY_TERMINATION
    assert rental_status(end, end) is RentalStatus.COMPLETED
    assert rental_status(end, end + timedelta(minutes=5)) is RentalStatus.COMPLETED


def test_parse_start_request_reports_field() -> None:
    with pytest.raises(RentalValidationError, match="duration_hours"):
        parse_start_request("Alice", -1)
