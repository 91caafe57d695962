"""Tests for the layout, history and request models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from psrental.exceptions import RentalNotFoundError
from psrental.models.derived import HistoryField, HistorySort, SortDirection
from psrental.models.history import RentalHistoryRecord, RentalStatus
from psrental.models.layout import Layout, Room, Unit
from psrental.models.requests import StartRequest


def _dt(hour: int = 10, minute: int = 0) -> datetime:
    return datetime(2026, 1, 1, hour, minute, tzinfo=UTC)


def _rented(unit_id: int = 1) -> Unit:
    return Unit(id=unit_id, is_rented=True, customer="Alice", start_time=_dt(10), end_time=_dt(11))


# ------------------------------------------------------------------
# Unit
# ------------------------------------------------------------------


class TestUnit:
    def test_free_unit_document_omits_rental_fields(self) -> None:
        assert Unit.free(2).to_document() == {"id": 2, "isRented": False}

    def test_rented_unit_document_uses_camel_case(self) -> None:
        doc = _rented().to_document()
        assert doc["isRented"] is True
        assert doc["customer"] == "Alice"
        assert set(doc) == {"id", "isRented", "customer", "startTime", "endTime"}

    def test_document_parses_back(self) -> None:
        unit = Unit.model_validate(_rented().to_document())
        assert unit == _rented()

    def test_rented_without_customer_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Unit(id=1, is_rented=True, start_time=_dt(10), end_time=_dt(11))

    def test_free_with_leftover_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Unit(id=1, is_rented=False, customer="Alice")

    def test_id_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Unit(id=0)

    def test_naive_times_assumed_utc(self) -> None:
        unit = Unit(
            id=1,
            is_rented=True,
            customer="Bob",
            start_time=datetime(2026, 1, 1, 10, 0),
            end_time=datetime(2026, 1, 1, 11, 0),
        )
        assert unit.start_time == _dt(10)
        assert unit.start_time is not None and unit.start_time.tzinfo is not None

    def test_frozen(self) -> None:
        unit = Unit.free(1)
        with pytest.raises(ValidationError):
            unit.is_rented = True  # type: ignore[misc]


# ------------------------------------------------------------------
# Room / Layout
# ------------------------------------------------------------------


class TestLayout:
    @pytest.fixture
    def layout(self) -> Layout:
        return Layout(
            rooms=(
                Room(id=1, units=(Unit.free(1), Unit.free(2))),
                Room(id=2, units=(Unit.free(1),)),
            )
        )

    def test_duplicate_unit_ids_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Room(id=1, units=(Unit.free(1), Unit.free(1)))

    def test_duplicate_room_ids_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Layout(rooms=(Room(id=1), Room(id=1)))

    def test_unit_lookup(self, layout: Layout) -> None:
        assert layout.unit(1, 2).id == 2
        assert layout.room(2).units[0].id == 1

    def test_unknown_room_raises_not_found(self, layout: Layout) -> None:
        with pytest.raises(RentalNotFoundError) as exc_info:
            layout.unit(9, 1)
        assert exc_info.value.room_id == 9
        assert exc_info.value.unit_id is None

    def test_unknown_unit_raises_not_found(self, layout: Layout) -> None:
        with pytest.raises(RentalNotFoundError) as exc_info:
            layout.unit(2, 2)
        assert exc_info.value.room_id == 2
        assert exc_info.value.unit_id == 2

    def test_replace_unit_returns_new_layout(self, layout: Layout) -> None:
        updated = layout.replace_unit(1, _rented(2))
        assert updated.unit(1, 2).is_rented
        assert not layout.unit(1, 2).is_rented
        assert [u.id for u in updated.room(1).units] == [1, 2]
        assert updated.room(2) == layout.room(2)

    def test_replace_unknown_unit_raises(self, layout: Layout) -> None:
        with pytest.raises(RentalNotFoundError):
            layout.replace_unit(2, _rented(5))

    def test_iter_units_order(self, layout: Layout) -> None:
        assert [(room.id, unit.id) for room, unit in layout.iter_units()] == [(1, 1), (1, 2), (2, 1)]


# ------------------------------------------------------------------
# RentalHistoryRecord
# ------------------------------------------------------------------


def test_history_record_document_keys() -> None:
    record = RentalHistoryRecord(
        room_id=3,
        unit_id=1,
        customer="Carol",
        start_time=_dt(10),
        end_time=_dt(11),
        actual_end_time=_dt(10, 30),
        status=RentalStatus.EARLY_TERMINATION,
    )
    doc = record.to_document()
    assert doc["roomId"] == 3
    assert doc["unitId"] == 1
    assert doc["status"] == "early_termination"
    assert "actualEndTime" in doc
    assert RentalHistoryRecord.model_validate(doc) == record


# ------------------------------------------------------------------
# StartRequest
# ------------------------------------------------------------------


class TestStartRequest:
    def test_customer_stripped(self) -> None:
        assert StartRequest(customer="  Dana ", duration_hours=1).customer == "Dana"

    def test_numeric_string_duration_accepted(self) -> None:
        assert StartRequest(customer="Dana", duration_hours="1.5").duration_hours == 1.5

    @pytest.mark.parametrize("customer", ["", "   "])
    def test_blank_customer_rejected(self, customer: str) -> None:
        with pytest.raises(ValidationError):
            StartRequest(customer=customer, duration_hours=1)

    @pytest.mark.parametrize("duration", [0, -1, float("nan"), float("inf"), True, "abc"])
    def test_bad_duration_rejected(self, duration: object) -> None:
        with pytest.raises(ValidationError):
            StartRequest(customer="Dana", duration_hours=duration)


# ------------------------------------------------------------------
# HistorySort
# ------------------------------------------------------------------


class TestHistorySort:
    def test_default_is_start_time_descending(self) -> None:
        sort = HistorySort()
        assert sort.field is HistoryField.START_TIME
        assert sort.direction is SortDirection.DESC

    def test_same_field_flips_direction(self) -> None:
        sort = HistorySort().toggle("startTime")
        assert sort.direction is SortDirection.ASC
        assert sort.toggle("start_time").direction is SortDirection.DESC

    def test_new_field_resets_to_ascending(self) -> None:
        sort = HistorySort(field=HistoryField.CUSTOMER, direction=SortDirection.DESC).toggle("roomId")
        assert sort.field is HistoryField.ROOM_ID
        assert sort.direction is SortDirection.ASC

    def test_field_parse_accepts_both_spellings(self) -> None:
        assert HistoryField.parse("actualEndTime") is HistoryField.ACTUAL_END_TIME
        assert HistoryField.parse("actual_end_time") is HistoryField.ACTUAL_END_TIME

    def test_direction_parse_accepts_long_names(self) -> None:
        assert SortDirection.parse("Descending") is SortDirection.DESC
        assert SortDirection.parse("asc") is SortDirection.ASC


def test_start_time_offsets_are_preserved() -> None:
    start = _dt(22)
    unit = Unit(id=1, is_rented=True, customer="Eve", start_time=start, end_time=start + timedelta(hours=3))
    assert unit.end_time is not None
    assert unit.end_time.day == 2
