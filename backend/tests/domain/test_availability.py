from datetime import datetime, timedelta

import pytest
from saunabook.domain.availability import (
    AvailabilityReason,
    calculate_next_available,
    get_current_reservation,
    get_future_reservations,
)
from saunabook.domain.errors import NoAvailableSlotError
from saunabook.domain.services import ReservationSnapshot, SaunaSnapshot
from saunabook.domain.timeslots import slots_overlap
from saunabook.models import ReservationStatus

HOUR = timedelta(hours=1)


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 6, 10, hour, minute)


def _res(hour: int, status: ReservationStatus = ReservationStatus.ACTIVE) -> ReservationSnapshot:
    return ReservationSnapshot(start_time=_at(hour), end_time=_at(hour) + HOUR, status=status)


def test_idle_sauna_applies_heating_time() -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=2)
    slot = calculate_next_available(sauna, None, [], _at(14, 30))
    assert slot.start_time == _at(16)
    assert slot.end_time == _at(17)
    assert slot.reason == AvailabilityReason.HEATING
    assert slot.sauna_id == 1


@pytest.mark.parametrize("minute", [0, 1, 29, 59])
@pytest.mark.parametrize("heating", [0, 1, 3])
def test_heating_slot_is_relative_to_current_hour(minute: int, heating: int) -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=heating)
    slot = calculate_next_available(sauna, None, [], _at(10, minute))
    assert slot.start_time == _at(10 + heating)


def test_zero_heating_time_starts_at_top_of_current_hour() -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=0)
    slot = calculate_next_available(sauna, None, [], _at(9, 45))
    assert slot.start_time == _at(9)
    assert slot.reason == AvailabilityReason.HEATING


def test_buffer_skips_slot_right_after_imminent_end() -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=2)
    slot = calculate_next_available(sauna, _res(14), [], _at(14, 50))
    assert slot.start_time == _at(16)
    assert slot.end_time == _at(17)
    assert slot.reason == AvailabilityReason.BUFFER


def test_exactly_fifteen_minutes_left_uses_buffer() -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=2)
    slot = calculate_next_available(sauna, _res(14), [], _at(14, 45))
    assert slot.reason == AvailabilityReason.BUFFER
    assert slot.start_time == _at(16)


def test_occupied_sauna_offers_slot_when_current_ends() -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=2)
    slot = calculate_next_available(sauna, _res(14), [], _at(14, 10))
    assert slot.start_time == _at(15)
    assert slot.reason == AvailabilityReason.NEXT_FREE


def test_current_reservation_not_covering_now_is_ignored() -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=1)
    slot = calculate_next_available(sauna, _res(12), [], _at(14, 10))
    assert slot.reason == AvailabilityReason.HEATING
    assert slot.start_time == _at(15)


def test_walks_forward_past_conflicts_and_keeps_reason() -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=2)
    future = [_res(16), _res(17), _res(19)]
    slot = calculate_next_available(sauna, None, future, _at(14, 30))
    assert slot.start_time == _at(18)
    assert slot.reason == AvailabilityReason.HEATING


def test_buffer_reason_survives_forward_walk() -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=2)
    slot = calculate_next_available(sauna, _res(14), [_res(16)], _at(14, 55))
    assert slot.start_time == _at(17)
    assert slot.reason == AvailabilityReason.BUFFER


@pytest.mark.parametrize("now_minute", [0, 20, 40, 50])
def test_result_never_overlaps_future_reservations(now_minute: int) -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=1)
    future = [_res(h) for h in (11, 12, 14, 15, 16)]
    current = _res(10)
    slot = calculate_next_available(sauna, current, future, _at(10, now_minute))
    assert not any(slots_overlap(slot.start_time, slot.end_time, r.start_time, r.end_time) for r in future)

    booked = future + [ReservationSnapshot(start_time=slot.start_time, end_time=slot.end_time)]
    for i, a in enumerate(booked):
        for b in booked[i + 1 :]:
            assert not slots_overlap(a.start_time, a.end_time, b.start_time, b.end_time)


def test_lookahead_cap_raises_when_everything_is_booked() -> None:
    sauna = SaunaSnapshot(id=1, heating_time_hours=0)
    start = _at(0)
    future = [ReservationSnapshot(start_time=start + i * HOUR, end_time=start + (i + 1) * HOUR) for i in range(10)]
    with pytest.raises(NoAvailableSlotError):
        calculate_next_available(sauna, None, future, _at(0, 5), max_lookahead_hours=5)

    slot = calculate_next_available(sauna, None, future, _at(0, 5), max_lookahead_hours=10)
    assert slot.start_time == start + 10 * HOUR


def test_current_and_future_helpers_split_reservations() -> None:
    reservations = [
        _res(16),
        _res(14),
        _res(15, ReservationStatus.CANCELLED),
        _res(17),
        _res(12, ReservationStatus.COMPLETED),
    ]
    now = _at(14, 20)
    current = get_current_reservation(reservations, now)
    assert current is not None
    assert current.start_time == _at(14)
    assert [r.start_time for r in get_future_reservations(reservations, now)] == [_at(16), _at(17)]


def test_cancelled_reservation_is_never_current() -> None:
    assert get_current_reservation([_res(14, ReservationStatus.CANCELLED)], _at(14, 20)) is None
