from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Protocol

from ..models import ReservationStatus
from .errors import InvalidSlotError

SLOT_LENGTH = timedelta(hours=1)


class TimedReservation(Protocol):
    start_time: datetime
    end_time: datetime
    status: ReservationStatus


def floor_to_hour(dt: datetime) -> datetime:
    return dt.replace(minute=0, second=0, microsecond=0)


def slots_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open interval test: [a_start, a_end) intersects [b_start, b_end)."""
    return a_start < b_end and b_start < a_end


def validate_time_slot(start: datetime, end: datetime) -> None:
    """
    Single formatting gate for a reservation window.
    Raises InvalidSlotError unless the slot is exactly one hour long and starts on the hour.
    """
    if end <= start:
        raise InvalidSlotError("end time must be after start time")
    if end - start != SLOT_LENGTH:
        raise InvalidSlotError("reservation duration must be exactly 1 hour")
    if start != floor_to_hour(start):
        raise InvalidSlotError("start time must be at the top of the hour")


def is_slot_available(
    start: datetime,
    end: datetime,
    existing: Iterable[TimedReservation],
    *,
    now: datetime,
) -> bool:
    if start < now:
        return False
    return not any(
        slots_overlap(start, end, r.start_time, r.end_time)
        for r in existing
        if r.status == ReservationStatus.ACTIVE
    )
