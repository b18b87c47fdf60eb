"""
Next bookable slot for a sauna.

An occupied sauna frees up when the current reservation ends, unless that is
15 minutes away or less, in which case the following hour is proposed so the
sauna gets a break. An idle sauna needs its heating time before first use.
From the proposed slot the calculator walks forward hour by hour until it
finds a slot that does not collide with any upcoming reservation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Iterable, Optional, Sequence

from ..models import ReservationStatus
from .errors import NoAvailableSlotError
from .services import ReservationSnapshot, SaunaSnapshot
from .timeslots import SLOT_LENGTH, floor_to_hour, slots_overlap

BUFFER_MINUTES = 15
DEFAULT_MAX_LOOKAHEAD_HOURS = 48


class AvailabilityReason(StrEnum):
    HEATING = "heating"
    BUFFER = "buffer"
    NEXT_FREE = "next_free"


@dataclass(frozen=True)
class NextAvailableSlot:
    sauna_id: int
    start_time: datetime
    end_time: datetime
    reason: AvailabilityReason


def _covers(reservation: ReservationSnapshot, now: datetime) -> bool:
    return reservation.start_time <= now < reservation.end_time


def calculate_next_available(
    sauna: SaunaSnapshot,
    current_reservation: Optional[ReservationSnapshot],
    future_reservations: Sequence[ReservationSnapshot],
    now: datetime,
    *,
    max_lookahead_hours: int = DEFAULT_MAX_LOOKAHEAD_HOURS,
) -> NextAvailableSlot:
    if current_reservation is not None and _covers(current_reservation, now):
        minutes_until_end = int((current_reservation.end_time - now).total_seconds() // 60)
        if minutes_until_end > BUFFER_MINUTES:
            candidate = current_reservation.end_time
            reason = AvailabilityReason.NEXT_FREE
        else:
            candidate = current_reservation.end_time + SLOT_LENGTH
            reason = AvailabilityReason.BUFFER
    else:
        candidate = floor_to_hour(now) + timedelta(hours=sauna.heating_time_hours)
        reason = AvailabilityReason.HEATING

    start = _find_free_slot(candidate, future_reservations, max_lookahead_hours)
    return NextAvailableSlot(
        sauna_id=sauna.id,
        start_time=start,
        end_time=start + SLOT_LENGTH,
        reason=reason,
    )


def _find_free_slot(
    candidate: datetime,
    reservations: Sequence[ReservationSnapshot],
    max_lookahead_hours: int,
) -> datetime:
    for _ in range(max_lookahead_hours + 1):
        candidate_end = candidate + SLOT_LENGTH
        if not any(slots_overlap(candidate, candidate_end, r.start_time, r.end_time) for r in reservations):
            return candidate
        candidate = candidate_end
    raise NoAvailableSlotError(f"no free slot within {max_lookahead_hours} hours")


def get_current_reservation(
    reservations: Iterable[ReservationSnapshot],
    now: datetime,
) -> Optional[ReservationSnapshot]:
    for reservation in reservations:
        if reservation.status == ReservationStatus.ACTIVE and _covers(reservation, now):
            return reservation
    return None


def get_future_reservations(
    reservations: Iterable[ReservationSnapshot],
    now: datetime,
) -> list[ReservationSnapshot]:
    upcoming = [r for r in reservations if r.status == ReservationStatus.ACTIVE and r.start_time > now]
    return sorted(upcoming, key=lambda r: r.start_time)
