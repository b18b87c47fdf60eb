from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Optional

from ..models import ReservationStatus

CANCELLATION_CUTOFF = timedelta(minutes=15)


class CancelReason(StrEnum):
    TOO_LATE = "too_late"
    ALREADY_STARTED = "already_started"
    ALREADY_CANCELLED = "already_cancelled"
    NOT_ACTIVE = "not_active"


@dataclass(frozen=True)
class CancellationCheck:
    can_cancel: bool
    reason: Optional[CancelReason] = None
    minutes_until_start: int = 0


def can_cancel_reservation(status: ReservationStatus, start_time: datetime, now: datetime) -> CancellationCheck:
    """
    Decide whether a reservation may be cancelled at `now`.
    Eligibility only shrinks as time passes, so evaluate it at the moment of cancellation.
    """
    if status == ReservationStatus.CANCELLED:
        return CancellationCheck(can_cancel=False, reason=CancelReason.ALREADY_CANCELLED)
    if status != ReservationStatus.ACTIVE:
        return CancellationCheck(can_cancel=False, reason=CancelReason.NOT_ACTIVE)
    if now >= start_time:
        return CancellationCheck(can_cancel=False, reason=CancelReason.ALREADY_STARTED)

    until_start = start_time - now
    minutes = int(until_start.total_seconds() // 60)
    if until_start < CANCELLATION_CUTOFF:
        return CancellationCheck(can_cancel=False, reason=CancelReason.TOO_LATE, minutes_until_start=minutes)
    return CancellationCheck(can_cancel=True, minutes_until_start=minutes)
