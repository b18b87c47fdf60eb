from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..models import ReservationStatus
from .errors import PartySizeError

MAX_ADULTS = 15
MAX_KIDS = 15
MAX_PARTY_SIZE = 20


@dataclass(frozen=True)
class SaunaSnapshot:
    id: int
    heating_time_hours: int
    auto_club_sauna_enabled: bool = False

    @classmethod
    def from_row(cls, sauna: Any) -> "SaunaSnapshot":
        return cls(
            id=sauna.id,
            heating_time_hours=sauna.heating_time_hours,
            auto_club_sauna_enabled=bool(sauna.auto_club_sauna_enabled),
        )


@dataclass(frozen=True)
class ReservationSnapshot:
    start_time: datetime
    end_time: datetime
    status: ReservationStatus = ReservationStatus.ACTIVE
    id: Optional[int] = None

    @classmethod
    def from_row(cls, reservation: Any) -> "ReservationSnapshot":
        return cls(
            start_time=reservation.start_time,
            end_time=reservation.end_time,
            status=reservation.status,
            id=reservation.id,
        )


def validate_party_size(adults: int, kids: int) -> int:
    """
    Pure validation of the people count for one boat.
    Returns the total party size if OK. Raises PartySizeError otherwise.
    """
    if adults < 1:
        raise PartySizeError("at least 1 adult is required")
    if adults > MAX_ADULTS:
        raise PartySizeError(f"maximum {MAX_ADULTS} adults allowed")
    if kids < 0:
        raise PartySizeError("kids count cannot be negative")
    if kids > MAX_KIDS:
        raise PartySizeError(f"maximum {MAX_KIDS} kids allowed")

    total = adults + kids
    if total > MAX_PARTY_SIZE:
        raise PartySizeError(f"total party size cannot exceed {MAX_PARTY_SIZE} people")
    return total
