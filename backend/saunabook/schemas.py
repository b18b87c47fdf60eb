from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .domain.availability import AvailabilityReason, NextAvailableSlot
from .domain.club_sauna import ClubSaunaSeason
from .domain.daily_limit import DailyLimitCheck
from .domain.services import MAX_ADULTS, MAX_KIDS, ReservationSnapshot
from .models import Reservation, ReservationStatus, Sauna, SharedReservation, SharedReservationParticipant
from .utils.time import display_zone, utc_naive_to_local


def _local_iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(display_zone()).isoformat()


class ReservationCreate(BaseModel):
    sauna_id: int
    boat_id: int
    start_time: datetime
    adults: int = Field(ge=1, le=MAX_ADULTS)
    kids: int = Field(default=0, ge=0, le=MAX_KIDS)


class ReservationRead(BaseModel):
    reservation_id: int
    sauna_id: int
    boat_id: int
    start_time: datetime
    end_time: datetime
    adults: int
    kids: int
    status: ReservationStatus
    cancelled_at: Optional[datetime] = None

    @field_serializer("start_time", "end_time", "cancelled_at")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return _local_iso(dt)

    @classmethod
    def from_db(cls, *, reservation: Reservation) -> "ReservationRead":
        return cls(
            reservation_id=reservation.id,
            sauna_id=reservation.sauna_id,
            boat_id=reservation.boat_id,
            start_time=utc_naive_to_local(reservation.start_time),
            end_time=utc_naive_to_local(reservation.end_time),
            adults=reservation.adults,
            kids=reservation.kids,
            status=reservation.status,
            cancelled_at=utc_naive_to_local(reservation.cancelled_at) if reservation.cancelled_at else None,
        )


class SlotRead(BaseModel):
    start_time: datetime
    end_time: datetime
    reservation_id: Optional[int] = None

    @field_serializer("start_time", "end_time")
    def _ser_datetime(self, dt: datetime) -> Optional[str]:
        return _local_iso(dt)

    @classmethod
    def from_snapshot(cls, snapshot: ReservationSnapshot) -> "SlotRead":
        return cls(
            start_time=utc_naive_to_local(snapshot.start_time),
            end_time=utc_naive_to_local(snapshot.end_time),
            reservation_id=snapshot.id,
        )


class NextAvailableRead(BaseModel):
    start_time: datetime
    end_time: datetime
    reason: AvailabilityReason

    @field_serializer("start_time", "end_time")
    def _ser_datetime(self, dt: datetime) -> Optional[str]:
        return _local_iso(dt)

    @classmethod
    def from_slot(cls, slot: NextAvailableSlot) -> "NextAvailableRead":
        return cls(
            start_time=utc_naive_to_local(slot.start_time),
            end_time=utc_naive_to_local(slot.end_time),
            reason=slot.reason,
        )


class SaunaSummary(BaseModel):
    sauna_id: int
    name: str
    heating_time_hours: int

    @classmethod
    def from_db(cls, sauna: Sauna) -> "SaunaSummary":
        return cls(sauna_id=sauna.id, name=sauna.name, heating_time_hours=sauna.heating_time_hours)


class ExistingReservationRead(BaseModel):
    type: Literal["individual", "shared"]
    id: int
    start_time: datetime

    @field_serializer("start_time")
    def _ser_datetime(self, dt: datetime) -> Optional[str]:
        return _local_iso(dt)


class DailyLimitRead(BaseModel):
    boat_id: int
    island_id: int
    day: date
    can_reserve: bool
    has_individual_reservation: bool
    has_shared_participation: bool
    existing_reservation: Optional[ExistingReservationRead] = None

    @classmethod
    def from_check(cls, *, boat_id: int, island_id: int, day: date, check: DailyLimitCheck) -> "DailyLimitRead":
        existing = None
        if check.existing_reservation is not None:
            existing = ExistingReservationRead(
                type=check.existing_reservation.type,
                id=check.existing_reservation.id,
                start_time=utc_naive_to_local(check.existing_reservation.start_time),
            )
        return cls(
            boat_id=boat_id,
            island_id=island_id,
            day=day,
            can_reserve=check.can_reserve,
            has_individual_reservation=check.has_individual_reservation,
            has_shared_participation=check.has_shared_participation,
            existing_reservation=existing,
        )


class SharedReservationJoin(BaseModel):
    boat_id: int
    adults: int = Field(ge=1, le=MAX_ADULTS)
    kids: int = Field(default=0, ge=0, le=MAX_KIDS)


class SharedParticipantRead(BaseModel):
    participant_id: int
    shared_reservation_id: int
    boat_id: int
    adults: int
    kids: int

    @classmethod
    def from_db(cls, participant: SharedReservationParticipant) -> "SharedParticipantRead":
        return cls(
            participant_id=participant.id,
            shared_reservation_id=participant.shared_reservation_id,
            boat_id=participant.boat_id,
            adults=participant.adults,
            kids=participant.kids,
        )


class SharedReservationRead(BaseModel):
    shared_reservation_id: int
    sauna_id: int
    name: Optional[str] = None
    start_time: datetime
    end_time: datetime
    is_club_sauna: bool
    participants: list[SharedParticipantRead] = Field(default_factory=list)

    @field_serializer("start_time", "end_time")
    def _ser_datetime(self, dt: datetime) -> Optional[str]:
        return _local_iso(dt)

    @classmethod
    def from_db(cls, shared: SharedReservation) -> "SharedReservationRead":
        return cls(
            shared_reservation_id=shared.id,
            sauna_id=shared.sauna_id,
            name=shared.name,
            start_time=utc_naive_to_local(shared.start_time),
            end_time=utc_naive_to_local(shared.end_time),
            is_club_sauna=shared.is_club_sauna,
            participants=[SharedParticipantRead.from_db(p) for p in shared.participants],
        )


class SaunaAvailabilityRead(BaseModel):
    sauna: SaunaSummary
    is_currently_reserved: bool
    current_reservation: Optional[SlotRead] = None
    next_available: NextAvailableRead
    shared_reservations_today: list[SharedReservationRead] = Field(default_factory=list)


class ClubSaunaRead(BaseModel):
    island_id: int
    day: date
    eligible: bool
    season: Optional[ClubSaunaSeason] = None
    saunas: list[SaunaSummary] = Field(default_factory=list)


class SaunaAnnualReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sauna_id: int
    sauna_name: str
    year: int
    total_hours_reserved: int
    total_individual_reservations: int
    individual_adults: int
    individual_kids: int
    shared_adults: int
    shared_kids: int
    total_adults: int
    total_kids: int
    unique_boats_total: int
    unique_boats_individual: int
    unique_boats_shared: int
    unique_boats_both: int


class IslandUsageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    island_id: int
    island_name: str
    individual_reservations: int
    shared_participations: int


class BoatAnnualReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    boat_id: int
    boat_name: str
    membership_number: str
    year: int
    total_individual_reservations: int
    total_hours_reserved: int
    total_shared_participations: int
    shared_adults: int
    shared_kids: int
    per_island: list[IslandUsageRead]
