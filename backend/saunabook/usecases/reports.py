from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from ..domain.errors import BoatNotFoundError, SaunaNotFoundError
from ..domain.repositories import BoatRepository, ReservationRepository, SaunaRepository, SharedReservationRepository
from ..models import Reservation, ReservationStatus, SharedReservation, SharedReservationParticipant

# Cancelled reservations never count towards usage.
BILLABLE_STATUSES = (ReservationStatus.ACTIVE, ReservationStatus.COMPLETED)


def year_bounds(year: int) -> tuple[datetime, datetime]:
    return datetime(year, 1, 1), datetime(year, 12, 31, 23, 59, 59, 999999)


@dataclass(frozen=True)
class SaunaAnnualReport:
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


def summarize_sauna_year(
    *,
    sauna_id: int,
    sauna_name: str,
    year: int,
    reservations: Iterable[Reservation],
    shared_reservations: Iterable[SharedReservation],
) -> SaunaAnnualReport:
    individual = [r for r in reservations if r.status in BILLABLE_STATUSES]
    participants = [p for shared in shared_reservations for p in shared.participants]

    individual_adults = sum(r.adults for r in individual)
    individual_kids = sum(r.kids for r in individual)
    shared_adults = sum(p.adults for p in participants)
    shared_kids = sum(p.kids for p in participants)

    individual_boats = {r.boat_id for r in individual}
    shared_boats = {p.boat_id for p in participants}

    return SaunaAnnualReport(
        sauna_id=sauna_id,
        sauna_name=sauna_name,
        year=year,
        # every individual reservation is one slot
        total_hours_reserved=len(individual),
        total_individual_reservations=len(individual),
        individual_adults=individual_adults,
        individual_kids=individual_kids,
        shared_adults=shared_adults,
        shared_kids=shared_kids,
        total_adults=individual_adults + shared_adults,
        total_kids=individual_kids + shared_kids,
        unique_boats_total=len(individual_boats | shared_boats),
        unique_boats_individual=len(individual_boats),
        unique_boats_shared=len(shared_boats),
        unique_boats_both=len(individual_boats & shared_boats),
    )


async def sauna_annual_report(
    sauna_repo: SaunaRepository,
    res_repo: ReservationRepository,
    shared_repo: SharedReservationRepository,
    *,
    sauna_id: int,
    year: int,
) -> SaunaAnnualReport:
    sauna = await sauna_repo.get(sauna_id)
    if sauna is None:
        raise SaunaNotFoundError("sauna not found")

    start, end = year_bounds(year)
    reservations = await res_repo.list_for_sauna(sauna.id, start, end, statuses=BILLABLE_STATUSES)
    shared = await shared_repo.list_for_sauna(sauna.id, start, end)
    return summarize_sauna_year(
        sauna_id=sauna.id,
        sauna_name=sauna.name,
        year=year,
        reservations=reservations,
        shared_reservations=shared,
    )


@dataclass(frozen=True)
class IslandUsage:
    island_id: int
    island_name: str
    individual_reservations: int
    shared_participations: int


@dataclass(frozen=True)
class BoatAnnualReport:
    boat_id: int
    boat_name: str
    membership_number: str
    year: int
    total_individual_reservations: int
    total_hours_reserved: int
    total_shared_participations: int
    shared_adults: int
    shared_kids: int
    per_island: tuple[IslandUsage, ...]


def summarize_boat_year(
    *,
    boat_id: int,
    boat_name: str,
    membership_number: str,
    year: int,
    reservations: Iterable[Reservation],
    participations: Iterable[SharedReservationParticipant],
) -> BoatAnnualReport:
    individual = [r for r in reservations if r.status in BILLABLE_STATUSES]
    participations = list(participations)

    # island id -> [name, individual count, shared count]
    islands: dict[int, list] = {}
    for reservation in individual:
        island = reservation.sauna.island
        islands.setdefault(island.id, [island.name, 0, 0])[1] += 1
    for participant in participations:
        island = participant.shared_reservation.sauna.island
        islands.setdefault(island.id, [island.name, 0, 0])[2] += 1

    return BoatAnnualReport(
        boat_id=boat_id,
        boat_name=boat_name,
        membership_number=membership_number,
        year=year,
        total_individual_reservations=len(individual),
        total_hours_reserved=len(individual),
        total_shared_participations=len(participations),
        shared_adults=sum(p.adults for p in participations),
        shared_kids=sum(p.kids for p in participations),
        per_island=tuple(
            IslandUsage(island_id=island_id, island_name=name, individual_reservations=ind, shared_participations=sh)
            for island_id, (name, ind, sh) in sorted(islands.items())
        ),
    )


async def boat_annual_report(
    boat_repo: BoatRepository,
    res_repo: ReservationRepository,
    shared_repo: SharedReservationRepository,
    *,
    boat_id: int,
    year: int,
) -> BoatAnnualReport:
    boat = await boat_repo.get(boat_id)
    if boat is None:
        raise BoatNotFoundError("boat not found")

    start, end = year_bounds(year)
    reservations = await res_repo.list_for_boat(boat.id, start, end, statuses=BILLABLE_STATUSES)
    participations = await shared_repo.list_participations_for_boat(boat.id, start, end)
    return summarize_boat_year(
        boat_id=boat.id,
        boat_name=boat.name,
        membership_number=boat.membership_number,
        year=year,
        reservations=reservations,
        participations=participations,
    )
