import logging
from datetime import date, datetime

from ..domain.cancellation import can_cancel_reservation
from ..domain.daily_limit import ensure_within_daily_limit
from ..domain.errors import (
    BoatNotFoundError,
    CancelNotAllowedError,
    ReservationNotFoundError,
    SaunaNotFoundError,
    SlotUnavailableError,
)
from ..domain.repositories import BoatRepository, ReservationRepository, SaunaRepository
from ..domain.services import ReservationSnapshot, validate_party_size
from ..domain.timeslots import SLOT_LENGTH, is_slot_available, validate_time_slot
from ..models import Reservation, ReservationStatus
from ..utils.time import day_bounds
from .daily_limit import check_daily_limit

logger = logging.getLogger(__name__)


async def create_reservation(
    sauna_repo: SaunaRepository,
    boat_repo: BoatRepository,
    res_repo: ReservationRepository,
    *,
    sauna_id: int,
    boat_id: int,
    start_time: datetime,
    adults: int,
    kids: int,
    now: datetime,
) -> Reservation:
    end_time = start_time + SLOT_LENGTH
    validate_time_slot(start_time, end_time)
    validate_party_size(adults, kids)

    sauna = await sauna_repo.get_for_update(sauna_id)
    if sauna is None:
        raise SaunaNotFoundError("sauna not found")
    boat = await boat_repo.get(boat_id)
    if boat is None:
        raise BoatNotFoundError("boat not found")

    check = await check_daily_limit(res_repo, boat_id=boat.id, island_id=sauna.island_id, day=start_time.date())
    ensure_within_daily_limit(check)

    day_start, day_end = day_bounds(start_time.date())
    existing = await res_repo.list_for_sauna(
        sauna.id,
        day_start - SLOT_LENGTH,
        day_end,
        statuses=(ReservationStatus.ACTIVE,),
    )
    snapshots = [ReservationSnapshot.from_row(row) for row in existing]
    if not is_slot_available(start_time, end_time, snapshots, now=now):
        raise SlotUnavailableError("this time slot is not available")

    reservation = await res_repo.create(
        sauna_id=sauna.id,
        boat_id=boat.id,
        start_time=start_time,
        end_time=end_time,
        adults=adults,
        kids=kids,
        status=ReservationStatus.ACTIVE,
    )
    logger.info("reservation %s created for sauna %s at %s", reservation.id, sauna.id, start_time.isoformat())
    return reservation


async def cancel_reservation(
    res_repo: ReservationRepository,
    *,
    reservation_id: int,
    now: datetime,
) -> tuple[Reservation, ReservationStatus]:
    reservation = await res_repo.get_for_update(reservation_id)
    if reservation is None:
        raise ReservationNotFoundError("reservation not found")

    check = can_cancel_reservation(reservation.status, reservation.start_time, now)
    if not check.can_cancel:
        raise CancelNotAllowedError(str(check.reason))

    status_from = reservation.status
    reservation.status = ReservationStatus.CANCELLED
    reservation.cancelled_at = now
    reservation.updated_at = now
    updated = await res_repo.cancel(reservation)
    return updated, status_from


async def get_reservation(
    res_repo: ReservationRepository,
    *,
    reservation_id: int,
) -> Reservation:
    reservation = await res_repo.get(reservation_id)
    if reservation is None:
        raise ReservationNotFoundError("reservation not found")
    return reservation


async def list_sauna_reservations(
    sauna_repo: SaunaRepository,
    res_repo: ReservationRepository,
    *,
    sauna_id: int,
    day: date,
) -> list[Reservation]:
    sauna = await sauna_repo.get(sauna_id)
    if sauna is None:
        raise SaunaNotFoundError("sauna not found")
    start, end = day_bounds(day)
    return await res_repo.list_for_sauna(sauna.id, start, end)
