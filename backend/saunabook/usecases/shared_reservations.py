from datetime import date

from ..domain.daily_limit import ensure_within_daily_limit
from ..domain.errors import AlreadyParticipatingError, BoatNotFoundError, SharedReservationNotFoundError
from ..domain.repositories import BoatRepository, ReservationRepository, SharedReservationRepository
from ..domain.services import validate_party_size
from ..models import SharedReservation, SharedReservationParticipant
from ..utils.time import day_bounds
from .daily_limit import check_daily_limit


async def join_shared_reservation(
    shared_repo: SharedReservationRepository,
    boat_repo: BoatRepository,
    res_repo: ReservationRepository,
    *,
    shared_reservation_id: int,
    boat_id: int,
    adults: int,
    kids: int,
) -> tuple[SharedReservation, SharedReservationParticipant]:
    validate_party_size(adults, kids)

    shared = await shared_repo.get_for_update(shared_reservation_id)
    if shared is None:
        raise SharedReservationNotFoundError("shared reservation not found")
    boat = await boat_repo.get(boat_id)
    if boat is None:
        raise BoatNotFoundError("boat not found")

    if any(p.boat_id == boat.id for p in shared.participants):
        raise AlreadyParticipatingError("this boat is already participating in this shared reservation")

    check = await check_daily_limit(
        res_repo,
        boat_id=boat.id,
        island_id=shared.sauna.island_id,
        day=shared.start_time.date(),
    )
    ensure_within_daily_limit(check)

    participant = await shared_repo.add_participant(
        shared_reservation_id=shared.id,
        boat_id=boat.id,
        adults=adults,
        kids=kids,
    )
    return shared, participant


async def list_sauna_shared_reservations(
    shared_repo: SharedReservationRepository,
    *,
    sauna_id: int,
    day: date,
) -> list[SharedReservation]:
    start, end = day_bounds(day)
    return await shared_repo.list_for_sauna(sauna_id, start, end)
