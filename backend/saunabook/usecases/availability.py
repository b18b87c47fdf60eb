import logging
from datetime import datetime, timedelta
from typing import Optional

from ..domain.availability import (
    NextAvailableSlot,
    calculate_next_available,
    get_current_reservation,
    get_future_reservations,
)
from ..domain.errors import SaunaNotFoundError
from ..domain.repositories import ReservationRepository, SaunaRepository
from ..domain.services import ReservationSnapshot, SaunaSnapshot
from ..domain.timeslots import SLOT_LENGTH, floor_to_hour
from ..models import ReservationStatus, Sauna

logger = logging.getLogger(__name__)


async def get_next_available(
    sauna_repo: SaunaRepository,
    res_repo: ReservationRepository,
    *,
    sauna_id: int,
    now: datetime,
    max_lookahead_hours: int,
) -> tuple[Sauna, Optional[ReservationSnapshot], NextAvailableSlot]:
    sauna = await sauna_repo.get(sauna_id)
    if sauna is None:
        raise SaunaNotFoundError("sauna not found")

    # Everything that can still cover `now` or block a slot inside the lookahead window.
    window_start = floor_to_hour(now) - SLOT_LENGTH
    window_end = now + timedelta(hours=sauna.heating_time_hours + max_lookahead_hours + 3)
    rows = await res_repo.list_for_sauna(
        sauna.id,
        window_start,
        window_end,
        statuses=(ReservationStatus.ACTIVE,),
    )
    snapshots = [ReservationSnapshot.from_row(row) for row in rows]

    current = get_current_reservation(snapshots, now)
    future = get_future_reservations(snapshots, now)
    slot = calculate_next_available(
        SaunaSnapshot.from_row(sauna),
        current,
        future,
        now,
        max_lookahead_hours=max_lookahead_hours,
    )
    logger.debug(
        "next available for sauna %s: %s (%s), %d upcoming reservations",
        sauna.id,
        slot.start_time.isoformat(),
        slot.reason.value,
        len(future),
    )
    return sauna, current, slot
