from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..deps import get_current_club_id, get_session
from ..domain.errors import NoAvailableSlotError, SaunaNotFoundError
from ..infrastructure.repositories import (
    SqlAlchemyReservationRepository,
    SqlAlchemySaunaRepository,
    SqlAlchemySharedReservationRepository,
)
from ..schemas import (
    NextAvailableRead,
    ReservationRead,
    SaunaAvailabilityRead,
    SaunaSummary,
    SharedReservationRead,
    SlotRead,
)
from ..usecases import availability as availability_usecase
from ..usecases import reservations as reservation_usecase
from ..usecases import shared_reservations as shared_usecase
from ..utils.time import utc_now_naive

# get_current_club_id only authenticates the club; isolation between clubs is delegated to the caller.
router = APIRouter(prefix="/saunas", tags=["saunas"], dependencies=[Depends(get_current_club_id)])


@router.get("/{sauna_id}/next-available", response_model=SaunaAvailabilityRead)
async def get_next_available(
    sauna_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
) -> SaunaAvailabilityRead:
    sauna_repo = SqlAlchemySaunaRepository(session)
    res_repo = SqlAlchemyReservationRepository(session)
    now = utc_now_naive()
    try:
        sauna, current, slot = await availability_usecase.get_next_available(
            sauna_repo,
            res_repo,
            sauna_id=sauna_id,
            now=now,
            max_lookahead_hours=get_settings().max_lookahead_hours,
        )
    except SaunaNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="sauna not found")
    except NoAvailableSlotError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))

    shared_today = await shared_usecase.list_sauna_shared_reservations(
        SqlAlchemySharedReservationRepository(session),
        sauna_id=sauna.id,
        day=now.date(),
    )

    return SaunaAvailabilityRead(
        sauna=SaunaSummary.from_db(sauna),
        is_currently_reserved=current is not None,
        current_reservation=SlotRead.from_snapshot(current) if current is not None else None,
        next_available=NextAvailableRead.from_slot(slot),
        shared_reservations_today=[SharedReservationRead.from_db(s) for s in shared_today],
    )


@router.get("/{sauna_id}/reservations", response_model=List[ReservationRead])
async def list_reservations(
    sauna_id: int = Path(..., ge=1),
    day: Optional[date] = Query(default=None, alias="date", description="Calendar day (defaults to today)"),
    session: AsyncSession = Depends(get_session),
) -> list[ReservationRead]:
    sauna_repo = SqlAlchemySaunaRepository(session)
    res_repo = SqlAlchemyReservationRepository(session)
    try:
        rows = await reservation_usecase.list_sauna_reservations(
            sauna_repo,
            res_repo,
            sauna_id=sauna_id,
            day=day or utc_now_naive().date(),
        )
    except SaunaNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="sauna not found")
    return [ReservationRead.from_db(reservation=row) for row in rows]
