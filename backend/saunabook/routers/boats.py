from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_club_id, get_session
from ..domain.errors import BoatNotFoundError, IslandNotFoundError
from ..infrastructure.repositories import (
    SqlAlchemyBoatRepository,
    SqlAlchemyIslandRepository,
    SqlAlchemyReservationRepository,
)
from ..schemas import DailyLimitRead
from ..usecases import daily_limit as daily_limit_usecase
from ..utils.time import utc_now_naive

# get_current_club_id only authenticates the club; isolation between clubs is delegated to the caller.
router = APIRouter(prefix="/boats", tags=["boats"], dependencies=[Depends(get_current_club_id)])


@router.get("/{boat_id}/daily-limit", response_model=DailyLimitRead)
async def get_daily_limit(
    boat_id: int = Path(..., ge=1),
    island_id: int = Query(..., ge=1),
    day: Optional[date] = Query(default=None, alias="date"),
    session: AsyncSession = Depends(get_session),
) -> DailyLimitRead:
    target = day or utc_now_naive().date()
    try:
        check = await daily_limit_usecase.get_daily_limit(
            SqlAlchemyBoatRepository(session),
            SqlAlchemyIslandRepository(session),
            SqlAlchemyReservationRepository(session),
            boat_id=boat_id,
            island_id=island_id,
            day=target,
        )
    except BoatNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="boat not found")
    except IslandNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="island not found")
    return DailyLimitRead.from_check(boat_id=boat_id, island_id=island_id, day=target, check=check)
