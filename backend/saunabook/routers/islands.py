from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_club_id, get_session
from ..domain.errors import IslandNotFoundError
from ..infrastructure.repositories import SqlAlchemyIslandRepository, SqlAlchemySaunaRepository
from ..schemas import ClubSaunaRead, SaunaSummary
from ..usecases import club_sauna as club_sauna_usecase
from ..utils.time import utc_now_naive

# get_current_club_id only authenticates the club; isolation between clubs is delegated to the caller.
router = APIRouter(prefix="/islands", tags=["islands"], dependencies=[Depends(get_current_club_id)])


@router.get("/{island_id}/club-sauna", response_model=ClubSaunaRead)
async def get_club_sauna(
    island_id: int = Path(..., ge=1),
    day: Optional[date] = Query(default=None, alias="date"),
    session: AsyncSession = Depends(get_session),
) -> ClubSaunaRead:
    target = day or utc_now_naive().date()
    try:
        eligibility, saunas = await club_sauna_usecase.list_club_sauna_offers(
            SqlAlchemyIslandRepository(session),
            SqlAlchemySaunaRepository(session),
            island_id=island_id,
            day=target,
        )
    except IslandNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="island not found")
    return ClubSaunaRead(
        island_id=island_id,
        day=target,
        eligible=eligibility.eligible,
        season=eligibility.season,
        saunas=[SaunaSummary.from_db(s) for s in saunas],
    )
