from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_club_id, get_session
from ..domain.errors import BoatNotFoundError, SaunaNotFoundError
from ..infrastructure.repositories import (
    SqlAlchemyBoatRepository,
    SqlAlchemyReservationRepository,
    SqlAlchemySaunaRepository,
    SqlAlchemySharedReservationRepository,
)
from ..schemas import BoatAnnualReportRead, SaunaAnnualReportRead
from ..usecases import reports as report_usecase
from ..utils.time import utc_now_naive

# get_current_club_id only authenticates the club; isolation between clubs is delegated to the caller.
router = APIRouter(prefix="/reports", tags=["reports"], dependencies=[Depends(get_current_club_id)])


@router.get("/saunas/{sauna_id}", response_model=SaunaAnnualReportRead)
async def get_sauna_report(
    sauna_id: int = Path(..., ge=1),
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    session: AsyncSession = Depends(get_session),
) -> SaunaAnnualReportRead:
    try:
        report = await report_usecase.sauna_annual_report(
            SqlAlchemySaunaRepository(session),
            SqlAlchemyReservationRepository(session),
            SqlAlchemySharedReservationRepository(session),
            sauna_id=sauna_id,
            year=year or utc_now_naive().year,
        )
    except SaunaNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="sauna not found")
    return SaunaAnnualReportRead.model_validate(report)


@router.get("/boats/{boat_id}", response_model=BoatAnnualReportRead)
async def get_boat_report(
    boat_id: int = Path(..., ge=1),
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    session: AsyncSession = Depends(get_session),
) -> BoatAnnualReportRead:
    try:
        report = await report_usecase.boat_annual_report(
            SqlAlchemyBoatRepository(session),
            SqlAlchemyReservationRepository(session),
            SqlAlchemySharedReservationRepository(session),
            boat_id=boat_id,
            year=year or utc_now_naive().year,
        )
    except BoatNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="boat not found")
    return BoatAnnualReportRead.model_validate(report)
