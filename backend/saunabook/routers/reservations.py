from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_club_id, get_session
from ..domain.cancellation import CancelReason
from ..domain.errors import (
    BoatNotFoundError,
    CancelNotAllowedError,
    DailyLimitExceededError,
    InvalidSlotError,
    PartySizeError,
    ReservationNotFoundError,
    SaunaNotFoundError,
    SlotUnavailableError,
)
from ..infrastructure.repositories import (
    SqlAlchemyBoatRepository,
    SqlAlchemyReservationRepository,
    SqlAlchemySaunaRepository,
)
from ..schemas import ReservationCreate, ReservationRead
from ..usecases import reservations as reservation_usecase
from ..utils.audit_log import emit_audit_log
from ..utils.time import to_utc_naive, utc_now_naive

# get_current_club_id only authenticates the club; isolation between clubs is delegated to the caller.
router = APIRouter(prefix="/reservations", tags=["reservations"], dependencies=[Depends(get_current_club_id)])

CANCEL_MESSAGES = {
    CancelReason.TOO_LATE: "Cannot cancel - less than 15 minutes before start time",
    CancelReason.ALREADY_STARTED: "Cannot cancel - reservation has already started",
    CancelReason.ALREADY_CANCELLED: "Reservation is already cancelled",
    CancelReason.NOT_ACTIVE: "Cannot cancel this reservation",
}


@router.post("", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: ReservationCreate,
    session: AsyncSession = Depends(get_session),
    club_id: int = Depends(get_current_club_id),
) -> ReservationRead:
    if payload.start_time.tzinfo is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start_time must have timezone")
    start_time = to_utc_naive(payload.start_time)

    sauna_repo = SqlAlchemySaunaRepository(session)
    boat_repo = SqlAlchemyBoatRepository(session)
    res_repo = SqlAlchemyReservationRepository(session)
    async with session.begin():
        try:
            reservation = await reservation_usecase.create_reservation(
                sauna_repo,
                boat_repo,
                res_repo,
                sauna_id=payload.sauna_id,
                boat_id=payload.boat_id,
                start_time=start_time,
                adults=payload.adults,
                kids=payload.kids,
                now=utc_now_naive(),
            )
        except (InvalidSlotError, PartySizeError) as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
        except SaunaNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="sauna not found")
        except BoatNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="boat not found")
        except (DailyLimitExceededError, SlotUnavailableError) as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

        try:
            emit_audit_log(
                action="reservation.created",
                club_id=club_id,
                sauna_id=reservation.sauna_id,
                boat_id=reservation.boat_id,
                reservation_id=reservation.id,
                start_time=reservation.start_time,
                adults=reservation.adults,
                kids=reservation.kids,
                status_to=reservation.status,
            )
        except RuntimeError:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed")

    return ReservationRead.from_db(reservation=reservation)


@router.get("/{reservation_id}", response_model=ReservationRead)
async def get_reservation(
    reservation_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
) -> ReservationRead:
    res_repo = SqlAlchemyReservationRepository(session)
    try:
        reservation = await reservation_usecase.get_reservation(res_repo, reservation_id=reservation_id)
    except ReservationNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reservation not found")
    return ReservationRead.from_db(reservation=reservation)


@router.post("/{reservation_id}/cancel", response_model=ReservationRead)
async def cancel_reservation(
    reservation_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
    club_id: int = Depends(get_current_club_id),
) -> ReservationRead:
    res_repo = SqlAlchemyReservationRepository(session)
    async with session.begin():
        try:
            updated, status_from = await reservation_usecase.cancel_reservation(
                res_repo,
                reservation_id=reservation_id,
                now=utc_now_naive(),
            )
        except ReservationNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="reservation not found")
        except CancelNotAllowedError as exc:
            detail = CANCEL_MESSAGES.get(CancelReason(exc.reason), "Cannot cancel this reservation")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

        try:
            emit_audit_log(
                action="reservation.cancelled",
                club_id=club_id,
                sauna_id=updated.sauna_id,
                boat_id=updated.boat_id,
                reservation_id=updated.id,
                start_time=updated.start_time,
                status_from=status_from,
                status_to=updated.status,
            )
        except RuntimeError:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed")

    return ReservationRead.from_db(reservation=updated)
