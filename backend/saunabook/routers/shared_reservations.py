from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_club_id, get_session
from ..domain.errors import (
    AlreadyParticipatingError,
    BoatNotFoundError,
    DailyLimitExceededError,
    PartySizeError,
    SharedReservationNotFoundError,
)
from ..infrastructure.repositories import (
    SqlAlchemyBoatRepository,
    SqlAlchemyReservationRepository,
    SqlAlchemySharedReservationRepository,
)
from ..schemas import SharedParticipantRead, SharedReservationJoin
from ..usecases import shared_reservations as shared_usecase
from ..utils.audit_log import emit_audit_log

# get_current_club_id only authenticates the club; isolation between clubs is delegated to the caller.
router = APIRouter(
    prefix="/shared-reservations",
    tags=["shared-reservations"],
    dependencies=[Depends(get_current_club_id)],
)


@router.post("/{shared_reservation_id}/join", response_model=SharedParticipantRead, status_code=status.HTTP_201_CREATED)
async def join_shared_reservation(
    payload: SharedReservationJoin,
    shared_reservation_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
    club_id: int = Depends(get_current_club_id),
) -> SharedParticipantRead:
    shared_repo = SqlAlchemySharedReservationRepository(session)
    boat_repo = SqlAlchemyBoatRepository(session)
    res_repo = SqlAlchemyReservationRepository(session)
    async with session.begin():
        try:
            shared, participant = await shared_usecase.join_shared_reservation(
                shared_repo,
                boat_repo,
                res_repo,
                shared_reservation_id=shared_reservation_id,
                boat_id=payload.boat_id,
                adults=payload.adults,
                kids=payload.kids,
            )
        except PartySizeError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
        except SharedReservationNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="shared reservation not found")
        except BoatNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="boat not found")
        except (AlreadyParticipatingError, DailyLimitExceededError) as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

        try:
            emit_audit_log(
                action="shared_reservation.joined",
                club_id=club_id,
                sauna_id=shared.sauna_id,
                boat_id=participant.boat_id,
                shared_reservation_id=shared.id,
                start_time=shared.start_time,
                adults=participant.adults,
                kids=participant.kids,
            )
        except RuntimeError:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed")

    return SharedParticipantRead.from_db(participant)
