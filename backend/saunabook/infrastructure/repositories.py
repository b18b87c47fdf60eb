from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from ..domain.daily_limit import Commitment, IndividualCommitment, SharedCommitment
from ..domain.repositories import (
    BoatRepository,
    IslandRepository,
    ReservationRepository,
    SaunaRepository,
    SharedReservationRepository,
)
from ..models import (
    Boat,
    Island,
    Reservation,
    ReservationStatus,
    Sauna,
    SharedReservation,
    SharedReservationParticipant,
)
from ..utils.time import utc_now_naive


class SqlAlchemySaunaRepository(SaunaRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, sauna_id: int) -> Sauna | None:
        result = await self.session.scalar(select(Sauna).where(Sauna.id == sauna_id))
        return result if isinstance(result, Sauna) else None

    async def get_for_update(self, sauna_id: int) -> Sauna | None:
        # Serializes bookings of one sauna for the rest of the transaction.
        result = await self.session.scalar(select(Sauna).where(Sauna.id == sauna_id).with_for_update())
        return result if isinstance(result, Sauna) else None

    async def list_by_island(self, island_id: int) -> List[Sauna]:
        rows = await self.session.scalars(select(Sauna).where(Sauna.island_id == island_id).order_by(Sauna.id))
        return list(rows.all())


class SqlAlchemyIslandRepository(IslandRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, island_id: int) -> Island | None:
        result = await self.session.scalar(select(Island).where(Island.id == island_id))
        return result if isinstance(result, Island) else None


class SqlAlchemyBoatRepository(BoatRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, boat_id: int) -> Boat | None:
        result = await self.session.scalar(select(Boat).where(Boat.id == boat_id))
        return result if isinstance(result, Boat) else None


class SqlAlchemyReservationRepository(ReservationRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, reservation_id: int) -> Reservation | None:
        result = await self.session.scalar(select(Reservation).where(Reservation.id == reservation_id))
        return result if isinstance(result, Reservation) else None

    async def get_for_update(self, reservation_id: int) -> Reservation | None:
        stmt = select(Reservation).where(Reservation.id == reservation_id).with_for_update()
        result = await self.session.scalar(stmt)
        return result if isinstance(result, Reservation) else None

    async def list_for_sauna(
        self,
        sauna_id: int,
        start: datetime,
        end: datetime,
        statuses: tuple[ReservationStatus, ...] | None = None,
    ) -> List[Reservation]:
        stmt = (
            select(Reservation)
            .where(
                Reservation.sauna_id == sauna_id,
                Reservation.start_time >= start,
                Reservation.start_time <= end,
            )
            .order_by(Reservation.start_time)
        )
        if statuses is not None:
            stmt = stmt.where(Reservation.status.in_(statuses))
        rows = await self.session.scalars(stmt)
        return list(rows.all())

    async def list_for_boat(
        self,
        boat_id: int,
        start: datetime,
        end: datetime,
        statuses: tuple[ReservationStatus, ...] | None = None,
    ) -> List[Reservation]:
        stmt = (
            select(Reservation)
            .options(joinedload(Reservation.sauna, innerjoin=True).joinedload(Sauna.island, innerjoin=True))
            .where(
                Reservation.boat_id == boat_id,
                Reservation.start_time >= start,
                Reservation.start_time <= end,
            )
            .order_by(Reservation.start_time)
        )
        if statuses is not None:
            stmt = stmt.where(Reservation.status.in_(statuses))
        rows = await self.session.scalars(stmt)
        return list(rows.all())

    async def list_boat_commitments(
        self,
        boat_id: int,
        island_id: int,
        start: datetime,
        end: datetime,
    ) -> List[Commitment]:
        individual_stmt = (
            select(Reservation.id, Reservation.sauna_id, Reservation.start_time)
            .join(Sauna, Reservation.sauna_id == Sauna.id)
            .where(
                Reservation.boat_id == boat_id,
                Reservation.status == ReservationStatus.ACTIVE,
                Sauna.island_id == island_id,
                Reservation.start_time >= start,
                Reservation.start_time <= end,
            )
        )
        shared_stmt = (
            select(SharedReservation.id, SharedReservation.sauna_id, SharedReservation.start_time)
            .join(
                SharedReservationParticipant,
                SharedReservationParticipant.shared_reservation_id == SharedReservation.id,
            )
            .join(Sauna, SharedReservation.sauna_id == Sauna.id)
            .where(
                SharedReservationParticipant.boat_id == boat_id,
                Sauna.island_id == island_id,
                SharedReservation.start_time >= start,
                SharedReservation.start_time <= end,
            )
        )
        commitments: List[Commitment] = [
            IndividualCommitment(reservation_id=rid, sauna_id=sid, start_time=st)
            for rid, sid, st in (await self.session.execute(individual_stmt)).all()
        ]
        commitments.extend(
            SharedCommitment(shared_reservation_id=rid, sauna_id=sid, start_time=st)
            for rid, sid, st in (await self.session.execute(shared_stmt)).all()
        )
        return commitments

    async def create(
        self,
        *,
        sauna_id: int,
        boat_id: int,
        start_time: datetime,
        end_time: datetime,
        adults: int,
        kids: int,
        status: ReservationStatus,
    ) -> Reservation:
        now = utc_now_naive()
        reservation = Reservation(
            sauna_id=sauna_id,
            boat_id=boat_id,
            start_time=start_time,
            end_time=end_time,
            adults=adults,
            kids=kids,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self.session.add(reservation)
        await self.session.flush()
        return reservation

    async def cancel(self, reservation: Reservation) -> Reservation:
        self.session.add(reservation)
        await self.session.flush()
        return reservation


class SqlAlchemySharedReservationRepository(SharedReservationRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_for_update(self, shared_reservation_id: int) -> SharedReservation | None:
        stmt = (
            select(SharedReservation)
            .options(
                joinedload(SharedReservation.sauna, innerjoin=True),
                selectinload(SharedReservation.participants),
            )
            .where(SharedReservation.id == shared_reservation_id)
            .with_for_update()
        )
        result = await self.session.scalar(stmt)
        return result if isinstance(result, SharedReservation) else None

    async def list_for_sauna(self, sauna_id: int, start: datetime, end: datetime) -> List[SharedReservation]:
        stmt = (
            select(SharedReservation)
            .options(selectinload(SharedReservation.participants))
            .where(
                SharedReservation.sauna_id == sauna_id,
                SharedReservation.start_time >= start,
                SharedReservation.start_time <= end,
            )
            .order_by(SharedReservation.start_time)
        )
        rows = await self.session.scalars(stmt)
        return list(rows.all())

    async def list_participations_for_boat(
        self,
        boat_id: int,
        start: datetime,
        end: datetime,
    ) -> List[SharedReservationParticipant]:
        stmt = (
            select(SharedReservationParticipant)
            .join(SharedReservationParticipant.shared_reservation)
            .options(
                joinedload(SharedReservationParticipant.shared_reservation, innerjoin=True)
                .joinedload(SharedReservation.sauna, innerjoin=True)
                .joinedload(Sauna.island, innerjoin=True)
            )
            .where(
                SharedReservationParticipant.boat_id == boat_id,
                SharedReservation.start_time >= start,
                SharedReservation.start_time <= end,
            )
            .order_by(SharedReservation.start_time)
        )
        rows = await self.session.scalars(stmt)
        return list(rows.all())

    async def add_participant(
        self,
        *,
        shared_reservation_id: int,
        boat_id: int,
        adults: int,
        kids: int,
    ) -> SharedReservationParticipant:
        participant = SharedReservationParticipant(
            shared_reservation_id=shared_reservation_id,
            boat_id=boat_id,
            adults=adults,
            kids=kids,
            created_at=utc_now_naive(),
        )
        self.session.add(participant)
        await self.session.flush()
        return participant
