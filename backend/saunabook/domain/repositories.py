from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ..models import Boat, Island, Reservation, ReservationStatus, Sauna, SharedReservation, SharedReservationParticipant
from .daily_limit import Commitment


class SaunaRepository(Protocol):
    async def get(self, sauna_id: int) -> Sauna | None: ...

    async def get_for_update(self, sauna_id: int) -> Sauna | None: ...

    async def list_by_island(self, island_id: int) -> list[Sauna]: ...


class IslandRepository(Protocol):
    async def get(self, island_id: int) -> Island | None: ...


class BoatRepository(Protocol):
    async def get(self, boat_id: int) -> Boat | None: ...


class ReservationRepository(Protocol):
    async def get(self, reservation_id: int) -> Reservation | None: ...

    async def get_for_update(self, reservation_id: int) -> Reservation | None: ...

    async def list_for_sauna(
        self,
        sauna_id: int,
        start: datetime,
        end: datetime,
        statuses: tuple[ReservationStatus, ...] | None = None,
    ) -> list[Reservation]: ...

    async def list_for_boat(
        self,
        boat_id: int,
        start: datetime,
        end: datetime,
        statuses: tuple[ReservationStatus, ...] | None = None,
    ) -> list[Reservation]: ...

    async def list_boat_commitments(
        self,
        boat_id: int,
        island_id: int,
        start: datetime,
        end: datetime,
    ) -> list[Commitment]: ...

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
    ) -> Reservation: ...

    async def cancel(self, reservation: Reservation) -> Reservation: ...


class SharedReservationRepository(Protocol):
    async def get_for_update(self, shared_reservation_id: int) -> SharedReservation | None: ...

    async def list_for_sauna(self, sauna_id: int, start: datetime, end: datetime) -> list[SharedReservation]: ...

    async def list_participations_for_boat(
        self,
        boat_id: int,
        start: datetime,
        end: datetime,
    ) -> list[SharedReservationParticipant]: ...

    async def add_participant(
        self,
        *,
        shared_reservation_id: int,
        boat_id: int,
        adults: int,
        kids: int,
    ) -> SharedReservationParticipant: ...
