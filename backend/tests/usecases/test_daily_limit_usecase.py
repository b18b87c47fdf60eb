from datetime import date, datetime
from types import SimpleNamespace

import pytest
from saunabook.domain.daily_limit import IndividualCommitment
from saunabook.domain.errors import BoatNotFoundError, IslandNotFoundError
from saunabook.usecases.daily_limit import get_daily_limit


class FakeLookup:
    def __init__(self, row):
        self.row = row

    async def get(self, _id: int):
        return self.row


class FakeResRepo:
    def __init__(self, commitments):
        self.commitments = commitments
        self.calls = []

    async def list_boat_commitments(self, boat_id, island_id, start, end):
        self.calls.append((boat_id, island_id, start, end))
        return self.commitments


BOAT = SimpleNamespace(id=2)
ISLAND = SimpleNamespace(id=5)


@pytest.mark.asyncio
async def test_reports_existing_individual_reservation() -> None:
    start = datetime(2025, 6, 10, 18, 0)
    res_repo = FakeResRepo([IndividualCommitment(reservation_id=11, sauna_id=1, start_time=start)])
    check = await get_daily_limit(
        FakeLookup(BOAT), FakeLookup(ISLAND), res_repo, boat_id=2, island_id=5, day=date(2025, 6, 10)
    )
    assert check.can_reserve is False
    assert check.existing_reservation is not None
    assert check.existing_reservation.id == 11

    boat_id, island_id, day_start, day_end = res_repo.calls[0]
    assert (boat_id, island_id) == (2, 5)
    assert day_start == datetime(2025, 6, 10)
    assert day_end < datetime(2025, 6, 11)


@pytest.mark.asyncio
async def test_free_day() -> None:
    check = await get_daily_limit(
        FakeLookup(BOAT), FakeLookup(ISLAND), FakeResRepo([]), boat_id=2, island_id=5, day=date(2025, 6, 10)
    )
    assert check.can_reserve is True


@pytest.mark.asyncio
async def test_unknown_boat() -> None:
    with pytest.raises(BoatNotFoundError):
        await get_daily_limit(
            FakeLookup(None), FakeLookup(ISLAND), FakeResRepo([]), boat_id=2, island_id=5, day=date(2025, 6, 10)
        )


@pytest.mark.asyncio
async def test_unknown_island() -> None:
    with pytest.raises(IslandNotFoundError):
        await get_daily_limit(
            FakeLookup(BOAT), FakeLookup(None), FakeResRepo([]), boat_id=2, island_id=5, day=date(2025, 6, 10)
        )
