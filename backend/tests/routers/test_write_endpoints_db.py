from datetime import date, datetime, time, timedelta, timezone
from typing import AsyncIterator

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from saunabook.config import get_settings
from saunabook.deps import get_session
from saunabook.main import app
from saunabook.models import SharedReservation
from saunabook.utils.time import utc_now_naive
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# seeded in conftest: club 1; saunas 1 and 2 on island 1, sauna 3 on island 2; boats 1 and 2
TARGET_DAY: date = (utc_now_naive() + timedelta(days=2)).date()


def _at(hour: int, day: date = TARGET_DAY) -> datetime:
    return datetime.combine(day, time(hour))


def _booking(sauna_id: int, boat_id: int, hour: int) -> dict:
    return {
        "sauna_id": sauna_id,
        "boat_id": boat_id,
        "start_time": _at(hour).replace(tzinfo=timezone.utc).isoformat(),
        "adults": 2,
        "kids": 1,
    }


async def _add_shared(factory: async_sessionmaker[AsyncSession], start: datetime) -> int:
    async with factory() as session:
        async with session.begin():
            shared = SharedReservation(
                sauna_id=1,
                day=start.date(),
                start_time=start,
                end_time=start + timedelta(hours=3),
                name="Club sauna",
                is_club_sauna=True,
            )
            session.add(shared)
            await session.flush()
            return shared.id


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> AsyncIterator[AsyncClient]:
    monkeypatch.setenv("AUTH_SECRET", "testsecret")
    get_settings.cache_clear()

    async def override_get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    token = jwt.encode(
        {"sub": "1", "exp": datetime.now(timezone.utc) + timedelta(minutes=30)},
        "testsecret",
        algorithm="HS256",
    )
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(
            transport=transport,
            base_url="http://test",
            headers={"Authorization": f"Bearer {token}"},
        ) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        get_settings.cache_clear()


@pytest.mark.asyncio
async def test_create_reservation_commits(client: AsyncClient) -> None:
    res = await client.post("/reservations", json=_booking(1, 1, 10))
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["status"] == "active"
    assert body["sauna_id"] == 1

    listed = await client.get("/saunas/1/reservations", params={"date": TARGET_DAY.isoformat()})
    assert listed.status_code == 200
    assert [r["reservation_id"] for r in listed.json()] == [body["reservation_id"]]

    fetched = await client.get(f"/reservations/{body['reservation_id']}")
    assert fetched.status_code == 200


@pytest.mark.asyncio
async def test_taken_slot_conflicts(client: AsyncClient) -> None:
    assert (await client.post("/reservations", json=_booking(1, 1, 10))).status_code == 201
    res = await client.post("/reservations", json=_booking(1, 2, 10))
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_daily_limit_covers_every_sauna_of_the_island(client: AsyncClient) -> None:
    assert (await client.post("/reservations", json=_booking(1, 1, 10))).status_code == 201
    assert (await client.post("/reservations", json=_booking(2, 1, 12))).status_code == 409
    assert (await client.post("/reservations", json=_booking(3, 1, 12))).status_code == 201

    limit = await client.get("/boats/1/daily-limit", params={"island_id": 1, "date": TARGET_DAY.isoformat()})
    assert limit.status_code == 200
    assert limit.json()["can_reserve"] is False
    assert limit.json()["existing_reservation"]["type"] == "individual"


@pytest.mark.asyncio
async def test_cancel_frees_the_slot(client: AsyncClient) -> None:
    created = await client.post("/reservations", json=_booking(1, 1, 10))
    reservation_id = created.json()["reservation_id"]

    res = await client.post(f"/reservations/{reservation_id}/cancel")
    assert res.status_code == 200, res.text
    assert res.json()["status"] == "cancelled"

    again = await client.post(f"/reservations/{reservation_id}/cancel")
    assert again.status_code == 400

    assert (await client.post("/reservations", json=_booking(1, 2, 10))).status_code == 201


@pytest.mark.asyncio
async def test_join_shared_reservation(client: AsyncClient, session_factory: async_sessionmaker[AsyncSession]) -> None:
    shared_id = await _add_shared(session_factory, _at(17))

    res = await client.post(f"/shared-reservations/{shared_id}/join", json={"boat_id": 2, "adults": 2, "kids": 0})
    assert res.status_code == 201, res.text
    assert res.json()["boat_id"] == 2

    twice = await client.post(f"/shared-reservations/{shared_id}/join", json={"boat_id": 2, "adults": 2, "kids": 0})
    assert twice.status_code == 409

    # a shared participation uses up the boat's day on the island
    assert (await client.post("/reservations", json=_booking(2, 2, 10))).status_code == 409


@pytest.mark.asyncio
async def test_next_available_lists_shared_reservations_today(
    client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    today = utc_now_naive().date()
    shared_id = await _add_shared(session_factory, _at(12, today))

    res = await client.get("/saunas/1/next-available")
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["sauna"]["name"] == "Rantasauna"
    assert [s["shared_reservation_id"] for s in body["shared_reservations_today"]] == [shared_id]


@pytest.mark.asyncio
async def test_boat_report_counts_reservations(client: AsyncClient) -> None:
    assert (await client.post("/reservations", json=_booking(3, 1, 10))).status_code == 201

    res = await client.get("/reports/boats/1", params={"year": TARGET_DAY.year})
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["total_individual_reservations"] == 1
    assert body["per_island"] == [
        {"island_id": 2, "island_name": "Pikku-Pukki", "individual_reservations": 1, "shared_participations": 0}
    ]

    missing = await client.get("/reports/boats/99")
    assert missing.status_code == 404
