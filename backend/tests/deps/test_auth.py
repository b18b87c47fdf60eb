from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import pytest
from fastapi import HTTPException
from saunabook.config import Settings, get_settings
from saunabook.deps import get_current_club_id
from sqlalchemy.exc import ProgrammingError


class DummySession:
    def __init__(self, club_exists: bool | Exception) -> None:
        self.club_exists = club_exists
        self.rolled_back = False

    async def scalar(self, *args: Any, **kwargs: Any) -> int | None:
        if isinstance(self.club_exists, Exception):
            raise self.club_exists
        return 1 if self.club_exists else None

    async def rollback(self) -> None:
        self.rolled_back = True


def _token(club_id: Any, *, expires_delta: timedelta = timedelta(minutes=30)) -> str:
    settings = Settings(auth_secret="testsecret")
    claims = {"sub": str(club_id), "exp": datetime.now(timezone.utc) + expires_delta}
    return jwt.encode(claims, settings.auth_secret, algorithm=settings.auth_algorithm)


@pytest.fixture(autouse=True)
def _set_auth_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH_SECRET", "testsecret")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.asyncio
async def test_get_current_club_id_accepts_valid_token() -> None:
    session = DummySession(club_exists=True)
    result = await get_current_club_id(authorization=f"Bearer {_token(123)}", session=session)  # type: ignore[arg-type]
    assert result == 123
    # lookup transaction is closed so handlers can call session.begin()
    assert session.rolled_back is True


@pytest.mark.asyncio
async def test_get_current_club_id_rejects_missing_header() -> None:
    with pytest.raises(HTTPException) as excinfo:
        await get_current_club_id(authorization=None, session=DummySession(True))  # type: ignore[arg-type]
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_club_id_rejects_non_bearer_scheme() -> None:
    with pytest.raises(HTTPException) as excinfo:
        await get_current_club_id(authorization=f"Basic {_token(1)}", session=DummySession(True))  # type: ignore[arg-type]
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_club_id_rejects_expired_token() -> None:
    token = _token(1, expires_delta=timedelta(seconds=-1))
    with pytest.raises(HTTPException) as excinfo:
        await get_current_club_id(authorization=f"Bearer {token}", session=DummySession(True))  # type: ignore[arg-type]
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_club_id_rejects_non_numeric_subject() -> None:
    with pytest.raises(HTTPException) as excinfo:
        await get_current_club_id(authorization=f"Bearer {_token('abc')}", session=DummySession(True))  # type: ignore[arg-type]
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_club_id_rejects_when_club_missing() -> None:
    with pytest.raises(HTTPException) as excinfo:
        await get_current_club_id(authorization=f"Bearer {_token(99)}", session=DummySession(False))  # type: ignore[arg-type]
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_club_id_handles_missing_clubs_table() -> None:
    session = DummySession(club_exists=ProgrammingError("missing", None, Exception("cause")))
    with pytest.raises(HTTPException) as excinfo:
        await get_current_club_id(authorization=f"Bearer {_token(1)}", session=session)  # type: ignore[arg-type]
    assert excinfo.value.status_code == 500
    assert session.rolled_back is True
