from datetime import date

from ..domain.daily_limit import DailyLimitCheck, evaluate_daily_limit
from ..domain.errors import BoatNotFoundError, IslandNotFoundError
from ..domain.repositories import BoatRepository, IslandRepository, ReservationRepository
from ..utils.time import day_bounds


async def check_daily_limit(
    res_repo: ReservationRepository,
    *,
    boat_id: int,
    island_id: int,
    day: date,
) -> DailyLimitCheck:
    start, end = day_bounds(day)
    commitments = await res_repo.list_boat_commitments(boat_id, island_id, start, end)
    return evaluate_daily_limit(commitments)


async def get_daily_limit(
    boat_repo: BoatRepository,
    island_repo: IslandRepository,
    res_repo: ReservationRepository,
    *,
    boat_id: int,
    island_id: int,
    day: date,
) -> DailyLimitCheck:
    if await boat_repo.get(boat_id) is None:
        raise BoatNotFoundError("boat not found")
    if await island_repo.get(island_id) is None:
        raise IslandNotFoundError("island not found")
    return await check_daily_limit(res_repo, boat_id=boat_id, island_id=island_id, day=day)
