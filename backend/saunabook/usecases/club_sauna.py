from datetime import date

from ..domain.club_sauna import ClubSaunaEligibility, is_club_sauna_eligible_date, select_club_sauna_saunas
from ..domain.errors import IslandNotFoundError
from ..domain.repositories import IslandRepository, SaunaRepository
from ..domain.services import SaunaSnapshot
from ..models import Sauna


async def list_club_sauna_offers(
    island_repo: IslandRepository,
    sauna_repo: SaunaRepository,
    *,
    island_id: int,
    day: date,
) -> tuple[ClubSaunaEligibility, list[Sauna]]:
    island = await island_repo.get(island_id)
    if island is None:
        raise IslandNotFoundError("island not found")

    saunas = await sauna_repo.list_by_island(island.id)
    by_id = {sauna.id: sauna for sauna in saunas}
    offered = select_club_sauna_saunas([SaunaSnapshot.from_row(s) for s in saunas], day)
    return is_club_sauna_eligible_date(day), [by_id[snapshot.id] for snapshot in offered]
