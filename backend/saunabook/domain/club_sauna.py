from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Iterable, Optional

from .services import SaunaSnapshot

HIGH_SEASON_MONTHS = frozenset({6, 7, 8})
SHOULDER_SEASON_MONTHS = frozenset({5, 9})
# date.weekday(): Friday == 4, Saturday == 5
SHOULDER_SEASON_WEEKDAYS = frozenset({4, 5})


class ClubSaunaSeason(StrEnum):
    HIGH = "high"
    SHOULDER = "shoulder"


@dataclass(frozen=True)
class ClubSaunaEligibility:
    eligible: bool
    season: Optional[ClubSaunaSeason] = None


def is_club_sauna_eligible_date(day: date) -> ClubSaunaEligibility:
    if day.month in HIGH_SEASON_MONTHS:
        return ClubSaunaEligibility(eligible=True, season=ClubSaunaSeason.HIGH)
    if day.month in SHOULDER_SEASON_MONTHS and day.weekday() in SHOULDER_SEASON_WEEKDAYS:
        return ClubSaunaEligibility(eligible=True, season=ClubSaunaSeason.SHOULDER)
    return ClubSaunaEligibility(eligible=False)


def select_club_sauna_saunas(saunas: Iterable[SaunaSnapshot], day: date) -> list[SaunaSnapshot]:
    """Saunas offered as a free club-wide shared session on `day`."""
    if not is_club_sauna_eligible_date(day).eligible:
        return []
    return [s for s in saunas if s.auto_club_sauna_enabled]
