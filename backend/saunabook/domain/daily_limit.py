from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Literal, Optional, Union

from .errors import DailyLimitExceededError


@dataclass(frozen=True)
class IndividualCommitment:
    reservation_id: int
    sauna_id: int
    start_time: datetime
    kind: Literal["individual"] = "individual"


@dataclass(frozen=True)
class SharedCommitment:
    shared_reservation_id: int
    sauna_id: int
    start_time: datetime
    kind: Literal["shared"] = "shared"


# Anything that consumes a boat's one-per-island-per-day quota.
Commitment = Union[IndividualCommitment, SharedCommitment]


@dataclass(frozen=True)
class ExistingReservation:
    type: Literal["individual", "shared"]
    id: int
    start_time: datetime


@dataclass(frozen=True)
class DailyLimitCheck:
    can_reserve: bool
    has_individual_reservation: bool
    has_shared_participation: bool
    existing_reservation: Optional[ExistingReservation] = None


def evaluate_daily_limit(commitments: Iterable[Commitment]) -> DailyLimitCheck:
    """
    Fold a boat's commitments on one island and day into a quota decision.
    Individual reservations win over shared participation when reporting the existing one.
    """
    individual: Optional[IndividualCommitment] = None
    shared: Optional[SharedCommitment] = None
    for commitment in commitments:
        if isinstance(commitment, IndividualCommitment):
            if individual is None or commitment.start_time < individual.start_time:
                individual = commitment
        elif shared is None or commitment.start_time < shared.start_time:
            shared = commitment

    existing: Optional[ExistingReservation] = None
    if individual is not None:
        existing = ExistingReservation(type="individual", id=individual.reservation_id, start_time=individual.start_time)
    elif shared is not None:
        existing = ExistingReservation(type="shared", id=shared.shared_reservation_id, start_time=shared.start_time)

    return DailyLimitCheck(
        can_reserve=individual is None and shared is None,
        has_individual_reservation=individual is not None,
        has_shared_participation=shared is not None,
        existing_reservation=existing,
    )


def ensure_within_daily_limit(check: DailyLimitCheck) -> None:
    if check.can_reserve:
        return
    if check.has_individual_reservation:
        raise DailyLimitExceededError(
            "this boat already has a reservation on the island today", kind="individual"
        )
    raise DailyLimitExceededError(
        "this boat already has a shared reservation on the island today", kind="shared"
    )
