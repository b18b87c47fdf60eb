from __future__ import annotations


class DomainError(Exception):
    """Base class for scheduling rule violations."""


class InvalidSlotError(DomainError):
    pass


class PartySizeError(DomainError):
    pass


class NoAvailableSlotError(DomainError):
    pass


class SaunaNotFoundError(DomainError):
    pass


class IslandNotFoundError(DomainError):
    pass


class BoatNotFoundError(DomainError):
    pass


class ReservationNotFoundError(DomainError):
    pass


class SharedReservationNotFoundError(DomainError):
    pass


class SlotUnavailableError(DomainError):
    pass


class DailyLimitExceededError(DomainError):
    def __init__(self, message: str, *, kind: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind


class AlreadyParticipatingError(DomainError):
    pass


class CancelNotAllowedError(DomainError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"cancellation not allowed: {reason}")
        self.reason = reason
