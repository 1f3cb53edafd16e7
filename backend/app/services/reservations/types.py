"""Value types passed into the availability engine. Plain data; no storage access."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.core.clock import as_utc


@dataclass(frozen=True)
class Interval:
    """Half-open [start, end) in UTC."""

    start: datetime
    end: datetime

    @classmethod
    def utc(cls, start: datetime, end: datetime) -> "Interval":
        return cls(as_utc(start), as_utc(end))

    @property
    def is_valid(self) -> bool:
        return self.start < self.end

    def overlaps(self, other: "Interval") -> bool:
        """Touching endpoints do not overlap."""
        return overlaps(self.start, self.end, other.start, other.end)


def overlaps(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    return start1 < end2 and end1 > start2


@dataclass(frozen=True)
class GuestInfo:
    first_name: str
    last_name: str
    phone: str


@dataclass(frozen=True)
class ReservationRequest:
    """
    One admission request. unit_kind is normalized by the engine (unknown -> TABLE).
    party_size None/0 means 1; price_override None/0 means "use the unit's base price".
    """

    venue_id: int
    unit_kind: str | None
    unit_id: int | None
    start_at: datetime
    end_at: datetime
    guest: GuestInfo
    party_size: int | None = 1
    price_override: Decimal | None = None
    user_id: str | None = None
