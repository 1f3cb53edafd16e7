"""Injectable "now" so admission timestamps and upcoming filters are testable."""
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything callable that returns the current instant (timezone-aware, UTC)."""

    def __call__(self) -> datetime:
        ...


def system_clock() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(at: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if at.tzinfo is None:
        return at.replace(tzinfo=timezone.utc)
    return at.astimezone(timezone.utc)
