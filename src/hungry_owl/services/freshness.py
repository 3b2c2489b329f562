"""Expiration classification for inventory items."""

import math
from datetime import UTC, datetime, timedelta

from hungry_owl.domain.inventory import FreshnessState

_ONE_DAY = timedelta(days=1)
_EXPIRING_MAX_DAYS = 2
_USE_SOON_MAX_DAYS = 5


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def days_until(expiration: datetime, now: datetime) -> int:
    """Return whole days until expiration, rounding partial days up."""
    return math.ceil((as_utc(expiration) - as_utc(now)) / _ONE_DAY)


def classify_freshness(expiration: datetime | None, now: datetime) -> FreshnessState:
    """Bucket an expiration timestamp into a freshness state as of ``now``.

    Items without an expiration are always fresh. Otherwise the remaining
    day count (ceiling) decides: negative is expired, 0-2 expiring, 3-5
    use soon, anything later fresh.
    """
    if expiration is None:
        return FreshnessState.FRESH
    days = days_until(expiration, now)
    if days < 0:
        return FreshnessState.EXPIRED
    if days <= _EXPIRING_MAX_DAYS:
        return FreshnessState.EXPIRING
    if days <= _USE_SOON_MAX_DAYS:
        return FreshnessState.USE_SOON
    return FreshnessState.FRESH


def format_relative_date(expiration: datetime, now: datetime) -> str:
    """Describe an expiration relative to now for display."""
    days = days_until(expiration, now)
    if days < 0:
        return f"{abs(days)} days ago"
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    if days <= 7:  # noqa: PLR2004
        return f"In {days} days"
    return f"{expiration:%b} {expiration.day}, {expiration.year}"
