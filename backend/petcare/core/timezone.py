"""Business-timezone helpers.

Timestamps are stored in UTC; calendar days (charge dates, "today" at the cash
register) are taken in the configured business timezone.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from petcare.core.config import get_settings


def business_tz() -> ZoneInfo:
    return ZoneInfo(get_settings().business_timezone)


def coerce_utc(moment: datetime) -> datetime:
    """Attach UTC to naive values (SQLite drops tzinfo) and convert aware ones."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def utcnow() -> datetime:
    return datetime.now(UTC)


def local_date(moment: datetime) -> date:
    """Calendar day of ``moment`` in the business timezone."""
    return coerce_utc(moment).astimezone(business_tz()).date()


def business_today(now: datetime | None = None) -> date:
    return local_date(now or utcnow())
