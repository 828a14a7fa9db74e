# src/airdrop_tracker/tracker/clock.py

"""
Reference clock for daily progress.

"Today" is always the calendar date at UTC+7 (Jakarta time), applied explicitly
so the reset boundary does not depend on the host timezone.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

REFERENCE_OFFSET = timedelta(hours=7)
REFERENCE_TZ = timezone(REFERENCE_OFFSET, name="UTC+07:00")

DATE_KEY_FORMAT = "%Y-%m-%d"


def reference_date(now: datetime | float) -> str:
    """
    Date key (YYYY-MM-DD) of an instant under the fixed UTC+7 offset.

    Accepts an aware datetime or epoch seconds. Naive datetimes are taken as UTC.
    """
    if isinstance(now, datetime):
        instant = now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)
    else:
        instant = datetime.fromtimestamp(float(now), tz=timezone.utc)
    return instant.astimezone(REFERENCE_TZ).strftime(DATE_KEY_FORMAT)


def date_key_from_millis(timestamp_ms: float) -> str:
    return reference_date(float(timestamp_ms) / 1000.0)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def today_key(now: datetime | float | None = None) -> str:
    return reference_date(now_utc() if now is None else now)


def epoch_millis(now: datetime | float | None = None) -> int:
    if now is None:
        now = now_utc()
    if isinstance(now, datetime):
        instant = now if now.tzinfo is not None else now.replace(tzinfo=timezone.utc)
        return int(instant.timestamp() * 1000)
    return int(float(now) * 1000)
