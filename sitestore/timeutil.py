# sitestore/timeutil.py
import datetime
from dateutil import parser as dateparser

UTC = datetime.timezone.utc
EPOCH = datetime.datetime(1970, 1, 1, tzinfo=UTC)


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(UTC)


def isoz(dt: datetime.datetime) -> str:
    # 2026-10-18T09:30:00.123Z, the format browsers produce with toISOString()
    dt = dt.astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_instant(value):
    """Parse an ISO timestamp into an aware UTC datetime, or None if unusable."""
    if isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        try:
            dt = dateparser.isoparse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def display_datetime(dt: datetime.datetime) -> str:
    return dt.strftime("%m/%d/%Y, %I:%M:%S %p")


def display_date(dt: datetime.datetime) -> str:
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}"
