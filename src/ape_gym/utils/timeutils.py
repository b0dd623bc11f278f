"""UTC timestamp helpers.

Every timestamp the API stores is a UTC ISO-8601 string with millisecond
precision and a trailing ``Z`` (``2024-05-06T00:00:00.000Z``). Because the
format is fixed-width, comparing the strings in SQL orders them
chronologically.
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """Format a datetime as a UTC ``...T..:..:..sssZ`` string.

    Naive datetimes are taken to already be in UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def utc_now_iso() -> str:
    return to_iso(utc_now())


def parse_iso(value: str) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_day_key(now: datetime) -> str:
    """Key of the daily window containing ``now``: UTC midnight."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return to_iso(midnight)


def utc_week_key(now: datetime) -> str:
    """Key of the weekly window containing ``now``: UTC midnight of its Monday."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    monday = now - timedelta(days=now.weekday())
    return utc_day_key(monday)


def period_key(frequency: str, now: datetime) -> str:
    """Completion key for a challenge of the given frequency."""
    if frequency == "weekly":
        return utc_week_key(now)
    return utc_day_key(now)
