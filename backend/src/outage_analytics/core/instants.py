from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time, timedelta, timezone, tzinfo


def ensure_aware(value: datetime, default_tz: tzinfo = timezone.utc) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=default_tz)
    return value


def parse_instant(value: object, default_tz: tzinfo = timezone.utc) -> datetime | None:
    """Coerce a stored timestamp into an aware datetime.

    Accepts datetimes, dates (midnight), ISO-8601 strings with an optional
    trailing ``Z``, epoch seconds and ``{"seconds": n}`` mappings. Anything
    else, including bools and unparseable strings, yields ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return ensure_aware(value, default_tz)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=default_tz)
    if isinstance(value, (int, float)):
        return _from_epoch(value)
    if isinstance(value, Mapping):
        seconds = value.get("seconds")
        if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
            return _from_epoch(seconds)
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return ensure_aware(parsed, default_tz)
    return None


def parse_date(value: object, default_tz: tzinfo = timezone.utc) -> date | None:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = parse_instant(value, default_tz)
    if parsed is None:
        return None
    return parsed.date()


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime) -> datetime:
    return value.replace(hour=23, minute=59, second=59, microsecond=999_999)


def day_start(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def day_end(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)


def month_end_day(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


def _from_epoch(seconds: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
