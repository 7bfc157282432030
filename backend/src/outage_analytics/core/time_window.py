from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from enum import Enum

from ..config import analytics_timezone
from .instants import (
    day_end,
    day_start,
    end_of_day,
    ensure_aware,
    month_end_day,
    parse_date,
    parse_instant,
    start_of_day,
)

logger = logging.getLogger(__name__)

MAX_WEEK = 53


class RangeSelector(str, Enum):
    ALL = "all"
    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_N_DAYS = "lastNDays"
    LAST_7_DAYS = "last7Days"
    LAST_30_DAYS = "last30Days"
    LAST_CALENDAR_YEAR = "lastCalendarYear"
    CUSTOM_RANGE = "customRange"
    CUSTOM_MONTH_RANGE = "customMonthRange"
    CUSTOM_YEAR_RANGE = "customYearRange"
    CUSTOM_WEEK_RANGE = "customWeekRange"


_SELECTOR_ALIASES: dict[str, RangeSelector] = {
    "days": RangeSelector.LAST_N_DAYS,
    "week": RangeSelector.LAST_7_DAYS,
    "month": RangeSelector.LAST_30_DAYS,
    "year": RangeSelector.LAST_CALENDAR_YEAR,
    "custom": RangeSelector.CUSTOM_RANGE,
    "custom-month": RangeSelector.CUSTOM_MONTH_RANGE,
    "custom-year": RangeSelector.CUSTOM_YEAR_RANGE,
    "custom-week": RangeSelector.CUSTOM_WEEK_RANGE,
}


@dataclass(frozen=True)
class TimeWindow:
    start: datetime | None
    end: datetime | None

    @classmethod
    def unbounded(cls) -> TimeWindow:
        return cls(start=None, end=None)

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, instant: datetime) -> bool:
        if self.start is not None and instant < self.start:
            return False
        if self.end is not None and instant > self.end:
            return False
        return True


@dataclass(frozen=True)
class WindowParams:
    """Optional inputs for the parameterised selectors.

    Values may be loosely typed (strings from a query string, dates, ints);
    anything that cannot be interpreted is treated as missing.
    """

    days: object = None
    start: object = None
    end: object = None
    start_month: object = None
    end_month: object = None
    start_year: object = None
    end_year: object = None
    start_week: object = None
    end_week: object = None
    year: object = None


def parse_selector(value: RangeSelector | str | None) -> RangeSelector | None:
    if isinstance(value, RangeSelector):
        return value
    if value is None:
        return RangeSelector.ALL
    text = value.strip()
    for selector in RangeSelector:
        if selector.value == text or selector.value.lower() == text.lower():
            return selector
    return _SELECTOR_ALIASES.get(text.lower())


def resolve_window(
    selector: RangeSelector | str | None,
    params: WindowParams | None,
    now: datetime,
) -> TimeWindow:
    now = ensure_aware(now, analytics_timezone())
    params = params or WindowParams()
    parsed = parse_selector(selector)
    if parsed is None:
        logger.warning("Unknown range selector %r; using default window", selector)
        return default_window(now)

    if parsed is RangeSelector.ALL:
        return TimeWindow.unbounded()
    if parsed is RangeSelector.TODAY:
        return TimeWindow(start_of_day(now), end_of_day(now))
    if parsed is RangeSelector.YESTERDAY:
        yesterday = now - timedelta(days=1)
        return TimeWindow(start_of_day(yesterday), end_of_day(yesterday))
    if parsed is RangeSelector.LAST_N_DAYS:
        days = _as_int(params.days)
        if days is None or days < 0:
            logger.warning("lastNDays requires a non-negative day count, got %r", params.days)
            return default_window(now)
        try:
            return _trailing_days(now, days)
        except OverflowError:
            logger.warning("lastNDays day count %d is out of range", days)
            return default_window(now)
    if parsed is RangeSelector.LAST_7_DAYS:
        return _trailing_days(now, 6)
    if parsed is RangeSelector.LAST_30_DAYS:
        return _trailing_days(now, 29)
    if parsed is RangeSelector.LAST_CALENDAR_YEAR:
        return _year_span(now.year - 1, now.year - 1, now.tzinfo)
    if parsed is RangeSelector.CUSTOM_RANGE:
        return _custom_range(params, now)
    if parsed is RangeSelector.CUSTOM_MONTH_RANGE:
        return _custom_month_range(params, now)
    if parsed is RangeSelector.CUSTOM_YEAR_RANGE:
        return _custom_year_range(params, now)
    return _custom_week_range(params, now)


def default_window(now: datetime) -> TimeWindow:
    now = ensure_aware(now, analytics_timezone())
    return _year_span(now.year, now.year, now.tzinfo)


def week_start(year: int, week: int) -> date:
    # Weeks count from Jan 1, not from the ISO Monday.
    return date(year, 1, 1) + timedelta(days=(week - 1) * 7)


def _trailing_days(now: datetime, days: int) -> TimeWindow:
    return TimeWindow(start_of_day(now - timedelta(days=days)), end_of_day(now))


def _year_span(first: int, last: int, tz: tzinfo | None) -> TimeWindow:
    tz = tz or timezone.utc
    return TimeWindow(day_start(date(first, 1, 1), tz), day_end(date(last, 12, 31), tz))


def _custom_range(params: WindowParams, now: datetime) -> TimeWindow:
    tz = now.tzinfo or timezone.utc
    start = _range_bound(params.start, tz, is_end=False)
    end = _range_bound(params.end, tz, is_end=True)
    if start is None or end is None:
        logger.warning("customRange requires start and end; using default window")
        return default_window(now)
    if start > end:
        start = _range_bound(params.end, tz, is_end=False)
        end = _range_bound(params.start, tz, is_end=True)
    return TimeWindow(start, end)


def _range_bound(value: object, tz: tzinfo, is_end: bool) -> datetime | None:
    # Bare dates cover the whole day; instants are taken as given.
    if isinstance(value, date) and not isinstance(value, datetime):
        return day_end(value, tz) if is_end else day_start(value, tz)
    if isinstance(value, str) and len(value.strip()) == 10:
        day = parse_date(value, tz)
        if day is not None:
            return day_end(day, tz) if is_end else day_start(day, tz)
    return parse_instant(value, tz)


def _custom_month_range(params: WindowParams, now: datetime) -> TimeWindow:
    tz = now.tzinfo or timezone.utc
    first = _as_month(params.start_month, tz)
    last = _as_month(params.end_month, tz)
    if first is None or last is None:
        logger.warning("customMonthRange requires start and end months; using default window")
        return default_window(now)
    if first > last:
        first, last = last, first
    return TimeWindow(
        day_start(date(first[0], first[1], 1), tz),
        day_end(month_end_day(last[0], last[1]), tz),
    )


def _custom_year_range(params: WindowParams, now: datetime) -> TimeWindow:
    first = _as_year(params.start_year)
    last = _as_year(params.end_year)
    if first is None or last is None:
        single = _as_year(params.year)
        if single is None:
            logger.warning("customYearRange requires start and end years; using default window")
            return default_window(now)
        first = last = single
    if first > last:
        first, last = last, first
    return _year_span(first, last, now.tzinfo)


def _custom_week_range(params: WindowParams, now: datetime) -> TimeWindow:
    tz = now.tzinfo or timezone.utc
    first = _as_int(params.start_week)
    last = _as_int(params.end_week)
    if first is None or last is None:
        logger.warning("customWeekRange requires start and end weeks; using default window")
        return default_window(now)
    year = _as_year(params.year) or now.year
    first = _clamp_week(first)
    last = _clamp_week(last)
    if first > last:
        first, last = last, first
    return TimeWindow(
        day_start(week_start(year, first), tz),
        day_end(week_start(year, last) + timedelta(days=6), tz),
    )


def _clamp_week(week: int) -> int:
    return max(1, min(MAX_WEEK, week))


def _as_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_year(value: object) -> int | None:
    if isinstance(value, date):
        return value.year
    year = _as_int(value)
    if year is None or not 1 <= year <= 9998:
        return None
    return year


def _as_month(value: object, tz: tzinfo) -> tuple[int, int] | None:
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 7:
            text = f"{text}-01"
        day = parse_date(text, tz)
    else:
        day = parse_date(value, tz)
    if day is None:
        return None
    return day.year, day.month
