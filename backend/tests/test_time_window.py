from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from outage_analytics.core.time_window import (
    RangeSelector,
    TimeWindow,
    WindowParams,
    parse_selector,
    resolve_window,
    week_start,
)

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def _utc(*parts: int) -> datetime:
    return datetime(*parts, tzinfo=timezone.utc)


def _end_of(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, 23, 59, 59, 999_999, tzinfo=timezone.utc)


def test_last_n_days_includes_today() -> None:
    window = resolve_window("lastNDays", WindowParams(days=2), NOW)

    assert window.start == _utc(2024, 3, 13)
    assert window.end == _end_of(date(2024, 3, 15))
    assert (window.end.date() - window.start.date()).days + 1 == 3


def test_naive_now_defaults_to_utc(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANALYTICS_TIMEZONE", raising=False)

    window = resolve_window("lastNDays", WindowParams(days=2), datetime(2024, 3, 15, 12, 0))

    assert window.start == _utc(2024, 3, 13)


def test_naive_now_uses_configured_timezone(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANALYTICS_TIMEZONE", "America/New_York")
    new_york = ZoneInfo("America/New_York")

    window = resolve_window("today", None, datetime(2024, 3, 15, 12, 0))

    assert window.start.tzinfo == new_york
    assert window.start == datetime(2024, 3, 15, tzinfo=new_york)
    assert window.end == datetime(2024, 3, 15, 23, 59, 59, 999_999, tzinfo=new_york)


def test_all_selector_is_unbounded() -> None:
    window = resolve_window(RangeSelector.ALL, None, NOW)

    assert window.is_unbounded
    assert window.contains(_utc(1990, 1, 1))


def test_today_and_yesterday() -> None:
    today = resolve_window("today", None, NOW)
    yesterday = resolve_window("yesterday", None, NOW)

    assert today == TimeWindow(_utc(2024, 3, 15), _end_of(date(2024, 3, 15)))
    assert yesterday == TimeWindow(_utc(2024, 3, 14), _end_of(date(2024, 3, 14)))


def test_trailing_presets() -> None:
    week = resolve_window("last7Days", None, NOW)
    month = resolve_window("last30Days", None, NOW)

    assert week.start == _utc(2024, 3, 9)
    assert month.start == _utc(2024, 2, 15)
    assert week.end == month.end == _end_of(date(2024, 3, 15))


def test_last_calendar_year_is_previous_full_year() -> None:
    window = resolve_window("lastCalendarYear", None, NOW)

    assert window.start == _utc(2023, 1, 1)
    assert window.end == _end_of(date(2023, 12, 31))


def test_custom_range_with_dates_covers_whole_days() -> None:
    params = WindowParams(start=date(2024, 3, 1), end="2024-03-02")

    window = resolve_window("customRange", params, NOW)

    assert window.start == _utc(2024, 3, 1)
    assert window.end == _end_of(date(2024, 3, 2))


def test_custom_range_keeps_explicit_instants_and_swaps_reversed() -> None:
    params = WindowParams(start="2024-03-02T10:30:00Z", end=_utc(2024, 3, 1, 8))

    window = resolve_window("customRange", params, NOW)

    assert window.start == _utc(2024, 3, 1, 8)
    assert window.end == _utc(2024, 3, 2, 10, 30)


def test_custom_range_missing_bound_falls_back_to_current_year() -> None:
    window = resolve_window("customRange", WindowParams(start="2024-03-01"), NOW)

    assert window.start == _utc(2024, 1, 1)
    assert window.end == _end_of(date(2024, 12, 31))


def test_custom_month_range_swaps_reversed_months() -> None:
    params = WindowParams(start_month="2024-05", end_month=date(2024, 2, 10))

    window = resolve_window("customMonthRange", params, NOW)

    assert window.start == _utc(2024, 2, 1)
    assert window.end == _end_of(date(2024, 5, 31))


def test_custom_year_range() -> None:
    swapped = resolve_window("customYearRange", WindowParams(start_year=2022, end_year="2020"), NOW)
    single = resolve_window("customYearRange", WindowParams(year=2021), NOW)

    assert swapped.start == _utc(2020, 1, 1)
    assert swapped.end == _end_of(date(2022, 12, 31))
    assert single.start == _utc(2021, 1, 1)
    assert single.end == _end_of(date(2021, 12, 31))


def test_custom_week_range_swaps_reversed_weeks() -> None:
    params = WindowParams(start_week=10, end_week=5, year=2024)

    window = resolve_window("customWeekRange", params, NOW)

    assert window.start == _utc(2024, 1, 29)
    assert window.end == _end_of(date(2024, 3, 10))


def test_week_arithmetic_counts_from_january_first_not_monday() -> None:
    # 2025-01-01 is a Wednesday; week 1 still starts there.
    assert week_start(2025, 1) == date(2025, 1, 1)
    assert week_start(2025, 1).weekday() == 2
    assert week_start(2025, 2) == date(2025, 1, 8)


def test_custom_week_range_defaults_year_and_clamps_weeks() -> None:
    window = resolve_window("customWeekRange", WindowParams(start_week=0, end_week="1"), NOW)

    assert window.start == _utc(2024, 1, 1)
    assert window.end == _end_of(date(2024, 1, 7))


def test_missing_day_count_falls_back_without_raising() -> None:
    window = resolve_window("lastNDays", WindowParams(days="soon"), NOW)

    assert window.start == _utc(2024, 1, 1)


def test_unknown_selector_logs_and_uses_default(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)

    window = resolve_window("fortnight", None, NOW)

    assert window.start == _utc(2024, 1, 1)
    assert "fortnight" in caplog.text


def test_legacy_aliases_map_to_selectors() -> None:
    assert parse_selector("days") is RangeSelector.LAST_N_DAYS
    assert parse_selector("custom-week") is RangeSelector.CUSTOM_WEEK_RANGE
    assert parse_selector("LAST7DAYS") is RangeSelector.LAST_7_DAYS
    assert parse_selector(None) is RangeSelector.ALL
    assert parse_selector("bogus") is None


def test_day_boundaries_follow_now_timezone() -> None:
    new_york = ZoneInfo("America/New_York")
    now = datetime(2024, 3, 15, 12, 0, tzinfo=new_york)

    window = resolve_window("today", None, now)

    assert window.start == datetime(2024, 3, 15, tzinfo=new_york)
    assert window.start.utcoffset() == now.utcoffset()
