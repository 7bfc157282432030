from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from outage_analytics.core.records import ControlOutage, LineFault
from outage_analytics.core.stream_filter import (
    FaultCriteria,
    FaultScope,
    filter_records,
    merge_records,
)
from outage_analytics.core.time_window import TimeWindow


def _at(day: int, hour: int = 0) -> datetime:
    return datetime(2024, 3, day, hour, tzinfo=timezone.utc)


def _line(record_id: str, **overrides: object) -> LineFault:
    fields: dict[str, object] = {
        "id": record_id,
        "region_id": "r1",
        "district_id": "d1",
        "occurrence_date": _at(10),
        "fault_type": "Unplanned",
    }
    fields.update(overrides)
    return LineFault(**fields)


def _control(record_id: str, **overrides: object) -> ControlOutage:
    fields: dict[str, object] = {
        "id": record_id,
        "region_id": "r1",
        "district_id": "d1",
        "occurrence_date": _at(10),
        "load_mw": 4.0,
    }
    fields.update(overrides)
    return ControlOutage(**fields)


def _ids(records: list) -> set[str]:
    return {record.id for record in records}


def test_scope_filters_region_and_district_independently() -> None:
    records = [
        _line("a"),
        _line("b", district_id="d2"),
        _line("c", region_id="r2", district_id="d1"),
    ]

    by_region = filter_records(records, FaultScope(region_id="r1"))
    by_district = filter_records(records, FaultScope(district_id="d1"))
    by_both = filter_records(records, FaultScope(region_id="r1", district_id="d1"))

    assert _ids(by_region) == {"a", "b"}
    assert _ids(by_district) == {"a", "c"}
    assert _ids(by_both) == {"a"}


def test_all_means_no_restriction() -> None:
    records = [_line("a"), _line("b", region_id="r2", status="resolved")]

    output = filter_records(
        records,
        FaultScope(region_id="all", district_id="all"),
        criteria=FaultCriteria(status="all", fault_type="all"),
    )

    assert _ids(output) == {"a", "b"}


def test_fault_type_filter_excludes_control_outages() -> None:
    records = [_line("a"), _line("b", fault_type="Planned"), _control("c")]

    typed = filter_records(records, criteria=FaultCriteria(fault_type="Unplanned"))
    untyped = filter_records(records)

    assert _ids(typed) == {"a"}
    assert _ids(untyped) == {"a", "b", "c"}


def test_status_and_kind_filters() -> None:
    records = [_line("a", status="resolved"), _line("b"), _control("c", status="resolved")]

    resolved = filter_records(records, criteria=FaultCriteria(status="resolved"))
    outages = filter_records(records, criteria=FaultCriteria(kind="control_outage"))

    assert _ids(resolved) == {"a", "c"}
    assert _ids(outages) == {"c"}


def test_time_window_bounds_are_inclusive() -> None:
    window = TimeWindow(_at(10), _at(12))
    records = [
        _line("start", occurrence_date=_at(10)),
        _line("end", occurrence_date=_at(12)),
        _line("before", occurrence_date=_at(9, 23)),
        _line("after", occurrence_date=_at(12, 1)),
    ]

    output = filter_records(records, window=window)

    assert _ids(output) == {"start", "end"}


def test_record_without_occurrence_date_is_dropped_with_warning(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING)
    records = [_line("good"), _line("bad", occurrence_date=None)]

    output = filter_records(records)

    assert _ids(output) == {"good"}
    assert "bad" in caplog.text


def test_merge_records_keeps_first_seen_id() -> None:
    first = _line("x", fault_location="pole 12")
    duplicate = _control("x")

    merged = merge_records([first, _line("y")], [duplicate, _control("z")])

    assert [record.id for record in merged] == ["x", "y", "z"]
    assert merged[0] is first
