from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from outage_analytics.core.interruptions import (
    DistinctInterruptionTracker,
    accumulate,
    distinct_key,
)
from outage_analytics.core.population import PopulationSplit
from outage_analytics.core.records import ControlOutage, LineFault

T0 = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


def _fault(
    record_id: str,
    duration: timedelta | None,
    rural: int = 0,
    urban: int = 0,
    metro: int = 0,
    **overrides: object,
) -> LineFault:
    fields: dict[str, object] = {
        "id": record_id,
        "region_id": "r1",
        "district_id": "d1",
        "occurrence_date": T0,
        "restoration_date": T0 + duration if duration is not None else None,
        "affected_population": PopulationSplit(rural=rural, urban=urban, metro=metro),
    }
    fields.update(overrides)
    return LineFault(**fields)


def test_exactly_five_minutes_is_sustained() -> None:
    totals = accumulate([_fault("a", timedelta(minutes=5), rural=10)]).rural

    assert totals.momentary_interruptions == 0
    assert totals.sustained_interruptions == 10


def test_just_under_five_minutes_is_momentary() -> None:
    totals = accumulate([_fault("a", timedelta(minutes=4.999), rural=10)]).rural

    assert totals.momentary_interruptions == 10
    assert totals.sustained_interruptions == 0


def test_customer_hours_weight_duration_by_affected_customers() -> None:
    accumulators = accumulate(
        [_fault("a", timedelta(minutes=90), rural=10, metro=4)]
    )

    assert accumulators.rural.customer_hours_lost == pytest.approx(15.0)
    assert accumulators.metro.customer_hours_lost == pytest.approx(6.0)
    assert accumulators.urban.affected_customers == 0
    assert accumulators.urban.distinct_count == 0


def test_invalid_or_incomplete_windows_are_skipped() -> None:
    records = [
        _fault("reversed", timedelta(minutes=-30), rural=10),
        _fault("instant", timedelta(0), rural=10),
        _fault("open", None, rural=10),
        _fault("no-population", timedelta(hours=1), affected_population=None),
    ]

    totals = accumulate(records).combined()

    assert totals.total_interruptions == 0
    assert totals.customer_microseconds == 0


def test_repair_window_can_be_required() -> None:
    repaired = _fault(
        "a",
        timedelta(hours=1),
        rural=5,
        repair_date=T0,
        repair_end_date=T0 + timedelta(hours=2),
    )
    unrepaired = _fault("b", timedelta(hours=1), rural=7)

    strict = accumulate([repaired, unrepaired], require_repair_window=True)
    lenient = accumulate([repaired, unrepaired])

    assert strict.rural.affected_customers == 5
    assert lenient.rural.affected_customers == 12


def test_distinct_count_is_one_key_per_record_and_segment() -> None:
    tracker = DistinctInterruptionTracker()
    tracker.observe(_fault("a", timedelta(hours=1), rural=100, urban=20))
    tracker.observe(_fault("b", timedelta(hours=1), rural=50))

    assert tracker.distinct_count("rural") == 2
    assert tracker.distinct_count("urban") == 1
    assert tracker.totals("rural").total_interruptions == 150
    assert distinct_key("a", "rural") == "a-rural"


def test_repeated_record_id_collapses_to_one_distinct_key() -> None:
    tracker = DistinctInterruptionTracker()
    tracker.observe(_fault("a", timedelta(hours=1), rural=100))
    tracker.observe(_fault("a", timedelta(hours=2), rural=100))

    totals = tracker.totals("rural")

    assert totals.distinct_count == 1
    assert totals.total_interruptions == 200


def test_control_outages_are_tracked_like_line_faults() -> None:
    outage = ControlOutage(
        id="c1",
        region_id="r1",
        district_id="d1",
        occurrence_date=T0,
        restoration_date=T0 + timedelta(hours=3),
        affected_population=PopulationSplit(urban=40),
        load_mw=2.5,
    )

    totals = accumulate([outage]).urban

    assert totals.customer_hours_lost == pytest.approx(120.0)
    assert totals.distinct_count == 1


def test_accumulation_is_independent_of_record_order() -> None:
    records = [
        _fault(str(index), timedelta(seconds=61 + index * 37.3), rural=index + 1, metro=3)
        for index in range(50)
    ]

    forward = accumulate(records)
    backward = accumulate(list(reversed(records)))

    assert forward == backward
