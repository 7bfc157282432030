from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from math import fsum
from typing import Literal

from .interruptions import MOMENTARY_THRESHOLD
from .outage_metrics import (
    customer_hours_lost,
    mttr_hours,
    outage_duration_hours,
    total_unserved_energy,
)
from .population import SEGMENTS
from .records import ControlOutage, FaultRecord

OutageClass = Literal["all", "sustained", "momentary"]

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class ControlOutageMetrics:
    total_outages: int
    total_customers_affected: int
    unserved_energy_mwh: float
    average_outage_hours: float
    customer_interruption_hours: float
    customer_interruption_frequency: int
    average_repair_hours: float
    outages_by_category: dict[str, int] = field(default_factory=dict)
    outages_by_voltage: dict[str, int] = field(default_factory=dict)
    monthly_trend: dict[str, int] = field(default_factory=dict)
    average_repair_hours_by_category: dict[str, float] = field(default_factory=dict)
    customer_hours_by_category: dict[str, float] = field(default_factory=dict)
    feeder_trips: dict[str, int] = field(default_factory=dict)


def control_outages(records: Iterable[FaultRecord]) -> list[ControlOutage]:
    return [record for record in records if isinstance(record, ControlOutage)]


def matches_outage_class(outage: ControlOutage, outage_class: OutageClass) -> bool:
    """Keep an outage for a sustained/momentary view.

    Outages without a usable duration stay in every view.
    """
    if outage_class == "all":
        return True
    if outage_duration_hours(outage) is None:
        return True
    is_momentary = outage.restoration_date - outage.occurrence_date < MOMENTARY_THRESHOLD
    return is_momentary if outage_class == "momentary" else not is_momentary


def filter_feeder_trips(
    outages: Iterable[ControlOutage], min_trip_count: int = 1
) -> list[ControlOutage]:
    """Keep outages on feeders that tripped at least ``min_trip_count`` times.

    Outages with no feeder name are always kept.
    """
    outages = list(outages)
    if min_trip_count <= 1:
        return outages
    trips = feeder_trip_counts(outages)
    return [
        outage
        for outage in outages
        if outage.feeder_name is None or trips[outage.feeder_name] >= min_trip_count
    ]


def feeder_trip_counts(outages: Iterable[ControlOutage]) -> dict[str, int]:
    return dict(Counter(outage.feeder_name for outage in outages if outage.feeder_name))


def control_outage_metrics(
    records: Iterable[FaultRecord],
    min_trip_count: int = 1,
    outage_class: OutageClass = "all",
) -> ControlOutageMetrics:
    """Aggregate the control-system view over the control outages in ``records``.

    Line faults are ignored. Averages divide by the number of outages in the
    view, so outages without a complete window count as zero hours.
    """
    outages = [
        outage
        for outage in control_outages(records)
        if matches_outage_class(outage, outage_class)
    ]
    outages = filter_feeder_trips(outages, min_trip_count)
    count = len(outages)

    durations = [outage_duration_hours(outage) or 0.0 for outage in outages]
    repairs = [mttr_hours(outage) for outage in outages]
    by_category = Counter(_category(outage) for outage in outages)

    repair_by_category: dict[str, list[float]] = {}
    customer_hours_by_category: dict[str, float] = {}
    for outage, repair in zip(outages, repairs):
        category = _category(outage)
        if repair is not None:
            repair_by_category.setdefault(category, []).append(repair)
        customer_hours_by_category[category] = customer_hours_by_category.get(
            category, 0.0
        ) + customer_hours_lost(outage)

    return ControlOutageMetrics(
        total_outages=count,
        total_customers_affected=sum(
            outage.affected_population.total
            for outage in outages
            if outage.affected_population is not None
        ),
        unserved_energy_mwh=total_unserved_energy(outages),
        average_outage_hours=fsum(durations) / count if count else 0.0,
        customer_interruption_hours=fsum(customer_hours_lost(outage) for outage in outages),
        customer_interruption_frequency=sum(_segments_hit(outage) for outage in outages),
        average_repair_hours=(
            fsum(repair for repair in repairs if repair is not None) / count if count else 0.0
        ),
        outages_by_category=dict(by_category),
        outages_by_voltage=dict(
            Counter(outage.voltage_level or UNKNOWN for outage in outages)
        ),
        monthly_trend=monthly_trend(outages),
        average_repair_hours_by_category={
            category: fsum(hours) / by_category[category]
            for category, hours in repair_by_category.items()
        },
        customer_hours_by_category=customer_hours_by_category,
        feeder_trips=feeder_trip_counts(outages),
    )


def monthly_trend(records: Iterable[FaultRecord]) -> dict[str, int]:
    """Count records per ``YYYY-MM`` month of occurrence, oldest month first."""
    months = Counter(
        record.occurrence_date.strftime("%Y-%m")
        for record in records
        if record.occurrence_date is not None
    )
    return dict(sorted(months.items()))


def _category(outage: ControlOutage) -> str:
    return outage.outage_category or UNKNOWN


def _segments_hit(outage: ControlOutage) -> int:
    if outage.affected_population is None:
        return 0
    return sum(1 for segment in SEGMENTS if outage.affected_population.get(segment) > 0)
