from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from math import fsum

from .population import District, PopulationSplit, sum_populations
from .records import CONTROL_OUTAGE, LINE_FAULT, ControlOutage, FaultRecord, LineFault
from .stream_filter import FaultScope

logger = logging.getLogger(__name__)


def outage_duration_hours(record: FaultRecord) -> float | None:
    if record.occurrence_date is None or record.restoration_date is None:
        return None
    seconds = (record.restoration_date - record.occurrence_date).total_seconds()
    if seconds <= 0:
        return None
    return seconds / 3600


def mttr_hours(record: FaultRecord) -> float | None:
    if record.repair_date is None or record.repair_end_date is None:
        return None
    seconds = (record.repair_end_date - record.repair_date).total_seconds()
    if seconds <= 0:
        return None
    return seconds / 3600


def customer_hours_lost(record: FaultRecord) -> float:
    duration = outage_duration_hours(record)
    if duration is None or record.affected_population is None:
        return 0.0
    return duration * record.affected_population.total


def unserved_energy_mwh(load_mw: float | None, duration_hours: float | None) -> float:
    if load_mw is None or load_mw <= 0:
        logger.warning("Load must be positive to compute unserved energy, got %r", load_mw)
        return 0.0
    if duration_hours is None or duration_hours <= 0:
        logger.warning(
            "Duration must be positive to compute unserved energy, got %r", duration_hours
        )
        return 0.0
    return load_mw * duration_hours


def outage_unserved_energy(outage: ControlOutage) -> float:
    if outage.unserved_energy_mwh is not None and outage.unserved_energy_mwh > 0:
        return outage.unserved_energy_mwh
    return unserved_energy_mwh(outage.load_mw, outage_duration_hours(outage))


def total_unserved_energy(outages: Iterable[ControlOutage]) -> float:
    """Sum stored or derived unserved energy over control outages.

    Outages with neither a stored value nor a positive load and duration
    contribute 0 and are reported in a single warning.
    """
    energies = []
    missing = 0
    for outage in outages:
        energy = _known_unserved_energy(outage)
        if energy is None:
            missing += 1
        else:
            energies.append(energy)
    if missing:
        logger.warning(
            "%d control outage(s) lack load or duration; counted as 0 MWh unserved", missing
        )
    return fsum(energies)


@dataclass(frozen=True)
class AreaMttr:
    area_id: str
    name: str | None
    average_mttr_hours: float
    mttr_count: int
    line_fault_count: int


@dataclass(frozen=True)
class MttrReport:
    average_mttr_hours: float
    total_mttr_hours: float
    mttr_count: int
    line_fault_count: int
    level: str
    areas: list[AreaMttr] = field(default_factory=list)


def mttr_report(
    records: Iterable[FaultRecord],
    scope: FaultScope | None,
    districts: Sequence[District],
) -> MttrReport:
    """Summarise repair times for line faults.

    The breakdown follows the scope: a district scope reports that district,
    a region scope reports each of its districts, and the global scope
    reports each region.
    """
    scope = scope or FaultScope()
    line_faults = [record for record in records if isinstance(record, LineFault)]
    repairs = _repair_hours(line_faults)
    total = fsum(repairs.values())

    if scope.district is not None:
        level = "district"
        names = {district.district_id: district.name for district in districts}
        area_ids = [scope.district]
        area_of = _district_of
    elif scope.region is not None:
        level = "region"
        names = {
            district.district_id: district.name
            for district in districts
            if district.region_id == scope.region
        }
        area_ids = list(names)
        area_of = _district_of
    else:
        level = "global"
        names = {}
        area_ids = []
        for district in districts:
            if district.region_id is not None and district.region_id not in area_ids:
                area_ids.append(district.region_id)
        area_of = _region_of

    if level != "district":
        for fault in line_faults:
            area = area_of(fault)
            if area is not None and area not in area_ids:
                area_ids.append(area)

    areas = []
    for area_id in area_ids:
        in_area = [fault for fault in line_faults if area_of(fault) == area_id]
        area_repairs = [repairs[fault.id] for fault in in_area if fault.id in repairs]
        areas.append(
            AreaMttr(
                area_id=area_id,
                name=names.get(area_id),
                average_mttr_hours=_mean(area_repairs),
                mttr_count=len(area_repairs),
                line_fault_count=len(in_area),
            )
        )

    return MttrReport(
        average_mttr_hours=total / len(repairs) if repairs else 0.0,
        total_mttr_hours=total,
        mttr_count=len(repairs),
        line_fault_count=len(line_faults),
        level=level,
        areas=areas,
    )


@dataclass(frozen=True)
class OutageSummary:
    total_records: int
    line_faults: int
    control_outages: int
    pending: int
    resolved: int
    customer_hours_lost: float
    unserved_energy_mwh: float
    affected_customers: PopulationSplit


def outage_summary(records: Iterable[FaultRecord]) -> OutageSummary:
    records = list(records)
    kinds = [record.kind for record in records]
    statuses = [record.status for record in records]
    return OutageSummary(
        total_records=len(records),
        line_faults=kinds.count(LINE_FAULT),
        control_outages=kinds.count(CONTROL_OUTAGE),
        pending=statuses.count("pending"),
        resolved=statuses.count("resolved"),
        customer_hours_lost=fsum(customer_hours_lost(record) for record in records),
        unserved_energy_mwh=total_unserved_energy(
            record for record in records if isinstance(record, ControlOutage)
        ),
        affected_customers=sum_populations(
            record.affected_population for record in records
        ),
    )


def summary_as_dict(summary: OutageSummary) -> dict[str, object]:
    return {
        "total_records": summary.total_records,
        "line_faults": summary.line_faults,
        "control_outages": summary.control_outages,
        "pending": summary.pending,
        "resolved": summary.resolved,
        "customer_hours_lost": summary.customer_hours_lost,
        "unserved_energy_mwh": summary.unserved_energy_mwh,
        "affected_customers": summary.affected_customers.as_dict(),
    }


def _repair_hours(faults: Iterable[LineFault]) -> dict[str, float]:
    repairs: dict[str, float] = {}
    for fault in faults:
        hours = mttr_hours(fault)
        if hours is not None:
            repairs[fault.id] = hours
    return repairs


def _district_of(record: FaultRecord) -> str | None:
    return record.district_id


def _region_of(record: FaultRecord) -> str | None:
    return record.region_id


def _mean(values: list[float]) -> float:
    if not values:
        return 0.0
    return fsum(values) / len(values)


def _known_unserved_energy(outage: ControlOutage) -> float | None:
    if outage.unserved_energy_mwh is not None and outage.unserved_energy_mwh > 0:
        return outage.unserved_energy_mwh
    duration = outage_duration_hours(outage)
    if outage.load_mw is None or outage.load_mw <= 0 or duration is None:
        return None
    return outage.load_mw * duration
