from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Literal, Union

from ..config import analytics_timezone
from .instants import ensure_aware, parse_instant
from .population import PopulationSplit, population_from_mapping

RecordKind = Literal["line_fault", "control_outage"]
FaultStatus = Literal["pending", "resolved"]

LINE_FAULT: RecordKind = "line_fault"
CONTROL_OUTAGE: RecordKind = "control_outage"


@dataclass(frozen=True)
class LineFault:
    id: str
    region_id: str | None
    district_id: str | None
    occurrence_date: datetime | None
    restoration_date: datetime | None = None
    repair_date: datetime | None = None
    repair_end_date: datetime | None = None
    status: FaultStatus = "pending"
    affected_population: PopulationSplit | None = None
    fault_type: str | None = None
    fault_location: str | None = None
    kind: Literal["line_fault"] = "line_fault"

    def __post_init__(self) -> None:
        _normalize_instants(self)


@dataclass(frozen=True)
class ControlOutage:
    id: str
    region_id: str | None
    district_id: str | None
    occurrence_date: datetime | None
    restoration_date: datetime | None = None
    repair_date: datetime | None = None
    repair_end_date: datetime | None = None
    status: FaultStatus = "pending"
    affected_population: PopulationSplit | None = None
    load_mw: float | None = None
    unserved_energy_mwh: float | None = None
    outage_category: str | None = None
    feeder_name: str | None = None
    voltage_level: str | None = None
    kind: Literal["control_outage"] = "control_outage"

    def __post_init__(self) -> None:
        _normalize_instants(self)


FaultRecord = Union[LineFault, ControlOutage]

INSTANT_FIELDS = ("occurrence_date", "restoration_date", "repair_date", "repair_end_date")

_CONTROL_OUTAGE_MARKERS = ("loadMW", "load_mw", "unservedEnergyMWh", "unserved_energy_mwh")


def record_from_mapping(
    row: Mapping[str, Any], default_tz: tzinfo | None = None
) -> FaultRecord:
    """Build a typed record from a stored row.

    Keys may be camelCase (as written by the dashboard) or snake_case.
    Dates that cannot be parsed become ``None``; the stream filter drops
    records without an occurrence date.
    """
    default_tz = default_tz or analytics_timezone()
    kind = _record_kind(row)
    common: dict[str, Any] = {
        "id": str(_pick(row, "id")),
        "region_id": _optional_str(_pick(row, "regionId", "region_id")),
        "district_id": _optional_str(_pick(row, "districtId", "district_id")),
        "occurrence_date": parse_instant(
            _pick(row, "occurrenceDate", "occurrence_date"), default_tz
        ),
        "restoration_date": parse_instant(
            _pick(row, "restorationDate", "restoration_date"), default_tz
        ),
        "repair_date": parse_instant(
            _pick(row, "repairDate", "repair_date", "repairStartDate", "repair_start_date"),
            default_tz,
        ),
        "repair_end_date": parse_instant(
            _pick(row, "repairEndDate", "repair_end_date"), default_tz
        ),
        "status": _status(_pick(row, "status")),
        "affected_population": population_from_mapping(
            _pick(
                row,
                "affectedPopulation",
                "affected_population",
                "customersAffected",
                "customers_affected",
            )
        ),
    }
    if kind == CONTROL_OUTAGE:
        return ControlOutage(
            **common,
            load_mw=_optional_float(_pick(row, "loadMW", "load_mw")),
            unserved_energy_mwh=_optional_float(
                _pick(row, "unservedEnergyMWh", "unserved_energy_mwh")
            ),
            outage_category=_optional_str(_pick(row, "faultType", "fault_type")),
            feeder_name=_optional_str(_pick(row, "feederName", "feeder_name")),
            voltage_level=_optional_str(_pick(row, "voltageLevel", "voltage_level")),
        )
    return LineFault(
        **common,
        fault_type=_optional_str(_pick(row, "faultType", "fault_type")),
        fault_location=_optional_str(_pick(row, "faultLocation", "fault_location")),
    )


def records_from_rows(
    rows: Iterable[Mapping[str, Any]], default_tz: tzinfo | None = None
) -> list[FaultRecord]:
    default_tz = default_tz or analytics_timezone()
    return [record_from_mapping(row, default_tz) for row in rows]


def _record_kind(row: Mapping[str, Any]) -> RecordKind:
    explicit = row.get("kind")
    if explicit in (LINE_FAULT, CONTROL_OUTAGE):
        return explicit
    if any(key in row for key in _CONTROL_OUTAGE_MARKERS):
        return CONTROL_OUTAGE
    return LINE_FAULT


def _pick(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return None


def _status(value: object) -> FaultStatus:
    if isinstance(value, str) and value.strip().lower() == "resolved":
        return "resolved"
    return "pending"


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _normalize_instants(record: LineFault | ControlOutage) -> None:
    # Naive instants are read in the configured analytics timezone.
    naive = [name for name in INSTANT_FIELDS if _is_naive(getattr(record, name))]
    if not naive:
        return
    tz = analytics_timezone()
    for name in naive:
        object.__setattr__(record, name, ensure_aware(getattr(record, name), tz))


def _is_naive(value: object) -> bool:
    return isinstance(value, datetime) and value.tzinfo is None
