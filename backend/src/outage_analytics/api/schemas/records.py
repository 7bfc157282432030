from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from ...core.instants import parse_instant
from ...core.population import District, PopulationSplit
from ...core.records import ControlOutage, FaultRecord, LineFault

# Dates stay loosely typed so unparseable values reach the engine, which
# drops the record instead of failing the whole request.
InstantIn = Union[datetime, float, str, None]


class PopulationIn(BaseModel):
    rural: int = Field(default=0, ge=0)
    urban: int = Field(default=0, ge=0)
    metro: int = Field(default=0, ge=0)

    def to_split(self) -> PopulationSplit:
        return PopulationSplit(rural=self.rural, urban=self.urban, metro=self.metro)


class _RecordIn(BaseModel):
    id: str
    region_id: str | None = None
    district_id: str | None = None
    occurrence_date: InstantIn = None
    restoration_date: InstantIn = None
    repair_date: InstantIn = None
    repair_end_date: InstantIn = None
    status: Literal["pending", "resolved"] = "pending"
    affected_population: PopulationIn | None = None

    def _common(self, tz: tzinfo) -> dict[str, object]:
        return {
            "id": self.id,
            "region_id": self.region_id,
            "district_id": self.district_id,
            "occurrence_date": parse_instant(self.occurrence_date, tz),
            "restoration_date": parse_instant(self.restoration_date, tz),
            "repair_date": parse_instant(self.repair_date, tz),
            "repair_end_date": parse_instant(self.repair_end_date, tz),
            "status": self.status,
            "affected_population": (
                self.affected_population.to_split()
                if self.affected_population is not None
                else None
            ),
        }


class LineFaultIn(_RecordIn):
    kind: Literal["line_fault"] = "line_fault"
    fault_type: str | None = None
    fault_location: str | None = None

    def to_record(self, tz: tzinfo) -> LineFault:
        return LineFault(
            **self._common(tz),
            fault_type=self.fault_type,
            fault_location=self.fault_location,
        )


class ControlOutageIn(_RecordIn):
    kind: Literal["control_outage"]
    load_mw: float | None = None
    unserved_energy_mwh: float | None = None
    outage_category: str | None = None
    feeder_name: str | None = None
    voltage_level: str | None = None

    def to_record(self, tz: tzinfo) -> ControlOutage:
        return ControlOutage(
            **self._common(tz),
            load_mw=self.load_mw,
            unserved_energy_mwh=self.unserved_energy_mwh,
            outage_category=self.outage_category,
            feeder_name=self.feeder_name,
            voltage_level=self.voltage_level,
        )


FaultRecordIn = Annotated[Union[LineFaultIn, ControlOutageIn], Field(discriminator="kind")]


class DistrictIn(BaseModel):
    id: str
    region_id: str | None = None
    name: str | None = None
    population: PopulationIn | None = None

    def to_district(self) -> District:
        return District(
            district_id=self.id,
            region_id=self.region_id,
            name=self.name,
            population=self.population.to_split() if self.population else None,
        )


def to_records(items: list[LineFaultIn | ControlOutageIn], tz: tzinfo) -> list[FaultRecord]:
    return [item.to_record(tz) for item in items]
