from __future__ import annotations

from pydantic import BaseModel

from .common import TimestampRange


class IndicesOut(BaseModel):
    saidi: float = 0.0
    saifi: float = 0.0
    caidi: float = 0.0
    caifi: float = 0.0
    maifi: float = 0.0


class IndexReportOut(BaseModel):
    window: TimestampRange
    record_count: int
    rural: IndicesOut
    urban: IndicesOut
    metro: IndicesOut
    total: IndicesOut


class AreaMttrOut(BaseModel):
    area_id: str
    name: str | None = None
    average_mttr_hours: float
    mttr_count: int
    line_fault_count: int


class MttrReportOut(BaseModel):
    window: TimestampRange
    level: str
    average_mttr_hours: float
    total_mttr_hours: float
    mttr_count: int
    line_fault_count: int
    areas: list[AreaMttrOut]


class PopulationOut(BaseModel):
    rural: int
    urban: int
    metro: int


class OutageSummaryOut(BaseModel):
    window: TimestampRange
    total_records: int
    line_faults: int
    control_outages: int
    pending: int
    resolved: int
    customer_hours_lost: float
    unserved_energy_mwh: float
    affected_customers: PopulationOut


class ControlOutageMetricsOut(BaseModel):
    window: TimestampRange
    total_outages: int
    total_customers_affected: int
    unserved_energy_mwh: float
    average_outage_hours: float
    customer_interruption_hours: float
    customer_interruption_frequency: int
    average_repair_hours: float
    outages_by_category: dict[str, int]
    outages_by_voltage: dict[str, int]
    monthly_trend: dict[str, int]
    average_repair_hours_by_category: dict[str, float]
    customer_hours_by_category: dict[str, float]
    feeder_trips: dict[str, int]
