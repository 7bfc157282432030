from __future__ import annotations

from datetime import datetime
from typing import Literal, Union

from pydantic import BaseModel, Field

from ...core.stream_filter import FaultCriteria, FaultScope
from ...core.time_window import TimeWindow, WindowParams
from .records import DistrictIn, FaultRecordIn

ParamIn = Union[int, str, None]


class TimestampRange(BaseModel):
    start: datetime | None = None
    end: datetime | None = None
    unbounded: bool = False

    @classmethod
    def from_window(cls, window: TimeWindow) -> TimestampRange:
        return cls(start=window.start, end=window.end, unbounded=window.is_unbounded)


class ScopeIn(BaseModel):
    region_id: str | None = None
    district_id: str | None = None

    def to_scope(self) -> FaultScope:
        return FaultScope(region_id=self.region_id, district_id=self.district_id)


class CriteriaIn(BaseModel):
    status: str | None = None
    fault_type: str | None = None
    kind: Literal["line_fault", "control_outage"] | None = None

    def to_criteria(self) -> FaultCriteria:
        return FaultCriteria(status=self.status, fault_type=self.fault_type, kind=self.kind)


class WindowParamsIn(BaseModel):
    days: ParamIn = None
    start: ParamIn = None
    end: ParamIn = None
    start_month: ParamIn = None
    end_month: ParamIn = None
    start_year: ParamIn = None
    end_year: ParamIn = None
    start_week: ParamIn = None
    end_week: ParamIn = None
    year: ParamIn = None

    def to_params(self) -> WindowParams:
        return WindowParams(**self.model_dump())


class AnalyticsRequest(BaseModel):
    records: list[FaultRecordIn] = Field(default_factory=list)
    districts: list[DistrictIn] = Field(default_factory=list)
    scope: ScopeIn = Field(default_factory=ScopeIn)
    criteria: CriteriaIn = Field(default_factory=CriteriaIn)
    selector: str = "all"
    params: WindowParamsIn = Field(default_factory=WindowParamsIn)
    require_repair_window: bool = False


class ControlMetricsRequest(AnalyticsRequest):
    min_trip_count: int = Field(default=1, ge=1)
    outage_class: Literal["all", "sustained", "momentary"] = "all"
