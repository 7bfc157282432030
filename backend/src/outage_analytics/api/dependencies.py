from __future__ import annotations

from dataclasses import dataclass

from ..config import analytics_timezone
from ..core.records import FaultRecord
from ..core.stream_filter import FaultCriteria, FaultScope
from ..core.time_window import TimeWindow
from ..services.analytics_service import resolve_window
from ..services.sources import Clock, PopulationTable, SystemClock
from .schemas.common import AnalyticsRequest
from .schemas.records import to_records


def get_clock() -> Clock:
    return SystemClock()


@dataclass(frozen=True)
class RequestSnapshot:
    records: list[FaultRecord]
    population: PopulationTable
    scope: FaultScope
    criteria: FaultCriteria
    window: TimeWindow


def snapshot_from_request(request: AnalyticsRequest, clock: Clock) -> RequestSnapshot:
    tz = analytics_timezone()
    return RequestSnapshot(
        records=to_records(request.records, tz),
        population=PopulationTable(district.to_district() for district in request.districts),
        scope=request.scope.to_scope(),
        criteria=request.criteria.to_criteria(),
        window=resolve_window(request.selector, request.params.to_params(), clock),
    )
