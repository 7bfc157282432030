from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ...core.stream_filter import filter_records
from ...services.analytics_service import indices_for_records
from ...services.sources import Clock
from ..dependencies import get_clock, snapshot_from_request
from ..schemas.common import AnalyticsRequest, TimestampRange
from ..schemas.metrics import IndexReportOut


router = APIRouter()


@router.post("/indices", response_model=IndexReportOut)
def post_indices(
    request: AnalyticsRequest, clock: Clock = Depends(get_clock)
) -> dict[str, Any]:
    snapshot = snapshot_from_request(request, clock)
    filtered = filter_records(
        snapshot.records, snapshot.scope, snapshot.window, snapshot.criteria
    )
    report = indices_for_records(
        filtered,
        snapshot.scope,
        snapshot.population,
        require_repair_window=request.require_repair_window,
    )
    return {
        "window": TimestampRange.from_window(snapshot.window),
        "record_count": len(filtered),
        **report.as_dict(),
    }
