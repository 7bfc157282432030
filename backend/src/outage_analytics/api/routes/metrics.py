from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends

from ...core.outage_metrics import summary_as_dict
from ...services.analytics_service import (
    compute_control_metrics,
    compute_mttr,
    compute_summary,
)
from ...services.sources import Clock
from ..dependencies import get_clock, snapshot_from_request
from ..schemas.common import AnalyticsRequest, ControlMetricsRequest, TimestampRange
from ..schemas.metrics import ControlOutageMetricsOut, MttrReportOut, OutageSummaryOut


router = APIRouter()


@router.post("/mttr", response_model=MttrReportOut)
def post_mttr(request: AnalyticsRequest, clock: Clock = Depends(get_clock)) -> dict[str, Any]:
    snapshot = snapshot_from_request(request, clock)
    report = compute_mttr(
        snapshot.records,
        snapshot.scope,
        snapshot.window,
        snapshot.population,
        snapshot.criteria,
    )
    return {"window": TimestampRange.from_window(snapshot.window), **asdict(report)}


@router.post("/summary", response_model=OutageSummaryOut)
def post_summary(
    request: AnalyticsRequest, clock: Clock = Depends(get_clock)
) -> dict[str, Any]:
    snapshot = snapshot_from_request(request, clock)
    summary = compute_summary(
        snapshot.records, snapshot.scope, snapshot.window, snapshot.criteria
    )
    return {"window": TimestampRange.from_window(snapshot.window), **summary_as_dict(summary)}


@router.post("/control-outages", response_model=ControlOutageMetricsOut)
def post_control_outages(
    request: ControlMetricsRequest, clock: Clock = Depends(get_clock)
) -> dict[str, Any]:
    snapshot = snapshot_from_request(request, clock)
    metrics = compute_control_metrics(
        snapshot.records,
        snapshot.scope,
        snapshot.window,
        snapshot.criteria,
        min_trip_count=request.min_trip_count,
        outage_class=request.outage_class,
    )
    return {"window": TimestampRange.from_window(snapshot.window), **asdict(metrics)}
