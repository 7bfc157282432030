from __future__ import annotations

from fastapi import APIRouter, Depends

from ...core.time_window import WindowParams
from ...services.analytics_service import resolve_window
from ...services.sources import Clock
from ..dependencies import get_clock
from ..schemas.common import TimestampRange


router = APIRouter()


@router.get("/window", response_model=TimestampRange)
def get_window(
    selector: str = "all",
    days: str | None = None,
    start: str | None = None,
    end: str | None = None,
    start_month: str | None = None,
    end_month: str | None = None,
    start_year: str | None = None,
    end_year: str | None = None,
    start_week: str | None = None,
    end_week: str | None = None,
    year: str | None = None,
    clock: Clock = Depends(get_clock),
) -> TimestampRange:
    params = WindowParams(
        days=days,
        start=start,
        end=end,
        start_month=start_month,
        end_month=end_month,
        start_year=start_year,
        end_year=end_year,
        start_week=start_week,
        end_week=end_week,
        year=year,
    )
    return TimestampRange.from_window(resolve_window(selector, params, clock))
