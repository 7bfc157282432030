from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..config import index_precision
from ..core.control_metrics import ControlOutageMetrics, OutageClass, control_outage_metrics
from ..core.indices import IndexReport, aggregate, resolve_population
from ..core.interruptions import accumulate
from ..core.outage_metrics import MttrReport, OutageSummary, mttr_report, outage_summary
from ..core.population import PopulationSource
from ..core.records import FaultRecord
from ..core.stream_filter import FaultCriteria, FaultScope, filter_records
from ..core.time_window import RangeSelector, TimeWindow, WindowParams
from ..core.time_window import resolve_window as resolve_time_window
from .sources import Clock, RecordSource, SystemClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsQuery:
    """Everything a dashboard view selects, passed explicitly per call."""

    scope: FaultScope = field(default_factory=FaultScope)
    criteria: FaultCriteria = field(default_factory=FaultCriteria)
    selector: RangeSelector | str | None = RangeSelector.ALL
    params: WindowParams = field(default_factory=WindowParams)
    require_repair_window: bool = False


@dataclass(frozen=True)
class AnalyticsReport:
    window: TimeWindow
    indices: IndexReport
    mttr: MttrReport
    summary: OutageSummary
    record_count: int


def resolve_window(
    selector: RangeSelector | str | None,
    params: WindowParams | None = None,
    clock: Clock | None = None,
) -> TimeWindow:
    clock = clock or SystemClock()
    return resolve_time_window(selector, params, clock.now())


def compute_indices(
    records: Iterable[FaultRecord],
    scope: FaultScope | None,
    window: TimeWindow | None,
    population: PopulationSource,
    criteria: FaultCriteria | None = None,
    require_repair_window: bool = False,
    precision: int | None = None,
) -> IndexReport:
    filtered = filter_records(records, scope, window, criteria)
    return indices_for_records(filtered, scope, population, require_repair_window, precision)


def compute_mttr(
    records: Iterable[FaultRecord],
    scope: FaultScope | None,
    window: TimeWindow | None,
    population: PopulationSource,
    criteria: FaultCriteria | None = None,
) -> MttrReport:
    filtered = filter_records(records, scope, window, criteria)
    return _mttr_for(filtered, scope, population)


def compute_summary(
    records: Iterable[FaultRecord],
    scope: FaultScope | None,
    window: TimeWindow | None,
    criteria: FaultCriteria | None = None,
) -> OutageSummary:
    return outage_summary(filter_records(records, scope, window, criteria))


def compute_control_metrics(
    records: Iterable[FaultRecord],
    scope: FaultScope | None,
    window: TimeWindow | None,
    criteria: FaultCriteria | None = None,
    min_trip_count: int = 1,
    outage_class: OutageClass = "all",
) -> ControlOutageMetrics:
    filtered = filter_records(records, scope, window, criteria)
    return control_outage_metrics(filtered, min_trip_count, outage_class)


def run_report(
    query: AnalyticsQuery,
    record_source: RecordSource,
    population_source: PopulationSource,
    clock: Clock | None = None,
    precision: int | None = None,
) -> AnalyticsReport:
    window = resolve_window(query.selector, query.params, clock)
    filtered = filter_records(
        record_source.get_records(), query.scope, window, query.criteria
    )
    logger.info(
        "Computing report for %d records (scope=%s, selector=%s)",
        len(filtered),
        query.scope,
        query.selector,
    )
    return AnalyticsReport(
        window=window,
        indices=indices_for_records(
            filtered,
            query.scope,
            population_source,
            query.require_repair_window,
            precision,
        ),
        mttr=_mttr_for(filtered, query.scope, population_source),
        summary=outage_summary(filtered),
        record_count=len(filtered),
    )


def indices_for_records(
    filtered: Iterable[FaultRecord],
    scope: FaultScope | None,
    population: PopulationSource,
    require_repair_window: bool = False,
    precision: int | None = None,
) -> IndexReport:
    """Compute rounded indices over records the caller has already filtered."""
    accumulators = accumulate(filtered, require_repair_window=require_repair_window)
    denominators = resolve_population(population, scope)
    report = aggregate(accumulators, denominators)
    return report.rounded(index_precision() if precision is None else precision)


def _mttr_for(
    filtered: list[FaultRecord],
    scope: FaultScope | None,
    population: PopulationSource,
) -> MttrReport:
    scope = scope or FaultScope()
    region = scope.region
    return mttr_report(filtered, scope, population.list_districts(region))
