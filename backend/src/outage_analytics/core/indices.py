from __future__ import annotations

from dataclasses import dataclass

from .interruptions import SegmentAccumulators, SegmentTotals
from .population import (
    SEGMENTS,
    ZERO_POPULATION,
    PopulationSource,
    PopulationSplit,
    Segment,
    sum_populations,
)
from .stream_filter import FaultScope

DEFAULT_PRECISION = 2


@dataclass(frozen=True)
class ReliabilityIndices:
    saidi: float = 0.0
    saifi: float = 0.0
    caidi: float = 0.0
    caifi: float = 0.0
    maifi: float = 0.0

    def rounded(self, precision: int = DEFAULT_PRECISION) -> ReliabilityIndices:
        return ReliabilityIndices(
            saidi=round(self.saidi, precision),
            saifi=round(self.saifi, precision),
            caidi=round(self.caidi, precision),
            caifi=round(self.caifi, precision),
            maifi=round(self.maifi, precision),
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "saidi": self.saidi,
            "saifi": self.saifi,
            "caidi": self.caidi,
            "caifi": self.caifi,
            "maifi": self.maifi,
        }


ZERO_INDICES = ReliabilityIndices()


@dataclass(frozen=True)
class IndexReport:
    rural: ReliabilityIndices
    urban: ReliabilityIndices
    metro: ReliabilityIndices
    total: ReliabilityIndices

    def get(self, segment: Segment) -> ReliabilityIndices:
        return getattr(self, segment)

    def rounded(self, precision: int = DEFAULT_PRECISION) -> IndexReport:
        return IndexReport(
            rural=self.rural.rounded(precision),
            urban=self.urban.rounded(precision),
            metro=self.metro.rounded(precision),
            total=self.total.rounded(precision),
        )

    def as_dict(self) -> dict[str, dict[str, float]]:
        return {
            "rural": self.rural.as_dict(),
            "urban": self.urban.as_dict(),
            "metro": self.metro.as_dict(),
            "total": self.total.as_dict(),
        }


def compute_segment_indices(totals: SegmentTotals, population: int) -> ReliabilityIndices:
    saidi = totals.customer_hours_lost / population if population > 0 else 0.0
    saifi = totals.affected_customers / population if population > 0 else 0.0
    caidi = saidi / saifi if saifi > 0 else 0.0
    caifi = (
        totals.total_interruptions / totals.distinct_count
        if totals.distinct_count > 0
        else 0.0
    )
    maifi = totals.momentary_interruptions / population if population > 0 else 0.0
    return ReliabilityIndices(saidi=saidi, saifi=saifi, caidi=caidi, caifi=caifi, maifi=maifi)


def aggregate(
    accumulators: SegmentAccumulators, population: PopulationSplit | None
) -> IndexReport:
    """Turn segment accumulators into unrounded reliability indices.

    The total row pools the raw accumulators of all three segments and
    divides by the pooled population, so large segments weigh more than
    small ones. Call ``IndexReport.rounded`` at the output boundary.
    """
    population = population or ZERO_POPULATION
    per_segment = {
        segment: compute_segment_indices(accumulators.get(segment), population.get(segment))
        for segment in SEGMENTS
    }
    total = compute_segment_indices(accumulators.combined(), population.total)
    return IndexReport(
        rural=per_segment["rural"],
        urban=per_segment["urban"],
        metro=per_segment["metro"],
        total=total,
    )


def resolve_population(source: PopulationSource, scope: FaultScope | None) -> PopulationSplit:
    scope = scope or FaultScope()
    if scope.district is not None:
        return source.get_district_population(scope.district)
    if scope.region is not None:
        return sum_populations(
            district.population for district in source.list_districts(scope.region)
        )
    return sum_populations(district.population for district in source.list_districts())
