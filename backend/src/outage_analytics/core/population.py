from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from math import isfinite
from typing import Literal, Protocol

Segment = Literal["rural", "urban", "metro"]

SEGMENTS: tuple[Segment, ...] = ("rural", "urban", "metro")


@dataclass(frozen=True)
class PopulationSplit:
    rural: int = 0
    urban: int = 0
    metro: int = 0

    def get(self, segment: Segment) -> int:
        return getattr(self, segment)

    @property
    def total(self) -> int:
        return self.rural + self.urban + self.metro

    def __add__(self, other: PopulationSplit) -> PopulationSplit:
        return PopulationSplit(
            rural=self.rural + other.rural,
            urban=self.urban + other.urban,
            metro=self.metro + other.metro,
        )

    def as_dict(self) -> dict[str, int]:
        return {segment: self.get(segment) for segment in SEGMENTS}


ZERO_POPULATION = PopulationSplit()


@dataclass(frozen=True)
class District:
    district_id: str
    region_id: str | None
    name: str | None = None
    population: PopulationSplit | None = None


class PopulationSource(Protocol):
    def get_district_population(self, district_id: str) -> PopulationSplit: ...

    def list_districts(self, region_id: str | None = None) -> list[District]: ...


def population_from_mapping(value: object) -> PopulationSplit | None:
    if value is None:
        return None
    if isinstance(value, PopulationSplit):
        return value
    if not isinstance(value, Mapping):
        return None
    return PopulationSplit(
        rural=_count(value.get("rural")),
        urban=_count(value.get("urban")),
        metro=_count(value.get("metro")),
    )


def sum_populations(splits: Iterable[PopulationSplit | None]) -> PopulationSplit:
    total = ZERO_POPULATION
    for split in splits:
        if split is not None:
            total = total + split
    return total


def _count(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return 0
    if isinstance(value, (int, float)):
        if not isfinite(value):
            return 0
        return max(0, int(value))
    return 0
