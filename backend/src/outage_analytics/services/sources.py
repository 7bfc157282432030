from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Protocol

from ..config import analytics_timezone
from ..core.instants import ensure_aware
from ..core.population import (
    ZERO_POPULATION,
    District,
    PopulationSource,
    PopulationSplit,
    population_from_mapping,
)
from ..core.records import FaultRecord

__all__ = [
    "Clock",
    "FixedClock",
    "InMemoryRecordSource",
    "PopulationSource",
    "PopulationTable",
    "RecordSource",
    "SystemClock",
    "districts_from_rows",
]


class RecordSource(Protocol):
    def get_records(self) -> list[FaultRecord]: ...


class Clock(Protocol):
    def now(self) -> datetime: ...


class InMemoryRecordSource:
    def __init__(self, records: Iterable[FaultRecord]) -> None:
        self._records = tuple(records)

    def get_records(self) -> list[FaultRecord]:
        return list(self._records)


class PopulationTable:
    """Population source backed by a fixed list of districts."""

    def __init__(self, districts: Iterable[District]) -> None:
        self._districts = tuple(districts)

    def get_district_population(self, district_id: str) -> PopulationSplit:
        for district in self._districts:
            if district.district_id == district_id:
                return district.population or ZERO_POPULATION
        return ZERO_POPULATION

    def list_districts(self, region_id: str | None = None) -> list[District]:
        if region_id is None:
            return list(self._districts)
        return [district for district in self._districts if district.region_id == region_id]


class SystemClock:
    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(tz=self._tz or analytics_timezone())


@dataclass(frozen=True)
class FixedClock:
    instant: datetime

    def now(self) -> datetime:
        return ensure_aware(self.instant, analytics_timezone())


def districts_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[District]:
    return [
        District(
            district_id=str(row.get("id") or row.get("district_id")),
            region_id=_optional_str(row.get("regionId") or row.get("region_id")),
            name=_optional_str(row.get("name")),
            population=population_from_mapping(row.get("population")),
        )
        for row in rows
    ]


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
