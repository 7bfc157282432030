from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .records import LINE_FAULT, FaultRecord, RecordKind
from .time_window import TimeWindow

logger = logging.getLogger(__name__)

ANY = "all"


@dataclass(frozen=True)
class FaultScope:
    region_id: str | None = None
    district_id: str | None = None

    @property
    def region(self) -> str | None:
        return _restriction(self.region_id)

    @property
    def district(self) -> str | None:
        return _restriction(self.district_id)


@dataclass(frozen=True)
class FaultCriteria:
    status: str | None = None
    fault_type: str | None = None
    kind: RecordKind | None = None


GLOBAL_SCOPE = FaultScope()
NO_CRITERIA = FaultCriteria()


def merge_records(*streams: Iterable[FaultRecord]) -> list[FaultRecord]:
    seen: set[str] = set()
    merged: list[FaultRecord] = []
    for stream in streams:
        for record in stream:
            if record.id in seen:
                continue
            seen.add(record.id)
            merged.append(record)
    return merged


def filter_records(
    records: Iterable[FaultRecord],
    scope: FaultScope | None = None,
    window: TimeWindow | None = None,
    criteria: FaultCriteria | None = None,
) -> list[FaultRecord]:
    scope = scope or GLOBAL_SCOPE
    window = window or TimeWindow.unbounded()
    criteria = criteria or NO_CRITERIA
    output: list[FaultRecord] = []
    for record in records:
        if record.occurrence_date is None:
            logger.warning(
                "Dropping record %s: missing or invalid occurrence date", record.id
            )
            continue
        if not in_scope(record, scope):
            continue
        if not matches_criteria(record, criteria):
            continue
        if not window.contains(record.occurrence_date):
            continue
        output.append(record)
    return output


def in_scope(record: FaultRecord, scope: FaultScope) -> bool:
    if scope.region is not None and record.region_id != scope.region:
        return False
    if scope.district is not None and record.district_id != scope.district:
        return False
    return True


def matches_criteria(record: FaultRecord, criteria: FaultCriteria) -> bool:
    kind = _restriction(criteria.kind)
    if kind is not None and record.kind != kind:
        return False
    status = _restriction(criteria.status)
    if status is not None and record.status != status:
        return False
    fault_type = _restriction(criteria.fault_type)
    if fault_type is not None:
        # Control outages carry no fault type.
        if record.kind != LINE_FAULT or record.fault_type != fault_type:
            return False
    return True


def _restriction(value: str | None) -> str | None:
    if value is None or value == ANY:
        return None
    return value
