from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta

from .population import SEGMENTS, Segment
from .records import FaultRecord

logger = logging.getLogger(__name__)

MOMENTARY_THRESHOLD = timedelta(minutes=5)

_MICROSECONDS_PER_HOUR = 3_600_000_000


@dataclass(frozen=True)
class SegmentTotals:
    customer_microseconds: int = 0
    affected_customers: int = 0
    momentary_interruptions: int = 0
    sustained_interruptions: int = 0
    total_interruptions: int = 0
    distinct_count: int = 0

    @property
    def customer_hours_lost(self) -> float:
        return self.customer_microseconds / _MICROSECONDS_PER_HOUR

    def __add__(self, other: SegmentTotals) -> SegmentTotals:
        return SegmentTotals(
            customer_microseconds=self.customer_microseconds + other.customer_microseconds,
            affected_customers=self.affected_customers + other.affected_customers,
            momentary_interruptions=self.momentary_interruptions
            + other.momentary_interruptions,
            sustained_interruptions=self.sustained_interruptions
            + other.sustained_interruptions,
            total_interruptions=self.total_interruptions + other.total_interruptions,
            distinct_count=self.distinct_count + other.distinct_count,
        )


@dataclass(frozen=True)
class SegmentAccumulators:
    rural: SegmentTotals
    urban: SegmentTotals
    metro: SegmentTotals

    def get(self, segment: Segment) -> SegmentTotals:
        return getattr(self, segment)

    def combined(self) -> SegmentTotals:
        return self.rural + self.urban + self.metro


class DistinctInterruptionTracker:
    """Accumulates interruption counts per population segment.

    There is no customer identity on a record, so "distinct customers" is
    approximated by one key per record and segment (``"<id>-<segment>"``).
    The count therefore measures distinct interruption events, and CAIFI
    built on it counts a customer once per fault that reached them.
    """

    def __init__(self, require_repair_window: bool = False) -> None:
        self.require_repair_window = require_repair_window
        self._customer_microseconds = dict.fromkeys(SEGMENTS, 0)
        self._affected = dict.fromkeys(SEGMENTS, 0)
        self._momentary = dict.fromkeys(SEGMENTS, 0)
        self._sustained = dict.fromkeys(SEGMENTS, 0)
        self._total = dict.fromkeys(SEGMENTS, 0)
        self._keys: dict[Segment, dict[str, int]] = {segment: {} for segment in SEGMENTS}

    def observe(self, record: FaultRecord) -> bool:
        duration = self._eligible_duration(record)
        if duration is None or record.affected_population is None:
            return False

        microseconds = _total_microseconds(duration)
        is_momentary = duration < MOMENTARY_THRESHOLD
        for segment in SEGMENTS:
            affected = record.affected_population.get(segment)
            if affected <= 0:
                continue
            self._customer_microseconds[segment] += microseconds * affected
            self._affected[segment] += affected
            if is_momentary:
                self._momentary[segment] += affected
            else:
                self._sustained[segment] += affected
            self._total[segment] += affected
            self._keys[segment][distinct_key(record.id, segment)] = affected
        return True

    def distinct_count(self, segment: Segment) -> int:
        return len(self._keys[segment])

    def totals(self, segment: Segment) -> SegmentTotals:
        return SegmentTotals(
            customer_microseconds=self._customer_microseconds[segment],
            affected_customers=self._affected[segment],
            momentary_interruptions=self._momentary[segment],
            sustained_interruptions=self._sustained[segment],
            total_interruptions=self._total[segment],
            distinct_count=self.distinct_count(segment),
        )

    def snapshot(self) -> SegmentAccumulators:
        return SegmentAccumulators(
            rural=self.totals("rural"),
            urban=self.totals("urban"),
            metro=self.totals("metro"),
        )

    def _eligible_duration(self, record: FaultRecord) -> timedelta | None:
        if record.occurrence_date is None or record.restoration_date is None:
            logger.debug("Skipping record %s: incomplete outage window", record.id)
            return None
        if self.require_repair_window and (
            record.repair_date is None or record.repair_end_date is None
        ):
            logger.debug("Skipping record %s: incomplete repair window", record.id)
            return None
        duration = record.restoration_date - record.occurrence_date
        if duration <= timedelta(0):
            logger.debug("Skipping record %s: restoration precedes occurrence", record.id)
            return None
        return duration


def distinct_key(record_id: str, segment: Segment) -> str:
    return f"{record_id}-{segment}"


def accumulate(
    records: Iterable[FaultRecord], require_repair_window: bool = False
) -> SegmentAccumulators:
    tracker = DistinctInterruptionTracker(require_repair_window=require_repair_window)
    for record in records:
        tracker.observe(record)
    return tracker.snapshot()


def _total_microseconds(duration: timedelta) -> int:
    return (duration.days * 86_400 + duration.seconds) * 1_000_000 + duration.microseconds
