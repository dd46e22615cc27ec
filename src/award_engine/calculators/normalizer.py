"""Time-segment normalization for raw attendance records."""

from __future__ import annotations

from award_engine.calculators.errors import InvalidTimeRangeError, OverlappingBreakError
from award_engine.calculators.types import (
    AttendanceRecord,
    BreakInterval,
    SegmentKind,
    TimeSegment,
)


class TimeSegmentNormalizer:
    """Turns clock-in/clock-out plus breaks into ordered, disjoint segments.

    Output for a complete shift alternates WORK and BREAK segments in time
    order; work pieces of zero length are dropped. A shift without a
    clock-out becomes a single open-ended WORK segment flagged incomplete so
    the engine can report it as pending instead of pricing it.
    """

    def normalize(self, record: AttendanceRecord) -> list[TimeSegment]:
        """Normalize one employee-day record.

        Raises:
            InvalidTimeRangeError: Missing clock-in, clock-out not after
                clock-in, a break that does not move forward in time, or
                timezone-aware times mixed with naive ones
            OverlappingBreakError: Breaks overlapping each other or falling
                outside the shift
        """
        if record.clock_in is None:
            raise InvalidTimeRangeError(
                f"Record {record.record_id} has no clock-in",
                record_id=record.record_id,
            )

        clock_in = record.clock_in
        clock_out = record.clock_out
        self._check_timezone_awareness(record)

        if clock_out is not None and clock_out <= clock_in:
            raise InvalidTimeRangeError(
                f"Record {record.record_id}: clock-out {clock_out.isoformat()} "
                f"is not after clock-in {clock_in.isoformat()}",
                record_id=record.record_id,
            )

        breaks = self._validate_breaks(record, sorted(record.breaks, key=lambda b: b.start))

        if clock_out is None:
            return [
                TimeSegment(
                    employee_id=record.employee_id,
                    work_date=record.work_date,
                    start=clock_in,
                    end=None,
                    kind=SegmentKind.WORK,
                    incomplete=True,
                )
            ]

        segments: list[TimeSegment] = []
        cursor = clock_in
        for brk in breaks:
            if brk.start > cursor:
                segments.append(self._segment(record, cursor, brk.start, SegmentKind.WORK))
            segments.append(self._segment(record, brk.start, brk.end, SegmentKind.BREAK))
            cursor = brk.end
        if clock_out > cursor:
            segments.append(self._segment(record, cursor, clock_out, SegmentKind.WORK))

        return segments

    @staticmethod
    def _check_timezone_awareness(record: AttendanceRecord) -> None:
        """All times on a record must be either timezone-aware or naive."""
        times = [record.clock_in, record.clock_out]
        for brk in record.breaks:
            times.extend((brk.start, brk.end))
        awareness = {t.utcoffset() is not None for t in times if t is not None}
        if len(awareness) > 1:
            raise InvalidTimeRangeError(
                f"Record {record.record_id} mixes timezone-aware and naive times",
                record_id=record.record_id,
            )

    def _validate_breaks(
        self,
        record: AttendanceRecord,
        breaks: list[BreakInterval],
    ) -> list[BreakInterval]:
        """Check break ordering and containment; breaks arrive sorted by start."""
        previous: BreakInterval | None = None
        for brk in breaks:
            if brk.end <= brk.start:
                raise InvalidTimeRangeError(
                    f"Record {record.record_id}: break ending {brk.end.isoformat()} "
                    f"does not end after it starts",
                    record_id=record.record_id,
                )
            outside = brk.start < record.clock_in or (
                record.clock_out is not None and brk.end > record.clock_out
            )
            if outside:
                raise OverlappingBreakError(
                    f"Record {record.record_id}: break {brk.start.isoformat()}-"
                    f"{brk.end.isoformat()} falls outside the shift",
                    record_id=record.record_id,
                )
            # Touching breaks are fine
            if previous is not None and brk.start < previous.end:
                raise OverlappingBreakError(
                    f"Record {record.record_id}: breaks starting "
                    f"{previous.start.isoformat()} and {brk.start.isoformat()} overlap",
                    record_id=record.record_id,
                )
            previous = brk
        return breaks

    @staticmethod
    def _segment(record: AttendanceRecord, start, end, kind: SegmentKind) -> TimeSegment:
        return TimeSegment(
            employee_id=record.employee_id,
            work_date=record.work_date,
            start=start,
            end=end,
            kind=kind,
        )
