"""Award interpretation engine - turns work segments into priced pay components."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

from award_engine.calculators.errors import (
    AwardEngineError,
    IncompleteShiftError,
    InvalidRateConfigurationError,
)
from award_engine.calculators.normalizer import TimeSegmentNormalizer
from award_engine.calculators.rule_table import RuleTable
from award_engine.calculators.types import (
    HUNDRED,
    ZERO,
    AttendanceRecord,
    AwardRule,
    ComponentKind,
    LoadingConvention,
    OvertimeBasis,
    PayComponent,
    SegmentKind,
    TimeSegment,
    seconds_between,
)
from award_engine.config import get_settings

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = Decimal("3600")
RATE_PRECISION = Decimal("0.0001")
CENTS = Decimal("0.01")

Interval = tuple[datetime, datetime]


@dataclass(frozen=True)
class DayInterpretation:
    """Priced components for one employee-day plus the hours split used."""

    components: tuple[PayComponent, ...]
    ordinary_seconds: Decimal = ZERO
    overtime_seconds: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return sum((c.amount for c in self.components), ZERO)

    def total_for(self, kind: ComponentKind) -> Decimal:
        return sum((c.amount for c in self.components if c.kind == kind), ZERO)


@dataclass
class RecordResult:
    """Outcome of interpreting one attendance record."""

    record_id: str
    work_date: date
    employee_id: str | None = None
    components: tuple[PayComponent, ...] = ()
    error: AwardEngineError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def total(self) -> Decimal:
        return sum((c.amount for c in self.components), ZERO)


@dataclass
class BatchInterpretation:
    """Result of interpreting a batch; results keep input order."""

    results: list[RecordResult] = field(default_factory=list)

    @property
    def errors(self) -> list[RecordResult]:
        return [r for r in self.results if not r.success]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def total(self) -> Decimal:
        return sum((r.total for r in self.results), ZERO)


class AwardInterpretationEngine:
    """Applies award rules to normalized work segments.

    Pricing pipeline per employee-day (stable order):
    1) Split worked time chronologically into ordinary and overtime at the
       rule's daily or weekly threshold
    2) Price ordinary hours at the base rate
    3) Price overtime at base * (1 + penalty_rate_pct / 100)
    4) Apply shift loading to worked time inside the rule's shift window,
       using the rule's loading convention
    5) Emit the flat allowance, if any

    The engine does no I/O; the caller supplies a rule snapshot.
    """

    def __init__(
        self,
        hours_precision: Decimal | None = None,
        normalizer: TimeSegmentNormalizer | None = None,
    ):
        self.settings = get_settings()
        self.hours_precision = hours_precision or self.settings.hours_precision
        self.normalizer = normalizer or TimeSegmentNormalizer()

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def interpret_batch(
        self,
        records: Sequence[AttendanceRecord],
        hourly_rate: Decimal | None,
        rule_table: RuleTable,
        default_classification: str | None = None,
        public_holidays: Iterable[date] = (),
    ) -> BatchInterpretation:
        """Interpret a batch of records; one failing record never aborts the rest.

        Records are grouped per employee and processed chronologically so
        split shifts share the daily threshold and a week's days share the
        weekly threshold. A failed record contributes no ordinary hours.
        ``public_holidays`` are the dates holiday-only loadings apply on.
        """
        classification_default = default_classification or self.settings.default_classification
        holidays = frozenset(public_holidays)
        slots: list[RecordResult | None] = [None] * len(records)

        by_employee: dict[str | None, list[int]] = defaultdict(list)
        for index, record in enumerate(records):
            by_employee[record.employee_id].append(index)

        for indexes in by_employee.values():
            indexes.sort(key=lambda i: self._chronological_key(records[i], i))
            ordinary_by_day: dict[date, Decimal] = defaultdict(lambda: ZERO)
            ordinary_by_week: dict[date, Decimal] = defaultdict(lambda: ZERO)

            for index in indexes:
                record = records[index]
                week = week_start(record.work_date)
                try:
                    rule = rule_table.get_active_rule(
                        record.classification or classification_default,
                        record.work_date,
                    )
                    day = self.interpret_day(
                        self.normalizer.normalize(record),
                        rule,
                        hourly_rate,
                        ordinary_seconds_today=ordinary_by_day[record.work_date],
                        ordinary_seconds_this_week=ordinary_by_week[week],
                        public_holidays=holidays,
                    )
                except AwardEngineError as exc:
                    logger.warning(
                        "Interpretation failed for record %s (%s): %s",
                        record.record_id,
                        exc.code,
                        exc.message,
                    )
                    slots[index] = RecordResult(
                        record_id=record.record_id,
                        work_date=record.work_date,
                        employee_id=record.employee_id,
                        error=exc,
                    )
                    continue

                ordinary_by_day[record.work_date] += day.ordinary_seconds
                ordinary_by_week[week] += day.ordinary_seconds
                slots[index] = RecordResult(
                    record_id=record.record_id,
                    work_date=record.work_date,
                    employee_id=record.employee_id,
                    components=day.components,
                )

        batch = BatchInterpretation(results=[r for r in slots if r is not None])
        logger.info(
            "Interpreted %d record(s), %d error(s), total %s",
            len(batch.results),
            batch.error_count,
            batch.total,
        )
        return batch

    @staticmethod
    def _chronological_key(record: AttendanceRecord, index: int) -> tuple:
        clock_in = record.clock_in.timestamp() if record.clock_in is not None else 0.0
        return (record.work_date, record.clock_in is None, clock_in, index)

    # ------------------------------------------------------------------
    # Single day
    # ------------------------------------------------------------------

    def interpret_day(
        self,
        segments: Sequence[TimeSegment],
        rule: AwardRule,
        hourly_rate: Decimal | None,
        *,
        ordinary_seconds_today: Decimal = ZERO,
        ordinary_seconds_this_week: Decimal = ZERO,
        public_holidays: frozenset[date] = frozenset(),
    ) -> DayInterpretation:
        """Price one employee-day of segments under a rule.

        Args:
            segments: Normalized segments for the day (BREAK segments ignored)
            rule: The award rule in force for the day
            hourly_rate: Base hourly rate
            ordinary_seconds_today: Ordinary time already paid earlier the same day
            ordinary_seconds_this_week: Ordinary time already paid earlier the same week
            public_holidays: Dates a holiday-only loading applies on

        Raises:
            InvalidRateConfigurationError: Null/negative rate or invalid rule
            IncompleteShiftError: A segment has no end
        """
        base_rate = self._validate_hourly_rate(hourly_rate)
        rule.validate()

        for segment in segments:
            if segment.incomplete or segment.end is None:
                raise IncompleteShiftError(segment.employee_id, segment.work_date)

        work = sorted(
            (s for s in segments if s.kind == SegmentKind.WORK and s.seconds > 0),
            key=lambda s: s.start,
        )
        if not work:
            return DayInterpretation(components=())

        threshold = rule.overtime_threshold_hours * SECONDS_PER_HOUR
        if rule.overtime_basis == OvertimeBasis.WEEKLY:
            already_ordinary = ordinary_seconds_this_week
        else:
            already_ordinary = ordinary_seconds_today
        ordinary_available = max(ZERO, threshold - already_ordinary)

        ordinary, overtime = split_at_threshold(work, ordinary_available)
        ordinary_seconds = sum((seconds_between(s, e) for s, e in ordinary), ZERO)
        overtime_seconds = sum((seconds_between(s, e) for s, e in overtime), ZERO)

        # Worked hours are rounded once; overtime takes the remainder
        ordinary_units, overtime_units = self._split_hours(ordinary_seconds, overtime_seconds)
        overtime_rate = self._rate(base_rate * rule.overtime_multiplier)
        components: list[PayComponent] = []

        if ordinary_units > 0:
            components.append(
                self._priced(
                    "ORD",
                    "Ordinary hours",
                    ComponentKind.ORDINARY,
                    ordinary_units,
                    self._rate(base_rate),
                )
            )
        if overtime_units > 0:
            components.append(
                self._priced(
                    "OT",
                    f"Overtime (+{rule.penalty_rate_pct.normalize():f}%)",
                    ComponentKind.OVERTIME,
                    overtime_units,
                    overtime_rate,
                )
            )

        components.extend(
            self._loading_components(rule, base_rate, ordinary, overtime, public_holidays)
        )

        if rule.allowance_amount > 0 and rule.allowance_type is not None:
            components.append(
                self._priced(
                    f"ALLOW-{rule.allowance_type.value.upper()}",
                    f"{rule.allowance_type.value.capitalize()} allowance",
                    ComponentKind.ALLOWANCE,
                    Decimal("1"),
                    self._rate(rule.allowance_amount),
                )
            )

        return DayInterpretation(
            components=tuple(components),
            ordinary_seconds=ordinary_seconds,
            overtime_seconds=overtime_seconds,
        )

    def _loading_components(
        self,
        rule: AwardRule,
        base_rate: Decimal,
        ordinary: list[Interval],
        overtime: list[Interval],
        public_holidays: frozenset[date],
    ) -> list[PayComponent]:
        """Shift loading for worked time inside the rule's shift window."""
        if rule.shift_loading_pct <= 0 or not rule.has_shift_window:
            return []

        loaded_ordinary = sum(
            (loaded_seconds(rule, s, e, public_holidays) for s, e in ordinary), ZERO
        )
        loaded_overtime = sum(
            (loaded_seconds(rule, s, e, public_holidays) for s, e in overtime), ZERO
        )
        pct = rule.shift_loading_pct / HUNDRED
        pct_label = f"{rule.shift_loading_pct.normalize():f}%"
        label = "Public holiday loading" if rule.public_holiday_only else "Shift loading"
        components: list[PayComponent] = []

        if rule.loading_convention == LoadingConvention.ADDITIVE:
            loaded_units = self._hours(loaded_ordinary + loaded_overtime)
            if loaded_units > 0:
                components.append(
                    self._priced(
                        "LOADING",
                        f"{label} ({pct_label} of base)",
                        ComponentKind.LOADING,
                        loaded_units,
                        self._rate(base_rate * pct),
                    )
                )
            return components

        ordinary_units, overtime_units = self._split_hours(loaded_ordinary, loaded_overtime)
        if ordinary_units > 0:
            components.append(
                self._priced(
                    "LOADING",
                    f"{label} ({pct_label})",
                    ComponentKind.LOADING,
                    ordinary_units,
                    self._rate(base_rate * pct),
                )
            )
        if overtime_units > 0:
            components.append(
                self._priced(
                    "LOADING-OT",
                    f"{label} on overtime ({pct_label})",
                    ComponentKind.LOADING,
                    overtime_units,
                    self._rate(base_rate * rule.overtime_multiplier * pct),
                )
            )
        return components

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_hourly_rate(hourly_rate: Decimal | None) -> Decimal:
        if hourly_rate is None:
            raise InvalidRateConfigurationError("Hourly rate is required")
        rate = Decimal(str(hourly_rate))
        if rate < 0:
            raise InvalidRateConfigurationError(
                f"Hourly rate must not be negative (got {rate})",
                hourly_rate=str(rate),
            )
        return rate

    def _hours(self, seconds: Decimal) -> Decimal:
        return (seconds / SECONDS_PER_HOUR).quantize(self.hours_precision, rounding=ROUND_HALF_UP)

    def _split_hours(self, first: Decimal, second: Decimal) -> tuple[Decimal, Decimal]:
        """Round two consecutive spans so their units sum to the rounded whole."""
        first_units = self._hours(first)
        return first_units, self._hours(first + second) - first_units

    @staticmethod
    def _rate(rate: Decimal) -> Decimal:
        return rate.quantize(RATE_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def _priced(
        code: str,
        description: str,
        kind: ComponentKind,
        units: Decimal,
        rate: Decimal,
    ) -> PayComponent:
        return PayComponent(
            code=code,
            description=description,
            kind=kind,
            units=units,
            rate=rate,
            amount=(units * rate).quantize(CENTS, rounding=ROUND_HALF_UP),
        )


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def split_at_threshold(
    work: Sequence[TimeSegment],
    ordinary_available: Decimal,
) -> tuple[list[Interval], list[Interval]]:
    """Split ordered work segments into ordinary and overtime intervals.

    The first ``ordinary_available`` seconds of work are ordinary; everything
    after is overtime.
    """
    ordinary: list[Interval] = []
    overtime: list[Interval] = []
    remaining = ordinary_available

    for segment in work:
        if segment.end is None:
            raise IncompleteShiftError(segment.employee_id, segment.work_date)
        length = segment.seconds
        if remaining >= length:
            ordinary.append((segment.start, segment.end))
            remaining -= length
        elif remaining > 0:
            split = segment.start + timedelta(seconds=float(remaining))
            ordinary.append((segment.start, split))
            overtime.append((split, segment.end))
            remaining = ZERO
        else:
            overtime.append((segment.start, segment.end))

    return ordinary, overtime


def shift_windows(
    rule: AwardRule,
    start: datetime,
    end: datetime,
    public_holidays: frozenset[date] = frozenset(),
) -> Iterator[Interval]:
    """Shift windows that could intersect ``[start, end)``.

    A window belongs to the day it starts on, so the scan begins the day
    before ``start`` to catch windows that cross midnight. Holiday-only rules
    open windows on ``public_holidays`` alone.
    """
    day = start.date() - timedelta(days=1)
    while day <= end.date():
        eligible = day in public_holidays or not rule.public_holiday_only
        if eligible and (not rule.shift_days or day.weekday() in rule.shift_days):
            if rule.shift_start is None or rule.shift_end is None:
                window_start = datetime.combine(day, time.min, tzinfo=start.tzinfo)
                window_end = window_start + timedelta(days=1)
            else:
                window_start = datetime.combine(day, rule.shift_start, tzinfo=start.tzinfo)
                window_end = datetime.combine(day, rule.shift_end, tzinfo=start.tzinfo)
                if rule.shift_end < rule.shift_start:
                    window_end += timedelta(days=1)
            yield window_start, window_end
        day += timedelta(days=1)


def loaded_seconds(
    rule: AwardRule,
    start: datetime,
    end: datetime,
    public_holidays: frozenset[date] = frozenset(),
) -> Decimal:
    """Seconds of ``[start, end)`` falling inside the rule's shift windows."""
    total = ZERO
    for window_start, window_end in shift_windows(rule, start, end, public_holidays):
        overlap_start = max(start, window_start)
        overlap_end = min(end, window_end)
        if overlap_end > overlap_start:
            total += seconds_between(overlap_start, overlap_end)
    return total
