"""Type definitions for the interpretation and statutory pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

from award_engine.calculators.errors import InvalidRateConfigurationError

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def seconds_between(start: datetime, end: datetime) -> Decimal:
    """Exact elapsed seconds between two timestamps."""
    delta: timedelta = end - start
    return (
        Decimal(delta.days * 86400 + delta.seconds)
        + Decimal(delta.microseconds) / Decimal(1_000_000)
    )


# ===== Attendance =====


class SegmentKind(str, Enum):
    """Time segment kinds."""

    WORK = "work"
    BREAK = "break"


@dataclass(frozen=True)
class BreakInterval:
    """An unpaid break taken inside a shift."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class AttendanceRecord:
    """Raw clock-in/clock-out record for one employee-day."""

    record_id: str
    work_date: date
    clock_in: datetime | None
    clock_out: datetime | None = None
    breaks: tuple[BreakInterval, ...] = ()
    employee_id: str | None = None
    classification: str | None = None


@dataclass(frozen=True)
class TimeSegment:
    """A normalized stretch of work or break time."""

    employee_id: str | None
    work_date: date
    start: datetime
    end: datetime | None
    kind: SegmentKind
    incomplete: bool = False

    @property
    def seconds(self) -> Decimal:
        if self.end is None:
            return ZERO
        return seconds_between(self.start, self.end)


# ===== Award rules =====


class OvertimeBasis(str, Enum):
    """Period over which the overtime threshold accrues."""

    DAILY = "daily"
    WEEKLY = "weekly"


class LoadingConvention(str, Enum):
    """How a shift loading combines with the overtime penalty.

    ADDITIVE: loading is always a percentage of the base rate.
    MULTIPLICATIVE: loading compounds on the rate the hour is already paid at,
    so loaded overtime hours load on the overtime rate.
    """

    ADDITIVE = "additive"
    MULTIPLICATIVE = "multiplicative"


class AllowanceType(str, Enum):
    """Flat allowance categories."""

    MEAL = "meal"
    TOOL = "tool"
    TRAVEL = "travel"
    OTHER = "other"


@dataclass(frozen=True)
class AwardRule:
    """Award rule for one classification over an effective range.

    The effective range is half-open: ``[effective_from, effective_to)``.
    ``shift_days`` uses ``date.weekday()`` numbering (Monday is 0). A shift
    window whose ``shift_end`` is earlier than ``shift_start`` crosses midnight
    and belongs to the day it starts on.
    ``public_holiday_only`` restricts the shift window to public holidays
    supplied by the caller.
    """

    id: str
    award_name: str
    classification: str
    penalty_rate_pct: Decimal
    overtime_threshold_hours: Decimal
    effective_from: date
    effective_to: date | None = None
    overtime_basis: OvertimeBasis = OvertimeBasis.DAILY
    allowance_type: AllowanceType | None = None
    allowance_amount: Decimal = ZERO
    shift_loading_pct: Decimal = ZERO
    loading_convention: LoadingConvention | None = None
    shift_days: frozenset[int] = frozenset()
    shift_start: time | None = None
    shift_end: time | None = None
    public_holiday_only: bool = False
    is_active: bool = True

    @property
    def scope(self) -> str:
        return self.classification

    @property
    def overtime_multiplier(self) -> Decimal:
        return ONE + self.penalty_rate_pct / HUNDRED

    @property
    def has_shift_window(self) -> bool:
        return bool(self.shift_days) or self.shift_start is not None or self.public_holiday_only

    def validate(self) -> None:
        """Raise InvalidRateConfigurationError if the rule shape is invalid."""
        problems: list[str] = []

        if not self.classification:
            problems.append("classification is required")
        if self.penalty_rate_pct < 0:
            problems.append("penalty_rate_pct must not be negative")
        if self.overtime_threshold_hours < 0:
            problems.append("overtime_threshold_hours must not be negative")
        if self.effective_to is not None and self.effective_to <= self.effective_from:
            problems.append("effective_to must be after effective_from")

        if self.allowance_amount < 0:
            problems.append("allowance_amount must not be negative")
        if self.allowance_amount > 0 and self.allowance_type is None:
            problems.append("allowance_type is required when allowance_amount is set")

        if (self.shift_start is None) != (self.shift_end is None):
            problems.append("shift_start and shift_end must be set together")
        if self.shift_start is not None and self.shift_start == self.shift_end:
            problems.append("shift window must not be empty")
        if any(d < 0 or d > 6 for d in self.shift_days):
            problems.append("shift_days must be weekday numbers 0-6")

        if self.shift_loading_pct < 0:
            problems.append("shift_loading_pct must not be negative")
        if self.shift_loading_pct > 0:
            if self.loading_convention is None:
                problems.append("loading_convention is required when shift_loading_pct is set")
            if not self.has_shift_window:
                problems.append(
                    "shift loading requires shift_days, a shift time window or public_holiday_only"
                )

        if problems:
            raise InvalidRateConfigurationError(
                f"Award rule {self.id} is invalid: {'; '.join(problems)}",
                rule_id=self.id,
                problems=problems,
            )


# ===== Pay components =====


class ComponentKind(str, Enum):
    """Pay component categories."""

    ORDINARY = "ordinary"
    OVERTIME = "overtime"
    LOADING = "loading"
    ALLOWANCE = "allowance"


@dataclass(frozen=True)
class PayComponent:
    """A priced pay component. ``amount`` is ``units * rate`` rounded to cents."""

    code: str
    description: str
    kind: ComponentKind
    units: Decimal
    rate: Decimal
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "description": self.description,
            "units": self.units,
            "rate": self.rate,
            "amount": self.amount,
        }


# ===== Statutory rates =====


class RateType(str, Enum):
    """Statutory rate types."""

    PAYG_WITHHOLDING = "payg-withholding"
    SUPERANNUATION_GUARANTEE = "superannuation-guarantee"
    PAYROLL_TAX = "payroll-tax"
    WORKERS_COMPENSATION = "workers-compensation"
    MEDICARE_LEVY = "medicare-levy"


# Rate types whose rows carry a bracket schedule rather than one flat rate
BRACKETED_RATE_TYPES = frozenset({RateType.PAYG_WITHHOLDING})


@dataclass(frozen=True)
class TaxBracket:
    """Marginal tax bracket starting at ``threshold`` (annual income)."""

    threshold: Decimal
    rate: Decimal  # As fraction, e.g. 0.30 for 30%


@dataclass(frozen=True)
class StatutoryRate:
    """Effective-dated statutory rate row.

    PAYG withholding rows carry an ascending bracket schedule starting at 0;
    every other type is a flat ``rate`` with an optional ``threshold``.
    """

    id: str
    rate_type: RateType
    name: str
    rate: Decimal
    effective_from: date
    effective_to: date | None = None
    threshold: Decimal | None = None
    brackets: tuple[TaxBracket, ...] = ()
    is_active: bool = True

    @property
    def scope(self) -> str:
        return self.rate_type.value

    def validate(self) -> None:
        """Raise InvalidRateConfigurationError if the row shape is invalid."""
        problems: list[str] = []

        if not ZERO <= self.rate <= ONE:
            problems.append("rate must be a fraction between 0 and 1")
        if self.threshold is not None and self.threshold < 0:
            problems.append("threshold must not be negative")
        if self.effective_to is not None and self.effective_to <= self.effective_from:
            problems.append("effective_to must be after effective_from")

        if self.rate_type in BRACKETED_RATE_TYPES:
            if not self.brackets:
                problems.append(f"{self.rate_type.value} requires a bracket schedule")
            else:
                thresholds = [b.threshold for b in self.brackets]
                if thresholds[0] != 0:
                    problems.append("first bracket must start at 0")
                if any(prev >= nxt for prev, nxt in zip(thresholds, thresholds[1:])):
                    problems.append("bracket thresholds must be strictly ascending")
                if any(not ZERO <= b.rate <= ONE for b in self.brackets):
                    problems.append("bracket rates must be fractions between 0 and 1")
        elif self.brackets:
            problems.append(f"{self.rate_type.value} does not take a bracket schedule")

        if problems:
            raise InvalidRateConfigurationError(
                f"Statutory rate {self.id} is invalid: {'; '.join(problems)}",
                rate_id=self.id,
                problems=problems,
            )


# ===== Bonuses =====


class BonusType(str, Enum):
    """Bonus categories."""

    PERFORMANCE = "performance"
    RETENTION = "retention"
    SIGN_ON = "sign-on"
    COMMISSION = "commission"
    REFERRAL = "referral"
    PROFIT_SHARING = "profit-sharing"
    ANNUAL = "annual"
    SPOT = "spot"
    SALARY_ADJUSTMENT = "salary-adjustment"


class TaxMethod(str, Enum):
    """Withholding treatment for one-off payments."""

    MARGINAL_RATES = "marginal-rates"
    AVERAGE_RATE = "average-rate"


class ApprovalStatus(str, Enum):
    """Bonus approval lifecycle."""

    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class EarningsPeriod:
    """One past pay period used for average-rate withholding."""

    period_end: date
    gross: Decimal
    tax_withheld: Decimal


@dataclass(frozen=True)
class BonusRequest:
    """Inputs for a bonus or salary adjustment calculation."""

    employee_id: str
    bonus_type: BonusType
    gross_amount: Decimal
    payment_date: date
    tax_method: TaxMethod | None = None
    super_included: bool = False
    annual_income: Decimal | None = None
    earnings_history: tuple[EarningsPeriod, ...] | None = None
    pro_rata_days: int | None = None


@dataclass(frozen=True)
class BonusResult:
    """Withholding outcome for a bonus."""

    gross_amount: Decimal
    tax_withheld: Decimal
    net_amount: Decimal
    super_contribution: Decimal
    tax_method: TaxMethod
    withholding_rate: Decimal
    medicare_levy: Decimal = ZERO
    details: dict[str, Any] = field(default_factory=dict)
