"""Pydantic schemas for API request/response models."""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from award_engine.calculators.engine import RecordResult
from award_engine.calculators.types import (
    AllowanceType,
    ApprovalStatus,
    AttendanceRecord,
    AwardRule,
    BonusRequest,
    BonusResult,
    BonusType,
    BreakInterval,
    EarningsPeriod,
    LoadingConvention,
    OvertimeBasis,
    PayComponent,
    RateType,
    StatutoryRate,
    TaxBracket,
    TaxMethod,
)

# Award amounts go over the wire as JSON numbers
Number = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base for the award contract, which uses camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Award interpretation schemas
# ============================================================================


class BreakSchema(CamelModel):
    """Unpaid break inside a shift."""

    start: datetime
    end: datetime


class AttendanceRecordSchema(CamelModel):
    """One clock-in/clock-out record."""

    record_id: str = Field(alias="id")
    work_date: date = Field(alias="date")
    clock_in: datetime | None = None
    clock_out: datetime | None = None
    breaks: list[BreakSchema] = []
    employee_id: str | None = None
    classification: str | None = None

    def to_domain(self, employee_id: str | None = None) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=self.record_id,
            work_date=self.work_date,
            clock_in=self.clock_in,
            clock_out=self.clock_out,
            breaks=tuple(BreakInterval(start=b.start, end=b.end) for b in self.breaks),
            employee_id=self.employee_id or employee_id,
            classification=self.classification,
        )


class AwardInterpretationRequest(CamelModel):
    """Batch of attendance records priced at one hourly rate.

    ``classification`` and ``employeeId`` apply to records that do not carry
    their own. ``publicHolidays`` lists the dates holiday-only loadings
    apply on.
    """

    records: list[AttendanceRecordSchema]
    hourly_rate: Decimal | None = None
    classification: str | None = None
    employee_id: str | None = None
    public_holidays: list[date] = []


class PayComponentSchema(CamelModel):
    """Priced pay component."""

    code: str
    description: str
    units: Number
    rate: Number
    amount: Number

    @classmethod
    def from_domain(cls, component: PayComponent) -> "PayComponentSchema":
        return cls(**component.to_dict())


class RecordErrorSchema(CamelModel):
    """Per-record interpretation failure."""

    code: str
    message: str


class AwardRecordResponse(CamelModel):
    """Interpretation outcome for one record, in request order."""

    record_id: str
    work_date: date = Field(alias="date")
    components: list[PayComponentSchema]
    total: Number
    error: RecordErrorSchema | None = None

    @classmethod
    def from_result(cls, result: RecordResult) -> "AwardRecordResponse":
        return cls(
            record_id=result.record_id,
            work_date=result.work_date,
            components=[PayComponentSchema.from_domain(c) for c in result.components],
            total=result.total,
            error=RecordErrorSchema(**result.error.to_dict()) if result.error else None,
        )


# ============================================================================
# Award rule schemas
# ============================================================================


class AwardRuleCreate(BaseModel):
    """Schema for creating or replacing an award rule."""

    award_name: str
    classification: str
    penalty_rate_pct: Decimal
    overtime_threshold_hours: Decimal
    overtime_basis: OvertimeBasis = OvertimeBasis.DAILY
    allowance_type: AllowanceType | None = None
    allowance_amount: Decimal = Decimal("0")
    shift_loading_pct: Decimal = Decimal("0")
    loading_convention: LoadingConvention | None = None
    shift_days: list[int] = []
    shift_start: time | None = None
    shift_end: time | None = None
    public_holiday_only: bool = False
    effective_from: date
    effective_to: date | None = None
    is_active: bool = True

    def to_domain(self, rule_id: str = "") -> AwardRule:
        fields = self.model_dump(exclude={"shift_days"})
        return AwardRule(id=rule_id, shift_days=frozenset(self.shift_days), **fields)


class AwardRuleResponse(AwardRuleCreate):
    """Schema for award rule response."""

    model_config = ConfigDict(from_attributes=True)

    id: str

    @field_validator("shift_days", mode="before")
    @classmethod
    def _sorted_days(cls, value: Any) -> Any:
        return sorted(value) if isinstance(value, (set, frozenset)) else value


# ============================================================================
# Statutory rate schemas
# ============================================================================


class TaxBracketSchema(BaseModel):
    """Marginal bracket: ``rate`` applies to annual income above ``threshold``."""

    model_config = ConfigDict(from_attributes=True)

    threshold: Decimal
    rate: Decimal


class StatutoryRateBase(BaseModel):
    """Fields shared by every statutory rate type."""

    name: str
    effective_from: date
    effective_to: date | None = None
    is_active: bool = True


class PaygRateCreate(StatutoryRateBase):
    """PAYG withholding schedule.

    ``rate`` is the headline (top marginal) rate and defaults to the last
    bracket's rate.
    """

    rate_type: Literal["payg-withholding"]
    brackets: list[TaxBracketSchema]
    rate: Decimal | None = None

    def to_domain(self, rate_id: str = "") -> StatutoryRate:
        rate = self.rate
        if rate is None:
            rate = self.brackets[-1].rate if self.brackets else Decimal("0")
        return StatutoryRate(
            id=rate_id,
            rate_type=RateType(self.rate_type),
            name=self.name,
            rate=rate,
            effective_from=self.effective_from,
            effective_to=self.effective_to,
            brackets=tuple(TaxBracket(b.threshold, b.rate) for b in self.brackets),
            is_active=self.is_active,
        )


class FlatRateCreate(StatutoryRateBase):
    """Flat-rate statutory row with an optional income threshold."""

    rate_type: Literal[
        "superannuation-guarantee",
        "payroll-tax",
        "workers-compensation",
        "medicare-levy",
    ]
    rate: Decimal
    threshold: Decimal | None = None

    def to_domain(self, rate_id: str = "") -> StatutoryRate:
        return StatutoryRate(
            id=rate_id,
            rate_type=RateType(self.rate_type),
            name=self.name,
            rate=self.rate,
            effective_from=self.effective_from,
            effective_to=self.effective_to,
            threshold=self.threshold,
            is_active=self.is_active,
        )


class StatutoryRateResponse(BaseModel):
    """Schema for statutory rate response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    rate_type: RateType
    name: str
    rate: Decimal
    threshold: Decimal | None = None
    brackets: list[TaxBracketSchema] = []
    effective_from: date
    effective_to: date | None = None
    is_active: bool


# ============================================================================
# Bonus schemas
# ============================================================================


class EarningsPeriodSchema(BaseModel):
    """Past pay period used for average-rate withholding."""

    period_end: date
    gross: Decimal
    tax_withheld: Decimal


class BonusCalculationRequest(BaseModel):
    """Schema for calculating or submitting a bonus."""

    employee_id: str
    bonus_type: BonusType
    gross_amount: Decimal
    payment_date: date
    tax_method: TaxMethod | None = None
    super_included: bool = False
    annual_income: Decimal | None = None
    earnings_history: list[EarningsPeriodSchema] | None = None
    pro_rata_days: int | None = None

    def to_domain(self) -> BonusRequest:
        history = None
        if self.earnings_history is not None:
            history = tuple(
                EarningsPeriod(p.period_end, p.gross, p.tax_withheld)
                for p in self.earnings_history
            )
        return BonusRequest(
            employee_id=self.employee_id,
            bonus_type=self.bonus_type,
            gross_amount=self.gross_amount,
            payment_date=self.payment_date,
            tax_method=self.tax_method,
            super_included=self.super_included,
            annual_income=self.annual_income,
            earnings_history=history,
            pro_rata_days=self.pro_rata_days,
        )


class BonusCalculationResponse(BaseModel):
    """Schema for a bonus withholding preview."""

    model_config = ConfigDict(from_attributes=True)

    gross_amount: Decimal
    tax_withheld: Decimal
    net_amount: Decimal
    super_contribution: Decimal
    tax_method: TaxMethod
    withholding_rate: Decimal
    medicare_levy: Decimal
    details: dict[str, Any] = {}

    @classmethod
    def from_result(cls, result: BonusResult) -> "BonusCalculationResponse":
        return cls.model_validate(result)


class BonusPaymentResponse(BaseModel):
    """Schema for a stored bonus payment."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    bonus_type: BonusType
    gross_amount: Decimal
    tax_withheld: Decimal
    net_amount: Decimal
    super_contribution: Decimal
    payment_date: date
    tax_method: TaxMethod
    super_included: bool
    calculation_details: dict[str, Any] = {}
    approval_status: ApprovalStatus
    approved_by: str | None = None
    approved_at: datetime | None = None
    paid_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class BonusApprovalRequest(BaseModel):
    """Schema for approval request."""

    approver_id: str


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
