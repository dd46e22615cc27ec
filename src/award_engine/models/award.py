"""Award rule configuration model."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Date, Index, Numeric, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from award_engine.calculators.types import (
    AllowanceType,
    AwardRule,
    LoadingConvention,
    OvertimeBasis,
)
from award_engine.models.base import Base, IdMixin, TimestampMixin


class AwardRuleRecord(Base, IdMixin, TimestampMixin):
    """Stored award rule, versioned by effective range."""

    __tablename__ = "award_rule"

    award_name: Mapped[str] = mapped_column(String, nullable=False)
    classification: Mapped[str] = mapped_column(String, nullable=False)
    penalty_rate_pct: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    overtime_threshold_hours: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    overtime_basis: Mapped[str] = mapped_column(String, nullable=False, default="daily")
    allowance_type: Mapped[str | None] = mapped_column(String, nullable=True)
    allowance_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 4), nullable=False, default=Decimal("0")
    )
    shift_loading_pct: Mapped[Decimal] = mapped_column(
        Numeric(7, 4), nullable=False, default=Decimal("0")
    )
    loading_convention: Mapped[str | None] = mapped_column(String, nullable=True)
    shift_days: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    shift_start: Mapped[time | None] = mapped_column(Time, nullable=True)
    shift_end: Mapped[time | None] = mapped_column(Time, nullable=True)
    public_holiday_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("award_rule_classification_idx", "classification", "effective_from"),
        CheckConstraint(
            "overtime_basis IN ('daily', 'weekly')",
            name="award_rule_overtime_basis_check",
        ),
        CheckConstraint(
            "effective_to IS NULL OR effective_to > effective_from",
            name="award_rule_dates_check",
        ),
    )

    def to_domain(self) -> AwardRule:
        """Convert to the immutable rule used by the engine."""
        return AwardRule(
            id=self.id,
            award_name=self.award_name,
            classification=self.classification,
            penalty_rate_pct=Decimal(self.penalty_rate_pct),
            overtime_threshold_hours=Decimal(self.overtime_threshold_hours),
            overtime_basis=OvertimeBasis(self.overtime_basis),
            allowance_type=AllowanceType(self.allowance_type) if self.allowance_type else None,
            allowance_amount=Decimal(self.allowance_amount or 0),
            shift_loading_pct=Decimal(self.shift_loading_pct or 0),
            loading_convention=(
                LoadingConvention(self.loading_convention) if self.loading_convention else None
            ),
            shift_days=frozenset(self.shift_days or ()),
            shift_start=self.shift_start,
            shift_end=self.shift_end,
            public_holiday_only=bool(self.public_holiday_only),
            effective_from=self.effective_from,
            effective_to=self.effective_to,
            is_active=self.is_active,
        )

    @staticmethod
    def columns_from_domain(rule: AwardRule) -> dict[str, Any]:
        """Column values for a domain rule (excluding timestamps)."""
        return {
            "id": rule.id,
            "award_name": rule.award_name,
            "classification": rule.classification,
            "penalty_rate_pct": rule.penalty_rate_pct,
            "overtime_threshold_hours": rule.overtime_threshold_hours,
            "overtime_basis": rule.overtime_basis.value,
            "allowance_type": rule.allowance_type.value if rule.allowance_type else None,
            "allowance_amount": rule.allowance_amount,
            "shift_loading_pct": rule.shift_loading_pct,
            "loading_convention": (
                rule.loading_convention.value if rule.loading_convention else None
            ),
            "shift_days": sorted(rule.shift_days),
            "shift_start": rule.shift_start,
            "shift_end": rule.shift_end,
            "public_holiday_only": rule.public_holiday_only,
            "effective_from": rule.effective_from,
            "effective_to": rule.effective_to,
            "is_active": rule.is_active,
        }

    @classmethod
    def from_domain(cls, rule: AwardRule) -> AwardRuleRecord:
        return cls(**cls.columns_from_domain(rule))
