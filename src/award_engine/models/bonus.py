"""Bonus payment model."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Date, DateTime, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from award_engine.models.base import Base, IdMixin, TimestampMixin


class BonusPaymentRecord(Base, IdMixin, TimestampMixin):
    """A calculated bonus awaiting or past approval."""

    __tablename__ = "bonus_payment"

    employee_id: Mapped[str] = mapped_column(String, nullable=False)
    bonus_type: Mapped[str] = mapped_column(String, nullable=False)
    gross_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    tax_withheld: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    net_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    super_contribution: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    tax_method: Mapped[str] = mapped_column(String, nullable=False)
    super_included: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    calculation_details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    approval_status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    approved_by: Mapped[str | None] = mapped_column(String, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("bonus_payment_employee_idx", "employee_id", "payment_date"),
        CheckConstraint(
            "approval_status IN ('pending', 'approved', 'paid', 'cancelled')",
            name="bonus_payment_status_check",
        ),
        CheckConstraint(
            "tax_method IN ('marginal-rates', 'average-rate')",
            name="bonus_payment_tax_method_check",
        ),
    )
