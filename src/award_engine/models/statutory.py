"""Statutory rate configuration model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Date, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from award_engine.calculators.types import RateType, StatutoryRate, TaxBracket
from award_engine.models.base import Base, IdMixin, TimestampMixin


class StatutoryRateRecord(Base, IdMixin, TimestampMixin):
    """Stored statutory rate row.

    ``brackets`` holds the PAYG schedule as
    ``[{"threshold": "18200", "rate": "0.16"}, ...]``.
    """

    __tablename__ = "statutory_rate"

    rate_type: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(9, 6), nullable=False)
    threshold: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    brackets: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("statutory_rate_type_idx", "rate_type", "effective_from"),
        CheckConstraint(
            "rate_type IN ('payg-withholding', 'superannuation-guarantee', "
            "'payroll-tax', 'workers-compensation', 'medicare-levy')",
            name="statutory_rate_type_check",
        ),
        CheckConstraint(
            "effective_to IS NULL OR effective_to > effective_from",
            name="statutory_rate_dates_check",
        ),
    )

    def to_domain(self) -> StatutoryRate:
        """Convert to the immutable rate used by the resolver."""
        return StatutoryRate(
            id=self.id,
            rate_type=RateType(self.rate_type),
            name=self.name,
            rate=Decimal(self.rate),
            threshold=Decimal(self.threshold) if self.threshold is not None else None,
            brackets=tuple(
                TaxBracket(threshold=Decimal(str(b["threshold"])), rate=Decimal(str(b["rate"])))
                for b in (self.brackets or ())
            ),
            effective_from=self.effective_from,
            effective_to=self.effective_to,
            is_active=self.is_active,
        )

    @staticmethod
    def columns_from_domain(rate: StatutoryRate) -> dict[str, Any]:
        """Column values for a domain rate (excluding timestamps)."""
        return {
            "id": rate.id,
            "rate_type": rate.rate_type.value,
            "name": rate.name,
            "rate": rate.rate,
            "threshold": rate.threshold,
            "brackets": [
                {"threshold": str(b.threshold), "rate": str(b.rate)} for b in rate.brackets
            ],
            "effective_from": rate.effective_from,
            "effective_to": rate.effective_to,
            "is_active": rate.is_active,
        }

    @classmethod
    def from_domain(cls, rate: StatutoryRate) -> StatutoryRateRecord:
        return cls(**cls.columns_from_domain(rate))
