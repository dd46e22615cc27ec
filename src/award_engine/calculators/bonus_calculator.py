"""Bonus and salary adjustment withholding."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from award_engine.calculators.errors import (
    InsufficientHistoryError,
    InvalidBonusRequestError,
)
from award_engine.calculators.rate_resolver import StatutoryRateResolver
from award_engine.calculators.tax_calculator import TaxCalculator
from award_engine.calculators.types import (
    ONE,
    ZERO,
    BonusRequest,
    BonusResult,
    BonusType,
    EarningsPeriod,
    RateType,
    TaxMethod,
)
from award_engine.config import get_settings

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
RATE_PRECISION = Decimal("0.000001")

# Days in the period a bonus type rewards, for pro-rata
FULL_PERIOD_DAYS: dict[BonusType, int] = {
    BonusType.COMMISSION: 91,
}
DEFAULT_FULL_PERIOD_DAYS = 365


def months_before(day: date, months: int) -> date:
    """Same day ``months`` earlier, clamped to the month's last day."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


class BonusCalculator:
    """Applies marginal-rate or average-rate withholding to one-off payments.

    Statutory rates come from the resolver for the payment date:
    - marginal-rates: PAYG bracket rate at the employee's annual income,
      applied to the full bonus
    - average-rate: trailing average of tax over gross from earnings history
    - superannuation guarantee on the gross when super is included
    - Medicare levy, when enabled, from the medicare-levy row
    """

    def __init__(
        self,
        rates: StatutoryRateResolver,
        tax_calculator: TaxCalculator | None = None,
        lookback_months: int | None = None,
        apply_medicare_levy: bool | None = None,
    ):
        settings = get_settings()
        self.rates = rates
        self.tax_calculator = tax_calculator or TaxCalculator()
        self.lookback_months = lookback_months or settings.average_rate_lookback_months
        self.apply_medicare_levy = (
            settings.bonus_apply_medicare_levy
            if apply_medicare_levy is None
            else apply_medicare_levy
        )

    @staticmethod
    def default_tax_method(bonus_type: BonusType) -> TaxMethod:
        """Tax method used when the request does not name one."""
        if bonus_type == BonusType.PROFIT_SHARING:
            return TaxMethod.AVERAGE_RATE
        return TaxMethod.MARGINAL_RATES

    @staticmethod
    def pro_rata_amount(bonus_type: BonusType, gross: Decimal, pro_rata_days: int | None) -> Decimal:
        """Scale the gross by days employed in the bonus period (capped at 100%)."""
        if not pro_rata_days or pro_rata_days <= 0:
            return gross
        full_days = FULL_PERIOD_DAYS.get(bonus_type, DEFAULT_FULL_PERIOD_DAYS)
        multiplier = min(ONE, Decimal(pro_rata_days) / Decimal(full_days))
        return _cents(gross * multiplier)

    def calculate(self, request: BonusRequest) -> BonusResult:
        """Calculate withholding, net and super for a bonus.

        Raises:
            InvalidBonusRequestError: Non-positive gross or missing income
            InsufficientHistoryError: average-rate without usable history
            RateNotFoundError: A required statutory rate is missing
            AmbiguousRuleConfigurationError: Overlapping statutory rates
        """
        if request.gross_amount <= 0:
            raise InvalidBonusRequestError(
                "Bonus amount must be greater than zero",
                employee_id=request.employee_id,
            )

        gross = self.pro_rata_amount(request.bonus_type, request.gross_amount, request.pro_rata_days)
        method = request.tax_method or self.default_tax_method(request.bonus_type)
        details: dict = {"original_amount": str(request.gross_amount)}

        if method == TaxMethod.MARGINAL_RATES:
            if request.annual_income is None:
                raise InvalidBonusRequestError(
                    "marginal-rates withholding requires the employee's annual income",
                    employee_id=request.employee_id,
                )
            payg = self.rates.resolve(RateType.PAYG_WITHHOLDING, request.payment_date)
            withholding_rate = self.tax_calculator.marginal_rate(request.annual_income, payg)
            details.update(
                payg_rate_id=payg.id,
                annual_income=str(request.annual_income),
                annual_tax_before_bonus=str(
                    self.tax_calculator.progressive_tax(request.annual_income, payg)
                ),
            )
        else:
            withholding_rate = self.average_rate(request.earnings_history, request.payment_date)

        tax_withheld = _cents(gross * withholding_rate)

        medicare_levy = ZERO
        if self.apply_medicare_levy:
            medicare = self.rates.resolve(RateType.MEDICARE_LEVY, request.payment_date)
            medicare_levy = self.tax_calculator.flat_amount(
                gross, medicare, income=request.annual_income
            )
            details["medicare_rate_id"] = medicare.id

        super_contribution = Decimal("0.00")
        if request.super_included:
            sg = self.rates.resolve(RateType.SUPERANNUATION_GUARANTEE, request.payment_date)
            super_contribution = _cents(gross * sg.rate)
            details["super_rate_id"] = sg.id

        total_withheld = tax_withheld + medicare_levy
        result = BonusResult(
            gross_amount=gross,
            tax_withheld=total_withheld,
            net_amount=gross - total_withheld,
            super_contribution=super_contribution,
            tax_method=method,
            withholding_rate=withholding_rate.quantize(RATE_PRECISION, rounding=ROUND_HALF_UP),
            medicare_levy=medicare_levy,
            details=details,
        )
        logger.debug(
            "Bonus for employee %s: gross %s, withheld %s (%s)",
            request.employee_id,
            result.gross_amount,
            result.tax_withheld,
            method.value,
        )
        return result

    def average_rate(
        self,
        history: Sequence[EarningsPeriod] | None,
        payment_date: date,
    ) -> Decimal:
        """Average tax rate over the lookback window ending at ``payment_date``.

        Raises:
            InsufficientHistoryError: No periods with positive gross in the window
        """
        window_start = months_before(payment_date, self.lookback_months)
        in_window = [
            p for p in (history or ()) if window_start < p.period_end <= payment_date
        ]
        total_gross = sum((p.gross for p in in_window), ZERO)
        if total_gross <= 0:
            raise InsufficientHistoryError(
                f"No earnings history between {window_start} and {payment_date} "
                "for average-rate withholding",
                window_start=window_start.isoformat(),
                payment_date=payment_date.isoformat(),
            )
        total_tax = sum((p.tax_withheld for p in in_window), ZERO)
        return total_tax / total_gross
