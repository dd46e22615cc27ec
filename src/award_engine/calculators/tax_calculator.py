"""PAYG bracket math over resolved statutory rate rows."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from award_engine.calculators.errors import InvalidRateConfigurationError
from award_engine.calculators.types import (
    BRACKETED_RATE_TYPES,
    ZERO,
    StatutoryRate,
    TaxBracket,
)


class TaxCalculator:
    """Calculates withholding from bracket schedules and flat statutory rates.

    PAYG withholding rows store brackets as annual-income thresholds:
    [
        {"threshold": 0, "rate": 0},
        {"threshold": 18200, "rate": 0.16},
        {"threshold": 45000, "rate": 0.30},
        ...
    ]
    Each bracket's rate applies to income from its threshold up to the next.
    """

    @staticmethod
    def _brackets(rate: StatutoryRate) -> list[TaxBracket]:
        if rate.rate_type not in BRACKETED_RATE_TYPES or not rate.brackets:
            raise InvalidRateConfigurationError(
                f"Statutory rate {rate.id} ({rate.rate_type.value}) has no bracket schedule",
                rate_id=rate.id,
            )
        return sorted(rate.brackets, key=lambda b: b.threshold)

    def marginal_rate(self, income: Decimal, rate: StatutoryRate) -> Decimal:
        """Rate of the bracket containing ``income``."""
        applicable = self._brackets(rate)[0]
        for bracket in self._brackets(rate):
            if income >= bracket.threshold:
                applicable = bracket
            else:
                break
        return applicable.rate

    def progressive_tax(self, income: Decimal, rate: StatutoryRate) -> Decimal:
        """Tax on ``income`` across all brackets."""
        if income <= 0:
            return Decimal("0.00")

        brackets = self._brackets(rate)
        total_tax = ZERO
        for current, following in zip(brackets, brackets[1:] + [None]):
            if income <= current.threshold:
                break
            upper = following.threshold if following is not None else income
            taxable_in_bracket = min(income, upper) - current.threshold
            if taxable_in_bracket > 0:
                total_tax += taxable_in_bracket * current.rate

        return total_tax.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def flat_amount(
        self,
        base: Decimal,
        rate: StatutoryRate,
        *,
        income: Decimal | None = None,
    ) -> Decimal:
        """Flat-rate amount on ``base``.

        When the row has a threshold, nothing is due unless ``income`` (or the
        base itself) reaches it.
        """
        if base <= 0:
            return Decimal("0.00")
        measured = base if income is None else income
        if rate.threshold is not None and measured < rate.threshold:
            return Decimal("0.00")
        return (base * rate.rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
