"""Statutory rate resolution with effective dating."""

from __future__ import annotations

from datetime import date

from award_engine.calculators.effective_dating import EffectiveDatedTable
from award_engine.calculators.errors import RateNotFoundError
from award_engine.calculators.types import RateType, StatutoryRate


class StatutoryRateResolver(EffectiveDatedTable[StatutoryRate]):
    """Resolves effective-dated statutory rates per rate type.

    Rate selection:
    - Only active rows of the requested type are candidates
    - ``effective_from`` is inclusive, ``effective_to`` exclusive
    - Exactly one candidate must cover the date; more than one is a
      configuration error, never a tie to break

    Threshold and bracket math is left to the caller; the resolver only
    returns the row.
    """

    def resolve(self, rate_type: RateType | str, on: date) -> StatutoryRate:
        """Resolve the statutory rate of a type effective on a date.

        Args:
            rate_type: The statutory rate type
            on: The calculation date

        Returns:
            The single applicable rate row

        Raises:
            RateNotFoundError: If no active rate covers the date
            AmbiguousRuleConfigurationError: If more than one rate covers it
        """
        rate_type = RateType(rate_type)
        rate = self.lookup(rate_type.value, on)
        if rate is None:
            raise RateNotFoundError(rate_type.value, on)
        return rate
